"""
Test fixtures for the wedding site.

Provides the Flask app/client with an in-memory store, and a SiteClient
wired to FakeApi through httpx.MockTransport so tests can count outbound calls.
"""

from __future__ import annotations

import asyncio
import io
from typing import Any

import httpx
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from http_client import ApiClient
from notifications import ToastLog
from query_cache import QueryCache
from site_client import SiteClient
from storage import InMemoryStorage


class FakeApi:
    """Scripted REST API. Each route replays its responses; the last one repeats."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[tuple[int, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: tuple[int, Any]) -> None:
        self.routes[(method, path)] = list(responses)

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # Let concurrent callers interleave before the response arrives.
        await asyncio.sleep(0)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "Not found"})
        status, body = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def toasts():
    return ToastLog()


@pytest.fixture
def site_client(fake_api, toasts):
    """SiteClient against FakeApi, with retries that do not sleep."""
    return SiteClient(
        http=ApiClient("http://testserver", transport=httpx.MockTransport(fake_api)),
        cache=QueryCache(retry_limit=3, retry_wait=0),
        notifier=toasts,
    )


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def app(tmp_path, storage):
    """App with in-memory storage and uploads under tmp_path."""
    from app import create_app

    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
    }, storage=storage)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def image_upload(name: str = "photo.jpg", mimetype: str = "image/jpeg", size: int = 1024):
    """A (stream, filename, content_type) tuple for the Flask test client."""
    return (io.BytesIO(b"\xff\xd8\xff" + b"0" * (size - 3)), name, mimetype)
