"""Async HTTP client for the wedding site REST API.

Two request paths share one ``httpx.AsyncClient``:

- ``request()`` is used by hand-written calls. A failing response becomes an
  ``HttpError`` whose message comes from the JSON body's ``message`` field,
  falling back to the status text.
- ``query()`` is the generic read used by cached queries. It can return
  ``None`` on 401 so callers can tell "not signed in" from a real error.

Every failure is logged before it is raised to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

UnauthorizedBehavior = Literal["throw", "return_null"]


class HttpError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status: int, message: str, code: Optional[str] = None):
        self.status = status
        self.message = message
        self.code = code
        super().__init__(f"{status}: {message}")

    @property
    def is_transient(self) -> bool:
        return self.status >= 500 or self.status == 429


class NotFoundError(HttpError):
    """404: the resource does not exist. Never worth retrying."""


class EnhancementNotFoundError(NotFoundError):
    """The photo has not been analysed yet."""

    def __init__(self, photo_id: int):
        self.photo_id = photo_id
        super().__init__(404, f"No enhancement analysis for photo {photo_id}", code="ENHANCEMENT_NOT_FOUND")


def _error_for(status: int, message: str, code: Optional[str] = None) -> HttpError:
    if status == 404:
        return NotFoundError(status, message, code)
    return HttpError(status, message, code)


def _error_from_json(response: httpx.Response, prefix: str = "") -> HttpError:
    """Build an HttpError from a ``{"message", "code"?}`` body or the status text."""
    message = response.reason_phrase
    code = None
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("message") or message
        code = data.get("code")
    return _error_for(response.status_code, f"{prefix}{message}", code)


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """Thin wrapper around ``httpx.AsyncClient`` bound to the API base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            logger.error("API request failed: %s %s (%s)", method, url, exc)
            raise

    async def request(self, method: str, url: str, body: Any = None) -> Any:
        """Send a request and return the parsed body, or raise HttpError."""
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body
        response = await self._send(method, url, **kwargs)

        if not response.is_success:
            error = _error_from_json(response)
            logger.error("API request failed: %s %s -> %s", method, url, error)
            raise error

        return _parse_body(response)

    async def query(self, url: str, on_401: UnauthorizedBehavior = "throw") -> Any:
        """Generic GET for cached queries."""
        response = await self._send("GET", url)

        if on_401 == "return_null" and response.status_code == 401:
            return None

        if not response.is_success:
            error = _error_for(response.status_code, response.text or response.reason_phrase)
            logger.error("API query failed: GET %s -> %s", url, error)
            raise error

        return _parse_body(response)

    async def upload(self, url: str, files: list[tuple[str, bytes, str]], field: str = "photos") -> Any:
        """POST a multipart form of ``(filename, content, mimetype)`` triples."""
        multipart = [(field, (name, content, mimetype)) for name, content, mimetype in files]
        response = await self._send("POST", url, files=multipart)

        if not response.is_success:
            error = _error_from_json(response, prefix="Upload failed: ")
            logger.error("Photo upload error: POST %s -> %s", url, error)
            raise error

        return _parse_body(response)
