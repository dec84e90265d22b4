"""Tests for site_client.py and config.py wiring."""

from __future__ import annotations

import httpx
import pytest

from config import ProductionConfig, TestingConfig, get_config
from http_client import HttpError
from notifications import Toast
from site_client import SiteClient


class TestFromConfig:
    def test_from_config_class(self):
        client = SiteClient.from_config(TestingConfig)
        assert client.http.base_url == TestingConfig.API_BASE_URL
        assert client.cache.retry_limit == TestingConfig.QUERY_RETRY_LIMIT
        assert client.cache.retry_wait == 0

    def test_from_mapping(self):
        client = SiteClient.from_config({"API_BASE_URL": "https://svatba.example/", "QUERY_RETRY_LIMIT": 1})
        assert client.http.base_url == "https://svatba.example"
        assert client.cache.retry_limit == 1

    @pytest.mark.asyncio
    async def test_uses_transport(self, fake_api):
        fake_api.add("GET", "/api/schedule", (200, []))
        client = SiteClient.from_config(TestingConfig, transport=httpx.MockTransport(fake_api))
        assert await client.http.query("/api/schedule") == []
        await client.aclose()


class TestMutate:
    @pytest.mark.asyncio
    async def test_success_toast_can_depend_on_result(self, site_client, toasts):
        async def mutation():
            return 3

        await site_client.mutate(mutation, success_toast=lambda n: Toast(f"{n} hotovo"))
        assert toasts.last == Toast("3 hotovo")

    @pytest.mark.asyncio
    async def test_no_error_toast_without_title(self, site_client, toasts):
        async def mutation():
            raise HttpError(400, "bad")

        with pytest.raises(HttpError):
            await site_client.mutate(mutation)
        assert toasts.toasts == []


class TestConfig:
    def test_get_config_by_name(self):
        assert get_config("testing") is TestingConfig
        assert get_config("nonsense").__name__ == "DevelopmentConfig"

    def test_production_requires_secret(self, monkeypatch):
        monkeypatch.setattr(ProductionConfig, "SECRET_KEY", "dev-key-change-in-production")
        with pytest.raises(RuntimeError, match="SECRET_KEY"):
            ProductionConfig.validate()
