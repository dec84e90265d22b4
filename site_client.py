"""
SiteClient: the dependency bundle every query function receives.

Holds the HTTP client, the query cache and the notifier. Build one per
process (``SiteClient.from_config``) or per test; nothing here is global.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

import httpx

from http_client import ApiClient
from notifications import ErrorCode, Notifier, Toast, ToastLog, describe_error
from query_cache import QueryCache, QueryKey


@dataclass
class SiteClient:
    http: ApiClient
    cache: QueryCache = field(default_factory=QueryCache)
    notifier: Notifier = field(default_factory=ToastLog)

    @classmethod
    def from_config(
        cls,
        config: Any,
        notifier: Notifier | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SiteClient:
        """Build from a config class or a Flask ``app.config`` mapping."""
        get = config.get if isinstance(config, dict) else (lambda k, d=None: getattr(config, k, d))
        return cls(
            http=ApiClient(
                get("API_BASE_URL", "http://localhost:5000"),
                timeout=get("REQUEST_TIMEOUT", 30.0),
                transport=transport,
            ),
            cache=QueryCache(
                retry_limit=get("QUERY_RETRY_LIMIT", 3),
                retry_wait=get("QUERY_RETRY_WAIT", 1.0),
            ),
            notifier=notifier or ToastLog(),
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    def toast(self, title: str, description: str = "", variant: str = "default") -> None:
        self.notifier.notify(Toast(title, description, variant))

    async def mutate(
        self,
        mutation: Callable[[], Awaitable[Any]],
        *,
        invalidates: Iterable[QueryKey] = (),
        on_success: Callable[[Any], None] | None = None,
        success_toast: Callable[[Any], Toast] | Toast | None = None,
        error_title: str | None = None,
        friendly_errors: dict[ErrorCode, str | None] | None = None,
    ) -> Any:
        """Run a mutation through the cache, adding success/error toasts."""

        def _succeeded(result: Any) -> None:
            if on_success is not None:
                on_success(result)
            if success_toast is not None:
                toast = success_toast(result) if callable(success_toast) else success_toast
                self.notifier.notify(toast)

        def _failed(exc: Exception) -> None:
            if error_title is not None:
                self.toast(error_title, describe_error(exc, friendly_errors), "destructive")

        return await self.cache.mutate(
            mutation,
            invalidates=invalidates,
            on_success=_succeeded,
            on_error=_failed,
        )
