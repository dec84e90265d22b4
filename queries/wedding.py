"""Couple names, date and venue shown across the site."""

from __future__ import annotations

from models import WeddingDetails
from notifications import Toast
from query_cache import make_key
from schemas import WeddingDetailsUpdate, ensure_valid
from site_client import SiteClient

WEDDING_DETAILS_KEY = make_key("/api/wedding-details")


async def get_wedding_details(client: SiteClient) -> WeddingDetails:
    async def _load() -> WeddingDetails:
        return WeddingDetails.from_api(await client.http.query("/api/wedding-details"))

    return await client.cache.fetch(WEDDING_DETAILS_KEY, _load)


async def update_wedding_details(client: SiteClient, request: WeddingDetailsUpdate) -> WeddingDetails:
    payload = ensure_valid(request)

    async def _send() -> WeddingDetails:
        return WeddingDetails.from_api(await client.http.request("PATCH", "/api/wedding-details", payload))

    return await client.mutate(
        _send,
        invalidates=[WEDDING_DETAILS_KEY],
        success_toast=Toast("Detaily aktualizovány!", "Svatební detaily byly úspěšně uloženy"),
        error_title="Chyba při ukládání",
    )
