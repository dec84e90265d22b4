"""Editable site metadata (key/value settings). Writes are validated before sending."""

from __future__ import annotations

from urllib.parse import quote

from models import SiteMetadata
from query_cache import make_key
from schemas import CreateMetadataRequest, UpdateMetadataRequest, ensure_valid
from site_client import SiteClient

METADATA_KEY = make_key("/api/metadata")


def _url(meta_key: str) -> str:
    return f"/api/metadata/{quote(meta_key, safe='')}"


async def get_metadata(client: SiteClient) -> list[SiteMetadata]:
    async def _load() -> list[SiteMetadata]:
        return [SiteMetadata.from_api(m) for m in await client.http.query("/api/metadata") or []]

    return await client.cache.fetch(METADATA_KEY, _load)


async def get_metadata_by_key(client: SiteClient, meta_key: str) -> SiteMetadata:
    async def _load() -> SiteMetadata:
        return SiteMetadata.from_api(await client.http.query(_url(meta_key)))

    return await client.cache.fetch(make_key(*METADATA_KEY, meta_key), _load)


async def create_metadata(client: SiteClient, request: CreateMetadataRequest) -> SiteMetadata:
    payload = ensure_valid(request)

    async def _send() -> SiteMetadata:
        return SiteMetadata.from_api(await client.http.request("POST", "/api/metadata", payload))

    return await client.mutate(_send, invalidates=[METADATA_KEY])


async def update_metadata(
    client: SiteClient, meta_key: str, request: UpdateMetadataRequest
) -> SiteMetadata:
    payload = ensure_valid(request)

    async def _send() -> SiteMetadata:
        return SiteMetadata.from_api(await client.http.request("PATCH", _url(meta_key), payload))

    return await client.mutate(_send, invalidates=[METADATA_KEY])


async def delete_metadata(client: SiteClient, meta_key: str) -> None:
    async def _send() -> None:
        await client.http.request("DELETE", _url(meta_key))

    await client.mutate(_send, invalidates=[METADATA_KEY])
