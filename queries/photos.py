"""Photo gallery: listing, uploads, likes, comments and moderation."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from models import LikeResult, Photo, PhotoComment
from notifications import Toast
from query_cache import QueryKey, make_key
from site_client import SiteClient

PHOTOS_KEY = make_key("/api/photos")


def photos_key(approved: Optional[bool] = None) -> QueryKey:
    if approved is None:
        return PHOTOS_KEY
    return make_key("/api/photos", approved)


async def get_photos(client: SiteClient, approved: Optional[bool] = None) -> list[Photo]:
    url = "/api/photos"
    if approved is not None:
        url += f"?approved={'true' if approved else 'false'}"

    async def _load() -> list[Photo]:
        data = await client.http.query(url)
        return [Photo.from_api(p) for p in data or []]

    return await client.cache.fetch(photos_key(approved), _load)


async def upload_photos(client: SiteClient, files: list[tuple[str, bytes, str]]) -> list[Photo]:
    """Upload ``(filename, content, mimetype)`` triples in one multipart request."""

    async def _send() -> list[Photo]:
        data = await client.http.upload("/api/photos/upload", files)
        return [Photo.from_api(p) for p in data or []]

    return await client.mutate(
        _send,
        invalidates=[PHOTOS_KEY],
        success_toast=Toast("Úspěch!", "Fotky byly úspěšně nahrány"),
        error_title="Chyba při nahrávání",
    )


def _patch_photo_likes(client: SiteClient, photo_id: int, likes: int) -> None:
    """Patch the like count in every cached photo list.

    Comment lists and enhancement results share the key prefix; they are left alone.
    """
    for key in client.cache.keys(PHOTOS_KEY):
        photos = client.cache.get_query_data(key)
        if not isinstance(photos, list) or not all(isinstance(p, Photo) for p in photos):
            continue
        client.cache.set_query_data(
            key, [replace(p, likes=likes) if p.id == photo_id else p for p in photos]
        )


async def toggle_photo_like(client: SiteClient, photo_id: int) -> LikeResult:
    async def _send() -> LikeResult:
        return LikeResult.from_api(await client.http.request("POST", f"/api/photos/{photo_id}/like"))

    return await client.mutate(
        _send,
        on_success=lambda result: _patch_photo_likes(client, photo_id, result.likes),
    )


def comments_key(photo_id: int) -> QueryKey:
    return make_key("/api/photos", photo_id, "comments")


async def get_photo_comments(client: SiteClient, photo_id: int) -> list[PhotoComment]:
    """Comments on one photo, oldest first."""

    async def _load() -> list[PhotoComment]:
        data = await client.http.query(f"/api/photos/{photo_id}/comments")
        return [PhotoComment.from_api(c) for c in data or []]

    return await client.cache.fetch(comments_key(photo_id), _load)


async def add_photo_comment(client: SiteClient, photo_id: int, author: str, text: str) -> PhotoComment:
    async def _send() -> PhotoComment:
        data = await client.http.request(
            "POST", f"/api/photos/{photo_id}/comments", {"author": author, "text": text}
        )
        return PhotoComment.from_api(data)

    return await client.mutate(
        _send,
        invalidates=[comments_key(photo_id)],
        success_toast=Toast("Komentář přidán", "Váš komentář byl úspěšně přidán"),
        error_title="Chyba při přidávání komentáře",
    )


async def delete_photo(client: SiteClient, photo_id: int) -> None:
    async def _send() -> None:
        await client.http.request("DELETE", f"/api/photos/{photo_id}")

    await client.mutate(
        _send,
        invalidates=[PHOTOS_KEY],
        success_toast=Toast("Fotka smazána", "Fotka byla úspěšně smazána"),
        error_title="Chyba při mazání",
    )


async def approve_photo(client: SiteClient, photo_id: int) -> None:
    async def _send() -> None:
        await client.http.request("PATCH", f"/api/photos/{photo_id}/approve")

    await client.mutate(
        _send,
        invalidates=[PHOTOS_KEY],
        success_toast=Toast("Fotka schválena", "Fotka byla úspěšně schválena"),
        error_title="Chyba při schvalování",
    )
