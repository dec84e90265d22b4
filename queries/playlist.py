"""Song-request playlist."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from models import LikeResult, PlaylistSong
from notifications import Toast
from query_cache import make_key
from site_client import SiteClient

PLAYLIST_KEY = make_key("/api/playlist")


async def get_playlist(client: SiteClient) -> list[PlaylistSong]:
    async def _load() -> list[PlaylistSong]:
        data = await client.http.query("/api/playlist")
        return [PlaylistSong.from_api(s) for s in data or []]

    return await client.cache.fetch(PLAYLIST_KEY, _load)


async def add_song(
    client: SiteClient,
    suggestion: str,
    title: Optional[str] = None,
    artist: Optional[str] = None,
) -> PlaylistSong:
    body = {"suggestion": suggestion}
    if title:
        body["title"] = title
    if artist:
        body["artist"] = artist

    async def _send() -> PlaylistSong:
        return PlaylistSong.from_api(await client.http.request("POST", "/api/playlist", body))

    return await client.mutate(
        _send,
        invalidates=[PLAYLIST_KEY],
        success_toast=Toast("Skladba přidána!", "Váš návrh byl úspěšně přidán do playlistu"),
        error_title="Chyba při přidávání skladby",
    )


def _with_likes(song_id: int, likes: int):
    def _update(songs: Optional[list[PlaylistSong]]) -> Optional[list[PlaylistSong]]:
        if songs is None:
            return None
        return [replace(s, likes=likes) if s.id == song_id else s for s in songs]
    return _update


async def toggle_song_like(client: SiteClient, song_id: int) -> LikeResult:
    """Toggle the guest's like; the cached playlist is patched without a refetch."""

    async def _send() -> LikeResult:
        return LikeResult.from_api(await client.http.request("POST", f"/api/playlist/{song_id}/like"))

    return await client.mutate(
        _send,
        on_success=lambda result: client.cache.set_query_data(
            PLAYLIST_KEY, _with_likes(song_id, result.likes)
        ),
    )


async def delete_song(client: SiteClient, song_id: int) -> None:
    async def _send() -> None:
        await client.http.request("DELETE", f"/api/playlist/{song_id}")

    await client.mutate(
        _send,
        invalidates=[PLAYLIST_KEY],
        success_toast=Toast("Skladba smazána", "Skladba byla úspěšně odstraněna z playlistu"),
        error_title="Chyba při mazání skladby",
    )
