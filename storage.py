"""Record store behind the REST blueprints.

Records are kept as camelCase dicts, exactly the JSON shapes the API
returns. ``InMemoryStorage`` is lock-guarded so it can sit behind a threaded
WSGI server; a database-backed store only has to satisfy ``Storage``.

Usage:
    from storage import init_storage, get_storage
    init_storage(app)          # called once in create_app()
    store = get_storage()      # inside a request
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from flask import Flask, current_app

logger = logging.getLogger(__name__)

Record = dict[str, Any]

DEFAULT_WEDDING_DETAILS: Record = {
    "coupleNames": "Marcela & Zbyněk",
    "weddingDate": "2025-10-11T14:00:00",
    "venue": "Stará pošta, Kovalovice",
    "venueAddress": "Kovalovice 109, 664 07 Kovalovice",
    "allowUploads": True,
    "moderateUploads": False,
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ── Protocol ───────────────────────────────────────────────

class Storage(Protocol):
    def get_wedding_details(self) -> Optional[Record]: ...
    def create_wedding_details(self, data: Record) -> Record: ...
    def update_wedding_details(self, updates: Record) -> Optional[Record]: ...

    def list_photos(self, approved: Optional[bool] = None,
                    limit: Optional[int] = None, offset: int = 0) -> list[Record]: ...
    def count_photos(self, approved: Optional[bool] = None) -> int: ...
    def create_photo(self, data: Record) -> Record: ...
    def approve_photo(self, photo_id: int) -> Optional[Record]: ...
    def delete_photo(self, photo_id: int) -> Optional[Record]: ...
    def toggle_photo_like(self, photo_id: int, session: str) -> Optional[Record]: ...
    def list_photo_comments(self, photo_id: int) -> list[Record]: ...
    def add_photo_comment(self, photo_id: int, author: str, text: str) -> Optional[Record]: ...

    def list_songs(self) -> list[Record]: ...
    def create_song(self, data: Record) -> Record: ...
    def toggle_song_like(self, song_id: int, session: str) -> Optional[Record]: ...
    def delete_song(self, song_id: int) -> bool: ...

    def list_metadata(self, key: Optional[str] = None) -> list[Record]: ...
    def get_metadata(self, key: str) -> Optional[Record]: ...
    def set_metadata(self, data: Record) -> Record: ...
    def update_metadata(self, key: str, updates: Record) -> Optional[Record]: ...
    def delete_metadata(self, key: str) -> bool: ...

    def list_schedule(self) -> list[Record]: ...
    def create_schedule_item(self, data: Record) -> Record: ...
    def update_schedule_item(self, item_id: int, updates: Record) -> Optional[Record]: ...
    def delete_schedule_item(self, item_id: int) -> bool: ...


# ── In-Memory Implementation ──────────────────────────────

class InMemoryStorage:
    """Dict-backed store. Every public method returns copies."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._details: Optional[Record] = None
        self._photos: dict[int, Record] = {}
        self._comments: dict[int, Record] = {}
        self._songs: dict[int, Record] = {}
        self._metadata: dict[str, Record] = {}
        self._schedule: dict[int, Record] = {}
        self._photo_likes: set[tuple[int, str]] = set()
        self._song_likes: set[tuple[int, str]] = set()

    def _next_id(self) -> int:
        return next(self._ids)

    # ── wedding details ────────────────────────────────────

    def get_wedding_details(self) -> Optional[Record]:
        with self._lock:
            return copy.deepcopy(self._details)

    def create_wedding_details(self, data: Record) -> Record:
        with self._lock:
            self._details = {**data, "id": self._next_id(), "updatedAt": _now()}
            return copy.deepcopy(self._details)

    def update_wedding_details(self, updates: Record) -> Optional[Record]:
        with self._lock:
            if self._details is None:
                return None
            self._details.update(updates, updatedAt=_now())
            return copy.deepcopy(self._details)

    # ── photos ─────────────────────────────────────────────

    def _photos_matching(self, approved: Optional[bool]) -> list[Record]:
        photos = [p for p in self._photos.values() if approved is None or p["approved"] == approved]
        return sorted(photos, key=lambda p: (p["uploadedAt"], p["id"]), reverse=True)

    def list_photos(self, approved: Optional[bool] = None,
                    limit: Optional[int] = None, offset: int = 0) -> list[Record]:
        with self._lock:
            photos = self._photos_matching(approved)
            end = None if limit is None else offset + limit
            return copy.deepcopy(photos[offset:end])

    def count_photos(self, approved: Optional[bool] = None) -> int:
        with self._lock:
            return len(self._photos_matching(approved))

    def create_photo(self, data: Record) -> Record:
        with self._lock:
            photo = {
                "likes": 0,
                "approved": True,
                **data,
                "id": self._next_id(),
                "uploadedAt": _now(),
            }
            self._photos[photo["id"]] = photo
            return copy.deepcopy(photo)

    def approve_photo(self, photo_id: int) -> Optional[Record]:
        with self._lock:
            photo = self._photos.get(photo_id)
            if photo is None:
                return None
            photo["approved"] = True
            return copy.deepcopy(photo)

    def delete_photo(self, photo_id: int) -> Optional[Record]:
        with self._lock:
            photo = self._photos.pop(photo_id, None)
            self._photo_likes = {like for like in self._photo_likes if like[0] != photo_id}
            self._comments = {k: c for k, c in self._comments.items() if c["photoId"] != photo_id}
            return photo

    def toggle_photo_like(self, photo_id: int, session: str) -> Optional[Record]:
        with self._lock:
            photo = self._photos.get(photo_id)
            if photo is None:
                return None
            return _toggle(photo, self._photo_likes, (photo_id, session))

    def list_photo_comments(self, photo_id: int) -> list[Record]:
        """Oldest first."""
        with self._lock:
            comments = [c for c in self._comments.values() if c["photoId"] == photo_id]
            comments.sort(key=lambda c: (c["createdAt"], c["id"]))
            return copy.deepcopy(comments)

    def add_photo_comment(self, photo_id: int, author: str, text: str) -> Optional[Record]:
        with self._lock:
            if photo_id not in self._photos:
                return None
            comment = {
                "id": self._next_id(),
                "photoId": photo_id,
                "author": author,
                "text": text,
                "createdAt": _now(),
            }
            self._comments[comment["id"]] = comment
            return copy.deepcopy(comment)

    # ── playlist ───────────────────────────────────────────

    def list_songs(self) -> list[Record]:
        with self._lock:
            songs = [s for s in self._songs.values() if s["approved"]]
            songs.sort(key=lambda s: (s["submittedAt"], s["id"]), reverse=True)
            return copy.deepcopy(songs)

    def create_song(self, data: Record) -> Record:
        with self._lock:
            song = {
                "artist": None,
                "approved": True,
                **data,
                "id": self._next_id(),
                "likes": 0,
                "submittedAt": _now(),
            }
            self._songs[song["id"]] = song
            return copy.deepcopy(song)

    def toggle_song_like(self, song_id: int, session: str) -> Optional[Record]:
        with self._lock:
            song = self._songs.get(song_id)
            if song is None:
                return None
            return _toggle(song, self._song_likes, (song_id, session))

    def delete_song(self, song_id: int) -> bool:
        with self._lock:
            self._song_likes = {like for like in self._song_likes if like[0] != song_id}
            return self._songs.pop(song_id, None) is not None

    # ── metadata ───────────────────────────────────────────

    def list_metadata(self, key: Optional[str] = None) -> list[Record]:
        with self._lock:
            return copy.deepcopy([m for k, m in self._metadata.items() if key is None or k == key])

    def get_metadata(self, key: str) -> Optional[Record]:
        with self._lock:
            return copy.deepcopy(self._metadata.get(key))

    def set_metadata(self, data: Record) -> Record:
        """Create, or overwrite the record with the same ``metaKey``."""
        with self._lock:
            existing = self._metadata.get(data["metaKey"])
            if existing is not None:
                existing.update(data, updatedAt=_now())
                return copy.deepcopy(existing)
            now = _now()
            record = {
                "metaValue": None,
                "metaType": "string",
                "description": None,
                "category": "general",
                "isEditable": True,
                **data,
                "id": self._next_id(),
                "createdAt": now,
                "updatedAt": now,
            }
            self._metadata[record["metaKey"]] = record
            return copy.deepcopy(record)

    def update_metadata(self, key: str, updates: Record) -> Optional[Record]:
        with self._lock:
            record = self._metadata.get(key)
            if record is None:
                return None
            new_key = updates.get("metaKey", key)
            if new_key != key and new_key in self._metadata:
                raise ValueError(f"Metadata key '{new_key}' already exists")
            record.update(updates, updatedAt=_now())
            if new_key != key:
                self._metadata[new_key] = self._metadata.pop(key)
            return copy.deepcopy(record)

    def delete_metadata(self, key: str) -> bool:
        with self._lock:
            return self._metadata.pop(key, None) is not None

    # ── schedule ───────────────────────────────────────────

    def list_schedule(self) -> list[Record]:
        """Active items in ``orderIndex`` order."""
        with self._lock:
            items = [i for i in self._schedule.values() if i["isActive"]]
            items.sort(key=lambda i: (i["orderIndex"], i["id"]))
            return copy.deepcopy(items)

    def create_schedule_item(self, data: Record) -> Record:
        with self._lock:
            now = _now()
            item = {
                "description": None,
                "isActive": True,
                **data,
                "id": self._next_id(),
                "createdAt": now,
                "updatedAt": now,
            }
            self._schedule[item["id"]] = item
            return copy.deepcopy(item)

    def update_schedule_item(self, item_id: int, updates: Record) -> Optional[Record]:
        with self._lock:
            item = self._schedule.get(item_id)
            if item is None:
                return None
            item.update(updates, updatedAt=_now())
            return copy.deepcopy(item)

    def delete_schedule_item(self, item_id: int) -> bool:
        with self._lock:
            return self._schedule.pop(item_id, None) is not None


def _toggle(record: Record, likes: set[tuple[int, str]], like: tuple[int, str]) -> Record:
    """Flip one session's like on a record. Caller holds the lock."""
    if like in likes:
        likes.discard(like)
        record["likes"] = max(record["likes"] - 1, 0)
        return {"liked": False, "likes": record["likes"]}
    likes.add(like)
    record["likes"] += 1
    return {"liked": True, "likes": record["likes"]}


# ── Flask integration ──────────────────────────────────────

def init_storage(app: Flask, storage: Optional[Storage] = None) -> None:
    app.extensions["storage"] = storage if storage is not None else InMemoryStorage()
    logger.info("Storage backend: %s", type(app.extensions["storage"]).__name__)


def get_storage() -> Storage:
    return current_app.extensions["storage"]
