"""Tests for storage.py: InMemoryStorage."""

from __future__ import annotations

import threading

import pytest

from storage import InMemoryStorage


@pytest.fixture
def store():
    return InMemoryStorage()


class TestPhotos:
    def test_newest_first_and_filtered(self, store):
        a = store.create_photo({"filename": "a.jpg", "url": "/a"})
        b = store.create_photo({"filename": "b.jpg", "url": "/b", "approved": False})
        assert [p["id"] for p in store.list_photos()] == [b["id"], a["id"]]
        assert [p["id"] for p in store.list_photos(approved=True)] == [a["id"]]
        assert store.count_photos(approved=False) == 1

    def test_returns_copies(self, store):
        photo = store.create_photo({"filename": "a.jpg", "url": "/a"})
        photo["likes"] = 99
        assert store.list_photos()[0]["likes"] == 0

    def test_like_never_negative(self, store):
        photo = store.create_photo({"filename": "a.jpg", "url": "/a"})
        assert store.toggle_photo_like(photo["id"], "s1") == {"liked": True, "likes": 1}
        assert store.toggle_photo_like(photo["id"], "s1") == {"liked": False, "likes": 0}
        assert store.toggle_photo_like(12345, "s1") is None

    def test_concurrent_likes(self, store):
        photo = store.create_photo({"filename": "a.jpg", "url": "/a"})
        threads = [
            threading.Thread(target=store.toggle_photo_like, args=(photo["id"], f"guest-{i}"))
            for i in range(50)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert store.list_photos()[0]["likes"] == 50


class TestPhotoComments:
    def test_oldest_first_per_photo(self, store):
        a = store.create_photo({"filename": "a.jpg", "url": "/a"})
        b = store.create_photo({"filename": "b.jpg", "url": "/b"})
        store.add_photo_comment(a["id"], "Petr", "první")
        store.add_photo_comment(b["id"], "Jana", "jinde")
        store.add_photo_comment(a["id"], "Jana", "druhý")
        assert [c["text"] for c in store.list_photo_comments(a["id"])] == ["první", "druhý"]

    def test_missing_photo(self, store):
        assert store.add_photo_comment(404, "Petr", "Ahoj") is None
        assert store.list_photo_comments(404) == []


class TestMetadata:
    def test_rename_key(self, store):
        store.set_metadata({"metaKey": "old"})
        store.update_metadata("old", {"metaKey": "new"})
        assert store.get_metadata("old") is None
        assert store.get_metadata("new")["metaKey"] == "new"

    def test_rename_onto_existing_key(self, store):
        store.set_metadata({"metaKey": "a"})
        store.set_metadata({"metaKey": "b"})
        with pytest.raises(ValueError):
            store.update_metadata("a", {"metaKey": "b"})


class TestWeddingDetails:
    def test_update_before_create(self, store):
        assert store.update_wedding_details({"venue": "x"}) is None

    def test_update(self, store):
        store.create_wedding_details({"coupleNames": "A & B", "venue": "x"})
        assert store.update_wedding_details({"venue": "y"})["venue"] == "y"
