"""Tests for the queries package against FakeApi."""

from __future__ import annotations

import json

import pytest

from http_client import EnhancementNotFoundError, HttpError
from models import PlaylistSong
from queries import enhancement, gamification, metadata, photos, playlist, schedule, wedding
from schemas import (
    CreateMetadataRequest,
    RequestValidationError,
    ScheduleItemRequest,
    UpdateMetadataRequest,
    WeddingDetailsUpdate,
)

SONGS = [
    {"id": 1, "title": "Perfect", "artist": "Ed Sheeran", "suggestion": "Ed Sheeran - Perfect", "likes": 2},
    {"id": 2, "title": "Holky z naší školky", "suggestion": "Holky z naší školky", "likes": 0},
]

PHOTOS = [
    {"id": 10, "filename": "a.jpg", "url": "/uploads/a.jpg", "likes": 1, "approved": True},
    {"id": 11, "filename": "b.jpg", "url": "/uploads/b.jpg", "likes": 0, "approved": True},
]

ANALYSIS = {
    "id": 3,
    "photoId": 10,
    "overallScore": 7,
    "suggestions": [
        {"category": "lighting", "severity": "medium", "title": "Podexponováno"},
        {"category": "composition", "severity": "low", "title": "Náklon"},
    ],
    "strengths": ["Ostrost"],
    "isVisible": True,
}


class TestPlaylist:
    @pytest.mark.asyncio
    async def test_add_song_invalidates_playlist(self, site_client, fake_api, toasts):
        fake_api.add("GET", "/api/playlist", (200, SONGS))
        fake_api.add("POST", "/api/playlist", (200, {"id": 3, "title": "Perfect", "suggestion": "Perfect"}))

        songs = await playlist.get_playlist(site_client)
        assert [s.id for s in songs] == [1, 2]
        await playlist.get_playlist(site_client)
        assert fake_api.count("GET", "/api/playlist") == 1

        song = await playlist.add_song(site_client, "Perfect")
        assert song.id == 3
        assert toasts.last.title == "Skladba přidána!"

        await playlist.get_playlist(site_client)
        assert fake_api.count("GET", "/api/playlist") == 2

    @pytest.mark.asyncio
    async def test_toggle_like_patches_cache_without_refetch(self, site_client, fake_api, toasts):
        fake_api.add("GET", "/api/playlist", (200, SONGS))
        fake_api.add("POST", "/api/playlist/2/like", (200, {"liked": True, "likes": 1}))

        await playlist.get_playlist(site_client)
        result = await playlist.toggle_song_like(site_client, 2)
        assert result.liked is True

        songs = await playlist.get_playlist(site_client)
        assert fake_api.count("GET", "/api/playlist") == 1
        assert [s.likes for s in songs] == [2, 1]
        assert isinstance(songs[1], PlaylistSong)
        assert toasts.toasts == []

    @pytest.mark.asyncio
    async def test_toggle_like_without_cached_playlist(self, site_client, fake_api):
        fake_api.add("POST", "/api/playlist/1/like", (200, {"liked": False, "likes": 1}))
        await playlist.toggle_song_like(site_client, 1)
        assert site_client.cache.get_query_data(playlist.PLAYLIST_KEY) is None

    @pytest.mark.asyncio
    async def test_delete_failure_shows_error_toast(self, site_client, fake_api, toasts):
        fake_api.add("DELETE", "/api/playlist/1", (500, {"message": "Failed to delete song"}))
        with pytest.raises(HttpError):
            await playlist.delete_song(site_client, 1)
        assert toasts.last.title == "Chyba při mazání skladby"
        assert toasts.last.description == "Failed to delete song"
        assert toasts.last.variant == "destructive"
        assert fake_api.count("DELETE", "/api/playlist/1") == 1


class TestPhotos:
    @pytest.mark.asyncio
    async def test_like_patches_every_cached_list(self, site_client, fake_api):
        fake_api.add("GET", "/api/photos", (200, PHOTOS))
        fake_api.add("POST", "/api/photos/10/like", (200, {"liked": True, "likes": 2}))

        await photos.get_photos(site_client)
        await photos.get_photos(site_client, approved=True)
        await photos.toggle_photo_like(site_client, 10)

        for approved in (None, True):
            cached = site_client.cache.get_query_data(photos.photos_key(approved))
            assert cached[0].likes == 2
        assert fake_api.count("GET", "/api/photos") == 2

    @pytest.mark.asyncio
    async def test_upload_invalidates_all_photo_lists(self, site_client, fake_api, toasts):
        fake_api.add("GET", "/api/photos", (200, PHOTOS))
        fake_api.add("POST", "/api/photos/upload", (200, [{"id": 12, "filename": "c.jpg", "url": "/uploads/c.jpg"}]))

        await photos.get_photos(site_client, approved=True)
        created = await photos.upload_photos(site_client, [("c.jpg", b"\xff\xd8\xff", "image/jpeg")])
        assert [p.id for p in created] == [12]
        assert toasts.last.title == "Úspěch!"
        assert site_client.cache.keys(photos.PHOTOS_KEY) == []

    @pytest.mark.asyncio
    async def test_add_comment_refetches_comments(self, site_client, fake_api, toasts):
        first = {"id": 1, "photoId": 10, "author": "Petr", "text": "Ahoj"}
        second = {"id": 2, "photoId": 10, "author": "Jana", "text": "Krása"}
        fake_api.add("GET", "/api/photos/10/comments", (200, [first]), (200, [first, second]))
        fake_api.add("POST", "/api/photos/10/comments", (200, second))

        comments = await photos.get_photo_comments(site_client, 10)
        assert [c.author for c in comments] == ["Petr"]

        created = await photos.add_photo_comment(site_client, 10, "Jana", "Krása")
        assert created.id == 2
        assert json.loads(fake_api.last.content) == {"author": "Jana", "text": "Krása"}
        assert toasts.last.title == "Komentář přidán"

        comments = await photos.get_photo_comments(site_client, 10)
        assert [c.author for c in comments] == ["Petr", "Jana"]
        assert fake_api.count("GET", "/api/photos/10/comments") == 2

    @pytest.mark.asyncio
    async def test_like_leaves_cached_comments_alone(self, site_client, fake_api):
        fake_api.add("GET", "/api/photos/10/comments", (200, [
            {"id": 10, "photoId": 10, "author": "Petr", "text": "Ahoj"},
        ]))
        fake_api.add("POST", "/api/photos/10/like", (200, {"liked": True, "likes": 2}))

        await photos.get_photo_comments(site_client, 10)
        await photos.toggle_photo_like(site_client, 10)
        cached = site_client.cache.get_query_data(photos.comments_key(10))
        assert cached[0].text == "Ahoj"

    @pytest.mark.asyncio
    async def test_approve(self, site_client, fake_api, toasts):
        fake_api.add("PATCH", "/api/photos/11/approve", (200, {"message": "Photo approved successfully"}))
        await photos.approve_photo(site_client, 11)
        assert toasts.last.title == "Fotka schválena"


class TestEnhancement:
    @pytest.mark.asyncio
    async def test_not_found_raises_sentinel_without_retry(self, site_client, fake_api):
        fake_api.add("GET", "/api/photos/10/enhancement", (404, {"message": "Enhancement analysis not found"}))
        with pytest.raises(EnhancementNotFoundError) as exc_info:
            await enhancement.get_photo_enhancement(site_client, 10)
        assert exc_info.value.photo_id == 10
        assert fake_api.count("GET", "/api/photos/10/enhancement") == 1

    @pytest.mark.asyncio
    async def test_transient_errors_retried(self, site_client, fake_api):
        fake_api.add("GET", "/api/photos/10/enhancement", (503, {"message": "busy"}), (200, ANALYSIS))
        result = await enhancement.get_photo_enhancement(site_client, 10)
        assert result.overall_score == 7
        assert fake_api.count("GET", "/api/photos/10/enhancement") == 2

    @pytest.mark.asyncio
    async def test_analyze_stores_result_and_summarises(self, site_client, fake_api, toasts):
        fake_api.add("POST", "/api/photos/10/analyze", (200, ANALYSIS))
        await enhancement.analyze_photo(site_client, 10)

        cached = await enhancement.get_photo_enhancement(site_client, 10)
        assert cached.id == 3
        assert fake_api.count("GET", "/api/photos/10/enhancement") == 0
        assert toasts.last.title == "Analýza dokončena"
        assert toasts.last.description == "Celkové skóre: 7/10. Nalezeno 2 návrhů na vylepšení."

    @pytest.mark.asyncio
    async def test_analysis_quota_error_uses_friendly_text(self, site_client, fake_api, toasts):
        fake_api.add("POST", "/api/photos/10/reanalyze", (429, {"message": "quota exceeded"}))
        with pytest.raises(HttpError):
            await enhancement.reanalyze_photo(site_client, 10)
        assert toasts.last.title == "Chyba při znovuanalýze"
        assert toasts.last.description.startswith("AI služby jsou dočasně nedostupné")

    @pytest.mark.asyncio
    async def test_visibility_update_invalidates(self, site_client, fake_api, toasts):
        fake_api.add("POST", "/api/photos/10/analyze", (200, ANALYSIS))
        fake_api.add("PATCH", "/api/photos/10/enhancement/visibility", (200, {**ANALYSIS, "isVisible": False}))
        await enhancement.analyze_photo(site_client, 10)

        await enhancement.update_enhancement_visibility(site_client, 10, False)
        assert json.loads(fake_api.last.content) == {"isVisible": False}
        assert site_client.cache.get_query_data(enhancement.enhancement_key(10)) is None
        assert toasts.last.title == "Návrhy skryty"


class TestGamification:
    @pytest.mark.asyncio
    async def test_participant_none_when_unauthorized(self, site_client, fake_api):
        fake_api.add("GET", "/api/game/participant", (401, {"message": "Unauthorized"}))
        assert await gamification.get_participant(site_client) is None

    @pytest.mark.asyncio
    async def test_auto_award_skipped_without_participant(self, site_client, fake_api):
        fake_api.add("GET", "/api/game/participant", (401, "Unauthorized"))
        auto = gamification.AutoGamification(site_client)
        assert await auto.photo_upload(10) is None
        assert fake_api.count("POST", "/api/game/activities") == 0

    @pytest.mark.asyncio
    async def test_auto_award_records_activity(self, site_client, fake_api):
        fake_api.add("GET", "/api/game/participant", (200, {"id": 1, "displayName": "Teta Jana"}))
        fake_api.add("POST", "/api/game/activities", (200, {
            "id": 5, "participantId": 1, "activityType": "check_in", "pointsEarned": 20,
        }))
        auto = gamification.AutoGamification(site_client)

        activity = await auto.check_in("Obřadní síň")
        assert activity.points_earned == 20
        assert json.loads(fake_api.last.content) == {
            "activityType": "check_in",
            "pointsEarned": 20,
            "metadata": {"location": "Obřadní síň"},
        }

    @pytest.mark.asyncio
    async def test_complete_challenge_invalidates_dependents(self, site_client, fake_api):
        fake_api.add("GET", "/api/game/participant", (200, {"id": 1, "displayName": "Petr"}))
        fake_api.add("GET", "/api/game/leaderboard", (200, []))
        fake_api.add("GET", "/api/game/challenges", (200, [{"id": 4, "title": "Selfie s nevěstou"}]))
        fake_api.add("POST", "/api/game/challenges/4/complete", (200, {"success": True}))

        await gamification.get_participant(site_client)
        await gamification.get_leaderboard(site_client, limit=5)
        challenges = await gamification.get_challenges(site_client, active=True)
        assert challenges[0].title == "Selfie s nevěstou"
        assert fake_api.last.url.params["active"] == "true"

        await gamification.complete_challenge(site_client, 4, proof_data={"photoId": 10})

        keys = site_client.cache.keys()
        assert keys == [gamification.make_key("/api/game/challenges", {"active": True})]

    @pytest.mark.asyncio
    async def test_activities_query_string(self, site_client, fake_api):
        fake_api.add("GET", "/api/game/activities", (200, []))
        await gamification.get_activities(site_client, user_only=True, limit=5)
        assert dict(fake_api.last.url.params) == {"user_only": "true", "limit": "5"}


class TestMetadata:
    @pytest.mark.asyncio
    async def test_invalid_request_never_sent(self, site_client, fake_api):
        with pytest.raises(RequestValidationError):
            await metadata.create_metadata(site_client, CreateMetadataRequest(meta_key=""))
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_update_invalidates_list_and_key(self, site_client, fake_api):
        record = {"metaKey": "site_title", "metaValue": "Svatba"}
        fake_api.add("GET", "/api/metadata", (200, [record]))
        fake_api.add("GET", "/api/metadata/site_title", (200, record))
        fake_api.add("PATCH", "/api/metadata/site_title", (200, {**record, "metaValue": "Naše svatba"}))

        await metadata.get_metadata(site_client)
        await metadata.get_metadata_by_key(site_client, "site_title")
        updated = await metadata.update_metadata(
            site_client, "site_title", UpdateMetadataRequest(meta_value="Naše svatba")
        )
        assert updated.meta_value == "Naše svatba"
        assert site_client.cache.keys(metadata.METADATA_KEY) == []


class TestSchedule:
    @pytest.mark.asyncio
    async def test_list_sorted_by_order_index(self, site_client, fake_api):
        fake_api.add("GET", "/api/schedule", (200, [
            {"id": 2, "time": "18:00", "title": "Večeře", "orderIndex": 3},
            {"id": 1, "time": "14:00", "title": "Obřad", "orderIndex": 1},
        ]))
        items = await schedule.get_schedule(site_client)
        assert [i.title for i in items] == ["Obřad", "Večeře"]

    @pytest.mark.asyncio
    async def test_create_toast(self, site_client, fake_api, toasts):
        fake_api.add("POST", "/api/schedule", (200, {"id": 3, "time": "20:00", "title": "Tanec", "orderIndex": 4}))
        item = await schedule.create_schedule_item(
            site_client, ScheduleItemRequest(time="20:00", title="Tanec", order_index=4)
        )
        assert item.id == 3
        assert toasts.last.title == "Položka harmonogramu přidána"


class TestWedding:
    @pytest.mark.asyncio
    async def test_update_details(self, site_client, fake_api, toasts):
        fake_api.add("GET", "/api/wedding-details", (200, {"coupleNames": "A & B", "weddingDate": "2025-10-11", "venue": "X"}))
        fake_api.add("PATCH", "/api/wedding-details", (200, {"coupleNames": "A & B", "weddingDate": "2025-10-11", "venue": "Y"}))

        details = await wedding.get_wedding_details(site_client)
        assert details.venue == "X"
        await wedding.update_wedding_details(site_client, WeddingDetailsUpdate(venue="Y"))
        assert toasts.last.title == "Detaily aktualizovány!"

        details = await wedding.get_wedding_details(site_client)
        assert fake_api.count("GET", "/api/wedding-details") == 2
