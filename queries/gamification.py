"""
Guest engagement: participant profile, challenges, leaderboard, activity log.

Points and ranks are computed by the game API; this module only reads them
and records activities. Parameterised reads (challenges, leaderboard,
activities) are keyed by their path plus a dict of parameters, so every
variant is dropped when its path prefix is invalidated.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlencode

from models import Activity, Challenge, EarnedAchievement, LeaderboardEntry, Participant
from query_cache import make_key
from site_client import SiteClient

logger = logging.getLogger(__name__)

PARTICIPANT_KEY = make_key("/api/game/participant")
CHALLENGES_KEY = make_key("/api/game/challenges")
LEADERBOARD_KEY = make_key("/api/game/leaderboard")
ACTIVITIES_KEY = make_key("/api/game/activities")
ACHIEVEMENTS_KEY = make_key("/api/game/achievements")
EVENTS_KEY = make_key("/api/game/events")

ACTIVITY_POINTS = {
    "photo_upload": 10,
    "comment": 5,
    "like": 2,
    "playlist_song": 15,
    "check_in": 20,
}


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


# ── reads ──────────────────────────────────────────────────

async def get_participant(client: SiteClient) -> Optional[Participant]:
    """The current guest's profile, or None when they have not joined yet."""

    async def _load() -> Optional[Participant]:
        data = await client.http.query("/api/game/participant", on_401="return_null")
        return Participant.from_api(data) if data else None

    return await client.cache.fetch(PARTICIPANT_KEY, _load)


async def get_challenges(client: SiteClient, active: Optional[bool] = None) -> list[Challenge]:
    url = "/api/game/challenges"
    if active is not None:
        url += f"?active={_bool_param(active)}"

    async def _load() -> list[Challenge]:
        return [Challenge.from_api(c) for c in await client.http.query(url) or []]

    return await client.cache.fetch(make_key(*CHALLENGES_KEY, {"active": active}), _load)


async def get_leaderboard(
    client: SiteClient, category: str = "overall", limit: int = 10
) -> list[LeaderboardEntry]:
    url = f"/api/game/leaderboard?{urlencode({'category': category, 'limit': limit})}"

    async def _load() -> list[LeaderboardEntry]:
        return [LeaderboardEntry.from_api(e) for e in await client.http.query(url) or []]

    key = make_key(*LEADERBOARD_KEY, {"category": category, "limit": limit})
    return await client.cache.fetch(key, _load)


async def get_activities(
    client: SiteClient, user_only: bool = False, limit: int = 20
) -> list[Activity]:
    params: dict[str, Any] = {}
    if user_only:
        params["user_only"] = "true"
    if limit:
        params["limit"] = limit
    url = f"/api/game/activities?{urlencode(params)}"

    async def _load() -> list[Activity]:
        return [Activity.from_api(a) for a in await client.http.query(url) or []]

    key = make_key(*ACTIVITIES_KEY, {"user_only": user_only or None, "limit": limit})
    return await client.cache.fetch(key, _load)


async def get_achievements(client: SiteClient) -> list[EarnedAchievement]:
    async def _load() -> list[EarnedAchievement]:
        data = await client.http.query("/api/game/achievements")
        return [EarnedAchievement.from_api(a) for a in data or []]

    return await client.cache.fetch(ACHIEVEMENTS_KEY, _load)


# ── writes ─────────────────────────────────────────────────

async def register_participant(client: SiteClient, display_name: str) -> Participant:
    async def _send() -> Participant:
        data = await client.http.request("POST", "/api/game/participant", {"displayName": display_name})
        return Participant.from_api(data)

    return await client.mutate(_send, invalidates=[PARTICIPANT_KEY])


async def complete_challenge(client: SiteClient, challenge_id: int, proof_data: Any = None) -> Any:
    async def _send() -> Any:
        return await client.http.request(
            "POST", f"/api/game/challenges/{challenge_id}/complete", {"proofData": proof_data}
        )

    return await client.mutate(
        _send, invalidates=[PARTICIPANT_KEY, ACTIVITIES_KEY, LEADERBOARD_KEY]
    )


async def join_event(client: SiteClient, event_id: int) -> Any:
    async def _send() -> Any:
        return await client.http.request("POST", f"/api/game/events/{event_id}/join")

    return await client.mutate(_send, invalidates=[EVENTS_KEY, PARTICIPANT_KEY])


async def create_activity(
    client: SiteClient,
    activity_type: str,
    points_earned: int,
    reference_id: Optional[int] = None,
    metadata: Any = None,
    location: Optional[str] = None,
) -> Activity:
    body: dict[str, Any] = {"activityType": activity_type, "pointsEarned": points_earned}
    if reference_id is not None:
        body["referenceId"] = reference_id
    if metadata is not None:
        body["metadata"] = metadata
    if location is not None:
        body["location"] = location

    async def _send() -> Activity:
        return Activity.from_api(await client.http.request("POST", "/api/game/activities", body))

    return await client.mutate(_send, invalidates=[ACTIVITIES_KEY, PARTICIPANT_KEY])


# ── automatic awards ───────────────────────────────────────

class AutoGamification:
    """Awards fixed points for everyday site interactions.

    Nothing is recorded for guests who have not registered as participants.
    """

    def __init__(self, client: SiteClient):
        self.client = client

    async def award_points(
        self,
        activity_type: str,
        reference_id: Optional[int] = None,
        metadata: Any = None,
    ) -> Optional[Activity]:
        participant = await get_participant(self.client)
        if participant is None:
            logger.debug("No participant, skipping %s award", activity_type)
            return None
        return await create_activity(
            self.client,
            activity_type,
            ACTIVITY_POINTS[activity_type],
            reference_id=reference_id,
            metadata=metadata,
        )

    async def photo_upload(self, photo_id: int) -> Optional[Activity]:
        return await self.award_points("photo_upload", photo_id)

    async def comment(self, photo_id: int) -> Optional[Activity]:
        return await self.award_points("comment", photo_id)

    async def like(self, photo_id: int) -> Optional[Activity]:
        return await self.award_points("like", photo_id)

    async def playlist_song(self, song_id: int) -> Optional[Activity]:
        return await self.award_points("playlist_song", song_id)

    async def check_in(self, location: str) -> Optional[Activity]:
        return await self.award_points("check_in", metadata={"location": location})
