"""
Wedding site records as returned by the REST API.

Plain dataclasses mirroring the camelCase JSON bodies. ``from_api`` builds a
record from a response body; the client layer never assigns identities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


# ── Gamification ───────────────────────────────────────────

@dataclass
class Participant:
    id: int
    display_name: str
    total_points: int = 0
    level: int = 1
    experience_points: int = 0
    streak: int = 0
    last_activity: Optional[str] = None
    user_session: str = ""
    joined_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Participant:
        return cls(
            id=data["id"],
            display_name=data.get("displayName", ""),
            total_points=data.get("totalPoints", 0),
            level=data.get("level", 1),
            experience_points=data.get("experiencePoints", 0),
            streak=data.get("streak", 0),
            last_activity=data.get("lastActivity"),
            user_session=data.get("userSession", ""),
            joined_at=data.get("joinedAt"),
        )


@dataclass
class Challenge:
    id: int
    title: str
    difficulty_level: int = 1
    points_reward: int = 0
    is_active: bool = True
    requires_approval: bool = False
    max_completions: Optional[int] = None
    time_limit: Optional[int] = None
    description: str = ""
    category: str = ""
    badge_icon: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Challenge:
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            difficulty_level=data.get("difficultyLevel", 1),
            points_reward=data.get("pointsReward", 0),
            is_active=data.get("isActive", True),
            requires_approval=data.get("requiresApproval", False),
            max_completions=data.get("maxCompletions"),
            time_limit=data.get("timeLimit"),
            description=data.get("description", ""),
            category=data.get("category", ""),
            badge_icon=data.get("badgeIcon"),
        )


@dataclass
class Activity:
    id: int
    participant_id: int
    activity_type: str
    points_earned: int = 0
    reference_id: Optional[int] = None
    metadata: Any = None
    location: Optional[str] = None
    timestamp: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Activity:
        return cls(
            id=data["id"],
            participant_id=data.get("participantId", 0),
            activity_type=data.get("activityType", ""),
            points_earned=data.get("pointsEarned", 0),
            reference_id=data.get("referenceId"),
            metadata=data.get("metadata"),
            location=data.get("location"),
            timestamp=data.get("timestamp"),
        )


@dataclass
class LeaderboardEntry:
    id: int
    participant_id: int
    category: str
    points: int
    rank: int
    period_start: Optional[str] = None
    period_end: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> LeaderboardEntry:
        return cls(
            id=data["id"],
            participant_id=data.get("participantId", 0),
            category=data.get("category", "overall"),
            points=data.get("points", 0),
            rank=data.get("rank", 0),
            period_start=data.get("periodStart"),
            period_end=data.get("periodEnd"),
        )


@dataclass
class EarnedAchievement:
    id: int
    participant_id: int
    achievement_id: int
    earned_at: Optional[str] = None
    progress: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> EarnedAchievement:
        return cls(
            id=data["id"],
            participant_id=data.get("participantId", 0),
            achievement_id=data.get("achievementId", 0),
            earned_at=data.get("earnedAt"),
            progress=data.get("progress", 0),
        )


# ── Site content ───────────────────────────────────────────

@dataclass
class SiteMetadata:
    meta_key: str
    meta_value: Optional[str] = None
    meta_type: str = "string"  # string | number | boolean | json
    category: str = "general"
    is_editable: bool = True
    description: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> SiteMetadata:
        return cls(
            meta_key=data["metaKey"],
            meta_value=data.get("metaValue"),
            meta_type=data.get("metaType", "string"),
            category=data.get("category", "general"),
            is_editable=data.get("isEditable", True),
            description=data.get("description"),
            id=data.get("id"),
        )


@dataclass
class ScheduleItem:
    id: int
    time: str
    title: str
    order_index: int
    description: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ScheduleItem:
        return cls(
            id=data["id"],
            time=data.get("time", ""),
            title=data.get("title", ""),
            order_index=data.get("orderIndex", 0),
            description=data.get("description"),
            is_active=data.get("isActive", True),
        )


@dataclass
class WeddingDetails:
    couple_names: str
    wedding_date: str
    venue: str
    venue_address: Optional[str] = None
    allow_uploads: bool = True
    moderate_uploads: bool = False
    id: Optional[int] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> WeddingDetails:
        return cls(
            couple_names=data.get("coupleNames", ""),
            wedding_date=data.get("weddingDate", ""),
            venue=data.get("venue", ""),
            venue_address=data.get("venueAddress"),
            allow_uploads=data.get("allowUploads", True),
            moderate_uploads=data.get("moderateUploads", False),
            id=data.get("id"),
        )


# ── Photos & playlist ──────────────────────────────────────

@dataclass
class Photo:
    id: int
    filename: str
    url: str
    original_name: str = ""
    thumbnail_url: str = ""
    likes: int = 0
    approved: bool = True
    uploaded_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Photo:
        return cls(
            id=data["id"],
            filename=data.get("filename", ""),
            url=data.get("url", ""),
            original_name=data.get("originalName", ""),
            thumbnail_url=data.get("thumbnailUrl", ""),
            likes=data.get("likes", 0),
            approved=data.get("approved", True),
            uploaded_at=data.get("uploadedAt"),
        )


@dataclass
class PlaylistSong:
    id: int
    title: str
    suggestion: str
    artist: Optional[str] = None
    likes: int = 0
    approved: bool = True
    submitted_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PlaylistSong:
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            suggestion=data.get("suggestion", ""),
            artist=data.get("artist"),
            likes=data.get("likes", 0),
            approved=data.get("approved", True),
            submitted_at=data.get("submittedAt"),
        )


@dataclass
class PhotoComment:
    id: int
    photo_id: int
    author: str
    text: str
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PhotoComment:
        return cls(
            id=data["id"],
            photo_id=data.get("photoId", 0),
            author=data.get("author", ""),
            text=data.get("text", ""),
            created_at=data.get("createdAt"),
        )


@dataclass
class LikeResult:
    liked: bool
    likes: int

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> LikeResult:
        return cls(liked=bool(data.get("liked")), likes=int(data.get("likes", 0)))


# ── Photo enhancement ──────────────────────────────────────

@dataclass
class EnhancementSuggestion:
    category: str
    severity: str  # low | medium | high | critical
    title: str
    description: str = ""
    suggestion: str = ""
    confidence: float = 0.0
    priority: int = 0
    impact_score: float = 0.0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> EnhancementSuggestion:
        return cls(
            category=data.get("category", ""),
            severity=data.get("severity", "low"),
            title=data.get("title", ""),
            description=data.get("description", ""),
            suggestion=data.get("suggestion", ""),
            confidence=data.get("confidence", 0.0),
            priority=data.get("priority", 0),
            impact_score=data.get("impactScore", 0.0),
        )


@dataclass
class PhotoEnhancementAnalysis:
    id: int
    photo_id: int
    overall_score: float
    suggestions: list[EnhancementSuggestion] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    primary_issues: list[str] = field(default_factory=list)
    wedding_context: dict[str, Any] = field(default_factory=dict)
    is_visible: bool = True
    analysis_date: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PhotoEnhancementAnalysis:
        return cls(
            id=data["id"],
            photo_id=data.get("photoId", 0),
            overall_score=data.get("overallScore", 0),
            suggestions=[EnhancementSuggestion.from_api(s) for s in data.get("suggestions") or []],
            strengths=list(data.get("strengths") or []),
            primary_issues=list(data.get("primaryIssues") or []),
            wedding_context=dict(data.get("weddingContext") or {}),
            is_visible=data.get("isVisible", True),
            analysis_date=data.get("analysisDate"),
        )
