# app/models/api/profile_response.py
from datetime import datetime

from pydantic import BaseModel, Field


class SectionBreakdownResponse(BaseModel):
    filled: int
    total: int
    ratio: float
    contributes: bool
    review_status: str | None = None


class ProfileCompletionResponse(BaseModel):
    """Response for GET /athletes/me/completion"""

    athlete_id: str
    completion: int = Field(..., ge=40, le=100)
    stored_completion: int | None
    breakdown: dict[str, SectionBreakdownResponse]
    contributing_sections: list[str]
    can_publish: bool


class CompletionRecomputeResponse(ProfileCompletionResponse):
    """Response for POST /athletes/me/completion/recompute"""

    changed: bool
    reached_full_completion: bool


class AthleteStatsResponse(BaseModel):
    search_impressions: int
    profile_views: int
    contact_unlocks: int
    messaging_operators: int
    first_seen_at: datetime | None = None
    last_seen_at: datetime | None = None


class AthleteScoreResponse(BaseModel):
    """Response for GET /athletes/me/score"""

    athlete_id: str
    segments: int = Field(..., ge=0, le=15)
    stars: float
    star_fills: list[float]
    label: str
    stats: AthleteStatsResponse


class PublishProfileResponse(BaseModel):
    success: bool
    published: bool
    completion: int
    message: str


class SearchStatsEventResponse(BaseModel):
    success: bool
    athlete_ids: list[str]
    event_type: str
