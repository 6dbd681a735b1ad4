"""
router.py
---------
Purpose:
    API endpoints for athlete profile completion, talent score, publishing,
    and operator search statistics.

Usage:
    1. GET  /athletes/me/completion            - Completion percentage + breakdown
    2. POST /athletes/me/completion/recompute  - Recompute and persist completion
    3. GET  /athletes/me/score                 - Talent score (stars) + stats
    4. POST /athletes/me/publish               - Publish / unpublish the profile
    5. POST /athletes/search-stats             - Operators record search events
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.auth.roles import ADMIN_ROLE, OPERATOR_ROLE
from app.auth.verify import auth_dependency, require_role
from app.config import settings
from app.db.helpers import DatabaseError
from app.db.pool import DatabasePoolManager, get_db_pool
from app.infrastructure.observability.logging import get_logger
from app.models.api.profile_request import PublishProfileRequest, SearchStatsEventRequest
from app.models.api.profile_response import (
    AthleteScoreResponse,
    AthleteStatsResponse,
    CompletionRecomputeResponse,
    ProfileCompletionResponse,
    PublishProfileResponse,
    SearchStatsEventResponse,
    SectionBreakdownResponse,
)

from ..repository import ProfileRecordRepository
from ..service import CompletionReport, ProfileCompletionService, ProfileServiceError

router = APIRouter(prefix="/athletes", tags=["athlete-profile"])
logger = get_logger(__name__)


def get_profile_service(
    pool: DatabasePoolManager = Depends(get_db_pool),
) -> ProfileCompletionService:
    return ProfileCompletionService(
        ProfileRecordRepository(pool),
        publish_min_completion=settings.PUBLISH_MIN_COMPLETION,
    )


def _athlete_id(claims: dict) -> str:
    athlete_id = claims.get("sub")
    if not athlete_id:
        logger.error("No user ID in JWT claims")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: missing user ID"
        )
    return athlete_id


def _raise_http(error: Exception) -> None:
    if isinstance(error, ProfileServiceError):
        raise HTTPException(status_code=error.status_code, detail=str(error)) from error
    if isinstance(error, DatabaseError):
        logger.error("Profile store unavailable", operation=error.operation, error=str(error))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Profile data is temporarily unavailable.",
        ) from error
    raise error


def _completion_payload(report: CompletionReport) -> dict:
    return {
        "athlete_id": report.athlete_id,
        "completion": report.result.completion,
        "stored_completion": report.stored_completion,
        "breakdown": {
            name: SectionBreakdownResponse(**section.as_dict())
            for name, section in report.result.breakdown.items()
        },
        "contributing_sections": report.result.contributing_sections,
        "can_publish": report.can_publish,
    }


@router.get("/me/completion", response_model=ProfileCompletionResponse)
async def get_my_completion(
    claims: dict = Depends(auth_dependency),
    service: ProfileCompletionService = Depends(get_profile_service),
):
    """
    Compute the authenticated athlete's profile completion.

    Raises:
        401: Invalid authentication token
        404: Athlete profile not found
    """
    athlete_id = _athlete_id(claims)
    try:
        report = await service.get_completion(athlete_id)
    except (ProfileServiceError, DatabaseError) as e:
        _raise_http(e)

    return ProfileCompletionResponse(**_completion_payload(report))


@router.post("/me/completion/recompute", response_model=CompletionRecomputeResponse)
async def recompute_my_completion(
    claims: dict = Depends(auth_dependency),
    service: ProfileCompletionService = Depends(get_profile_service),
):
    """Recompute completion after a section save and persist it when it changed."""
    athlete_id = _athlete_id(claims)
    try:
        update = await service.recompute_completion(athlete_id)
    except (ProfileServiceError, DatabaseError) as e:
        _raise_http(e)

    payload = _completion_payload(update.report)
    payload["completion"] = update.completion
    return CompletionRecomputeResponse(
        **payload,
        changed=update.changed,
        reached_full_completion=update.reached_full_completion,
    )


@router.get("/me/score", response_model=AthleteScoreResponse)
async def get_my_score(
    claims: dict = Depends(auth_dependency),
    service: ProfileCompletionService = Depends(get_profile_service),
):
    athlete_id = _athlete_id(claims)
    try:
        score = await service.get_athlete_score(athlete_id)
    except (ProfileServiceError, DatabaseError) as e:
        _raise_http(e)

    stats = score.stats
    return AthleteScoreResponse(
        athlete_id=score.athlete_id,
        segments=score.segments,
        stars=round(score.stars, 2),
        star_fills=score.star_fills,
        label=score.label,
        stats=AthleteStatsResponse(
            search_impressions=stats.search_impressions,
            profile_views=stats.profile_views,
            contact_unlocks=stats.contact_unlocks,
            messaging_operators=stats.messaging_operators,
            first_seen_at=stats.first_seen_at,
            last_seen_at=stats.last_seen_at,
        ),
    )


@router.post("/me/publish", response_model=PublishProfileResponse)
async def publish_my_profile(
    request: PublishProfileRequest,
    claims: dict = Depends(auth_dependency),
    service: ProfileCompletionService = Depends(get_profile_service),
):
    """
    Publish or hide the authenticated athlete's profile.

    Raises:
        404: Athlete profile not found
        409: Wizard unfinished or completion below the publish threshold
    """
    athlete_id = _athlete_id(claims)
    try:
        report = await service.set_published(athlete_id, request.published)
    except (ProfileServiceError, DatabaseError) as e:
        _raise_http(e)

    return PublishProfileResponse(
        success=True,
        published=request.published,
        completion=report.result.completion,
        message="Profile published." if request.published else "Profile hidden.",
    )


@router.post("/search-stats", response_model=SearchStatsEventResponse)
async def record_search_stats(
    request: SearchStatsEventRequest,
    claims: dict = Depends(require_role(OPERATOR_ROLE, ADMIN_ROLE)),
    service: ProfileCompletionService = Depends(get_profile_service),
):
    """
    Record a search impression, profile view, or contact unlock for athletes.

    Raises:
        400: No valid athlete ids or unsupported event type
        403: Caller is not an operator
    """
    try:
        athlete_ids, event_type = await service.record_search_event(
            request.all_athlete_ids(), *request.event_type_candidates()
        )
    except (ProfileServiceError, DatabaseError) as e:
        _raise_http(e)

    logger.info(
        "Search stats updated",
        operator_id=claims.get("sub"),
        event_type=event_type,
        athlete_count=len(athlete_ids),
    )
    return SearchStatsEventResponse(success=True, athlete_ids=athlete_ids, event_type=event_type)
