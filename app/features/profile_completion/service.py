"""
Profile completion service - assembles snapshots, scores them, and applies
the publishing and search-stats policies.

Service layer returns domain objects only - the API layer handles HTTP
concerns.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from app.db.helpers import with_db_retry
from app.infrastructure.observability.logging import get_logger

from .domain.models import AthleteProfileSnapshot, AthleteRecord, AthleteStats, CompletionResult
from .domain.normalize import (
    athlete_from_row,
    build_snapshot,
    contacts_verification_from_row,
    stats_from_row,
)
from .engine.athlete_score import (
    SEGMENTS_PER_STAR,
    build_star_fills,
    compute_athlete_score_segments,
    score_label,
)
from .engine.completion import clamp_stored_completion, compute_profile_completion
from .repository import SEARCH_EVENT_COLUMNS, ProfileRecordRepository

logger = get_logger(__name__)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
SEARCH_EVENT_TYPES = tuple(SEARCH_EVENT_COLUMNS)


class ProfileServiceError(Exception):
    """Base error for profile operations; carries the HTTP status to surface."""

    status_code = 500

    def __init__(self, message: str, athlete_id: str | None = None):
        super().__init__(message)
        self.athlete_id = athlete_id


class AthleteNotFoundError(ProfileServiceError):
    status_code = 404


class PublishNotAllowedError(ProfileServiceError):
    status_code = 409


class InvalidSearchEventError(ProfileServiceError):
    status_code = 400


@dataclass(slots=True)
class CompletionReport:
    athlete_id: str
    result: CompletionResult
    stored_completion: int | None
    can_publish: bool


@dataclass(slots=True)
class CompletionUpdate:
    report: CompletionReport
    completion: int
    changed: bool
    reached_full_completion: bool


@dataclass(slots=True)
class AthleteScore:
    athlete_id: str
    segments: int
    star_fills: list[float]
    label: str
    stats: AthleteStats

    @property
    def stars(self) -> float:
        return self.segments / SEGMENTS_PER_STAR


def normalize_uuid(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed if UUID_PATTERN.match(trimmed) else None


def normalize_event_type(value: Any) -> str | None:
    normalized = value.strip().lower() if isinstance(value, str) else ""
    return normalized if normalized in SEARCH_EVENT_TYPES else None


def _stored_completion(athlete: AthleteRecord) -> int | None:
    value = athlete.completion_percentage
    if value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


class ProfileCompletionService:
    def __init__(self, repository: ProfileRecordRepository, publish_min_completion: int = 70):
        self.repository = repository
        self.publish_min_completion = publish_min_completion

    async def _require_athlete(self, athlete_id: str) -> AthleteRecord:
        athlete = athlete_from_row(await self.repository.fetch_athlete(athlete_id))
        if athlete is None:
            logger.warning("Athlete not found", athlete_id=athlete_id)
            raise AthleteNotFoundError("Athlete profile not found", athlete_id=athlete_id)
        return athlete

    @with_db_retry(max_retries=2, base_delay=0.1)
    async def load_snapshot(self, athlete_id: str) -> AthleteProfileSnapshot:
        """Fetch every record behind the profile and assemble the snapshot."""
        athlete = await self._require_athlete(athlete_id)
        repo = self.repository
        (
            verification,
            sports,
            physical,
            awards,
            (media_items, game_meta),
            social,
        ) = await asyncio.gather(
            repo.fetch_contacts_verification(athlete_id),
            repo.fetch_latest_sports_experience(athlete_id),
            repo.fetch_latest_physical(athlete_id),
            repo.fetch_awards(athlete_id),
            repo.fetch_media(athlete_id),
            repo.fetch_social_profiles(athlete_id),
        )
        return build_snapshot(
            athlete=athlete,
            contacts_verification=verification,
            sports_experience=sports,
            physical=physical,
            awards=awards,
            media_items=media_items,
            media_game_meta=game_meta,
            social_profiles=social,
        )

    def is_publishable(self, athlete: AthleteRecord | None, completion: int) -> bool:
        """Wizard finished and completion at or above the publish threshold."""
        if athlete is None or athlete.current_step is not None:
            return False
        return completion >= self.publish_min_completion

    def _report(self, athlete_id: str, snapshot: AthleteProfileSnapshot) -> CompletionReport:
        result = compute_profile_completion(snapshot)
        return CompletionReport(
            athlete_id=athlete_id,
            result=result,
            stored_completion=_stored_completion(snapshot.athlete),
            can_publish=self.is_publishable(snapshot.athlete, result.completion),
        )

    async def get_completion(self, athlete_id: str) -> CompletionReport:
        snapshot = await self.load_snapshot(athlete_id)
        report = self._report(athlete_id, snapshot)
        logger.info(
            "Profile completion computed",
            athlete_id=athlete_id,
            completion=report.result.completion,
            contributing=report.result.contributing_sections,
        )
        return report

    async def recompute_completion(self, athlete_id: str) -> CompletionUpdate:
        """
        Recompute completion and persist it when it differs from the stored value.

        ``reached_full_completion`` is True only on the transition to 100.
        """
        snapshot = await self.load_snapshot(athlete_id)
        report = self._report(athlete_id, snapshot)

        completion = clamp_stored_completion(report.result.completion)
        current = report.stored_completion or 0
        changed = current != completion
        reached_full = completion == 100 and current < 100

        if changed:
            await self.repository.update_completion_percentage(athlete_id, completion)
            logger.info(
                "Completion percentage updated",
                athlete_id=athlete_id,
                previous=current,
                completion=completion,
            )
        if reached_full:
            logger.info("Profile reached full completion", athlete_id=athlete_id)

        return CompletionUpdate(
            report=report,
            completion=completion,
            changed=changed,
            reached_full_completion=reached_full,
        )

    async def get_athlete_score(self, athlete_id: str) -> AthleteScore:
        athlete = await self._require_athlete(athlete_id)
        verification_row, stats_row, messaging_operators = await asyncio.gather(
            self.repository.fetch_contacts_verification(athlete_id),
            self.repository.fetch_search_stats(athlete_id),
            self.repository.count_messaging_operators(athlete_id),
        )

        stats_payload = dict(stats_row or {})
        stats_payload["messaging_operators"] = messaging_operators
        stats = stats_from_row(stats_payload)
        verification = contacts_verification_from_row(verification_row)

        segments = compute_athlete_score_segments(athlete, stats, verification)
        return AthleteScore(
            athlete_id=athlete_id,
            segments=segments,
            star_fills=build_star_fills(segments),
            label=score_label(segments),
            stats=stats,
        )

    async def set_published(self, athlete_id: str, published: bool) -> CompletionReport:
        """
        Publish or unpublish a profile.

        Publishing is gated on a finished wizard and a fresh completion score at
        or above the threshold; unpublishing is always allowed.
        """
        snapshot = await self.load_snapshot(athlete_id)
        report = self._report(athlete_id, snapshot)

        if published and not report.can_publish:
            logger.info(
                "Publish refused",
                athlete_id=athlete_id,
                completion=report.result.completion,
                current_step=snapshot.athlete.current_step,
            )
            raise PublishNotAllowedError(
                f"Complete the setup wizard and reach {self.publish_min_completion}% "
                "profile completion before publishing.",
                athlete_id=athlete_id,
            )

        await self.repository.set_profile_published(athlete_id, published)
        logger.info("Profile visibility changed", athlete_id=athlete_id, published=published)
        return report

    async def record_search_event(
        self, athlete_ids: Iterable[Any], event_type: Any, fallback_event_type: Any = None
    ) -> tuple[list[str], str]:
        """
        Validate ids and event type, then bump the matching counters.

        ``fallback_event_type`` is used only when ``event_type`` is not a
        supported event.
        """
        normalized_ids = list(
            dict.fromkeys(uuid for uuid in map(normalize_uuid, athlete_ids) if uuid)
        )
        if not normalized_ids:
            raise InvalidSearchEventError("At least one valid athleteId is required.")

        resolved_event = normalize_event_type(event_type) or normalize_event_type(
            fallback_event_type
        )
        if not resolved_event:
            raise InvalidSearchEventError("Unsupported or missing eventType.")

        await self.repository.increment_search_stats(normalized_ids, resolved_event)
        logger.info(
            "Search event recorded",
            event_type=resolved_event,
            athlete_count=len(normalized_ids),
        )
        return normalized_ids, resolved_event
