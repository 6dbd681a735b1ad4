"""
Talent score: up to five stars, each split into three segments.

Usage:
    segments = compute_athlete_score_segments(athlete, stats, contacts_verification)
    fills = build_star_fills(segments)   # per-star fill fractions for rendering
    label = score_label(segments)        # e.g. "2.3"

Segments come from setup milestones (finished wizard, approved contacts,
100% profile) and engagement counters (profile views, contact unlocks,
operators messaging the athlete).
"""

import math
from typing import Any

from ..domain.models import AthleteRecord, AthleteStats, ContactsVerification
from ..domain.normalize import (
    athlete_from_row,
    contacts_verification_from_row,
    stats_from_row,
)

STAR_COUNT = 5
SEGMENTS_PER_STAR = 3
MAX_SEGMENTS = STAR_COUNT * SEGMENTS_PER_STAR

WIZARD_MIN_COMPLETION = 40
PROFILE_VIEWS_PER_SEGMENT = 20
CONTACT_UNLOCKS_PER_SEGMENT = 5
MESSAGING_OPERATORS_PER_SEGMENT = 3


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _completion_of(athlete: AthleteRecord) -> float:
    value = athlete.completion_percentage
    if value is None:
        return 0.0
    if isinstance(value, int):
        return value
    try:
        return float(value.strip() or 0) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan


def compute_athlete_score_segments(
    athlete: AthleteRecord | dict | None,
    stats: AthleteStats | dict | None = None,
    contacts_verification: ContactsVerification | dict | None = None,
) -> int:
    """Return the number of earned segments, 0..MAX_SEGMENTS."""
    athlete = athlete_from_row(athlete)
    if athlete is None:
        return 0

    stats = stats_from_row(stats)
    verification = contacts_verification_from_row(contacts_verification)

    segments = 0
    completion = _completion_of(athlete)

    if athlete.current_step is None and completion >= WIZARD_MIN_COMPLETION:
        segments += SEGMENTS_PER_STAR
    if verification is not None and verification.is_approved:
        segments += SEGMENTS_PER_STAR
    if completion >= 100:
        segments += 1

    segments += stats.profile_views // PROFILE_VIEWS_PER_SEGMENT
    segments += stats.contact_unlocks // CONTACT_UNLOCKS_PER_SEGMENT
    segments += stats.messaging_operators // MESSAGING_OPERATORS_PER_SEGMENT

    return int(_clamp(segments, 0, MAX_SEGMENTS))


def build_star_fills(segments: int) -> list[float]:
    """Fraction (0..1) of each of the five stars to paint."""
    return [
        _clamp(segments - index * SEGMENTS_PER_STAR, 0, SEGMENTS_PER_STAR) / SEGMENTS_PER_STAR
        for index in range(STAR_COUNT)
    ]


def score_label(segments: int) -> str:
    return f"{segments / SEGMENTS_PER_STAR:.1f}"
