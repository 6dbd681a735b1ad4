"""
Per-section completion rules.

Each evaluator reads one part of the snapshot and returns a ``SectionResult``;
``contributes`` is the only value the aggregator consumes. Contacts require a
fully filled, approved verification; every other section needs 60% of its
slots.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from ..domain.models import (
    AthleteRecord,
    AwardRecord,
    ContactsVerification,
    MediaGameMeta,
    MediaItem,
    PhysicalMetrics,
    SectionResult,
    SocialProfile,
    SportsExperience,
)
from .presence import FillStats, count_filled, is_filled

SECTION_THRESHOLD = 0.6


class MediaCategory:
    FEATURED_HEADSHOT = "featured_headshot"
    FEATURED_GAME_1 = "featured_game1"
    FEATURED_GAME_2 = "featured_game2"
    GALLERY = "gallery"
    INTRO = "intro"
    HIGHLIGHT = "highlight"
    GAME = "game"


REQUIRED_GAME_META_KEYS = ("match_date", "opponent", "competition", "season", "team_level")

_EMPTY = SectionResult(filled=0, total=0, ratio=0.0, contributes=False)


def _threshold_result(stats: FillStats) -> SectionResult:
    return SectionResult(
        filled=stats.filled,
        total=stats.total,
        ratio=stats.ratio,
        contributes=stats.ratio >= SECTION_THRESHOLD,
    )


def _summed_rows(rows: Iterable[Sequence]) -> SectionResult:
    """Sum filled/total across rows; no per-row averaging."""
    filled = 0
    total = 0
    for parts in rows:
        stats = count_filled(parts)
        filled += stats.filled
        total += stats.total
    return _threshold_result(FillStats(filled, total, filled / total if total else 0.0))


def evaluate_contacts(
    athlete: AthleteRecord | None, verification: ContactsVerification | None
) -> SectionResult:
    cv = verification or ContactsVerification()
    fields = [
        athlete.phone if athlete else None,
        cv.id_document_type,
        cv.id_document_url,
        cv.id_selfie_url,
        cv.residence_region,
        cv.residence_postal_code,
        cv.residence_address,
        cv.residence_city,
        cv.residence_country,
    ]
    if cv.other_id_type_required:
        fields.append(cv.id_document_type_other)

    stats = count_filled(fields)
    contributes = stats.total > 0 and stats.filled == stats.total and cv.is_approved
    return SectionResult(
        filled=stats.filled,
        total=stats.total,
        ratio=stats.ratio,
        contributes=contributes,
        review_status=cv.review_status,
    )


def evaluate_sports(experience: SportsExperience | None) -> SectionResult:
    if experience is None:
        return _EMPTY
    return _threshold_result(
        count_filled(
            [
                experience.sport,
                experience.role,
                experience.category,
                experience.team,
                experience.previous_team,
                experience.years_experience,
                experience.seeking_team_known,
                experience.secondary_role,
                experience.playing_style,
                experience.has_contract_details,
                experience.preferred_regions,
                experience.trial_window,
                experience.has_representation,
            ]
        )
    )


def evaluate_physical(physical: PhysicalMetrics | None) -> SectionResult:
    if physical is None:
        return _EMPTY
    return _threshold_result(
        count_filled(
            [
                physical.physical_measured_at,
                physical.height_cm,
                physical.weight_kg,
                physical.wingspan_cm,
                physical.standing_reach_cm,
                physical.body_fat_percent,
                physical.dominant_hand,
                physical.dominant_foot,
                physical.dominant_eye,
                physical.physical_notes,
                physical.performance_measured_at,
                physical.grip_strength_recorded,
                physical.vertical_jump_cmj_cm,
                physical.standing_long_jump_cm,
                physical.speed_test_recorded,
                physical.sit_and_reach_cm,
                physical.plank_hold_s,
                physical.cooper_12min_m,
                physical.performance_notes,
            ]
        )
    )


def evaluate_awards(awards: Sequence[AwardRecord]) -> SectionResult:
    return _summed_rows(
        [
            award.title,
            award.awarding_entity,
            award.award_period,
            award.description,
            award.evidence,
        ]
        for award in awards
    )


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _is_complete_game(item: MediaItem, meta_by_item: dict) -> bool:
    if not _hashable(item.id):
        return False
    meta = meta_by_item.get(item.id)
    if meta is None:
        return False
    return all(is_filled(getattr(meta, key)) for key in REQUIRED_GAME_META_KEYS)


def evaluate_media(
    items: Sequence[MediaItem], game_meta: Sequence[MediaGameMeta]
) -> SectionResult:
    meta_by_item = {
        row.media_item_id: row
        for row in game_meta
        if row.media_item_id is not None and _hashable(row.media_item_id)
    }

    def has_one(category: str) -> bool:
        return any(item.category == category for item in items)

    def count(category: str) -> int:
        return sum(1 for item in items if item.category == category)

    gallery = count(MediaCategory.GALLERY)
    highlights = count(MediaCategory.HIGHLIGHT)
    games = sum(
        1
        for item in items
        if item.category == MediaCategory.GAME and _is_complete_game(item, meta_by_item)
    )

    slots = [
        has_one(MediaCategory.FEATURED_HEADSHOT),
        has_one(MediaCategory.FEATURED_GAME_1),
        has_one(MediaCategory.FEATURED_GAME_2),
        has_one(MediaCategory.INTRO),
        gallery >= 1,
        gallery >= 2,
        gallery >= 3,
        highlights >= 1,
        highlights >= 2,
        games >= 1,
        games >= 2,
    ]
    return _threshold_result(count_filled(slots))


def evaluate_social(profiles: Sequence[SocialProfile]) -> SectionResult:
    return _summed_rows(
        [profile.platform, profile.profile_url, profile.handle] for profile in profiles
    )
