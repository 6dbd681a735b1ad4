"""
Domain models for the profile completion feature.

These frozen dataclasses are the typed snapshot the scoring engine reads.
Raw values are kept as-is (``Any``) because upstream rows are untyped; the
engine decides what counts as filled. "Any of several columns" groups are
exposed as derived properties so the section evaluators stay table-driven.
"""

import numbers
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def is_nan(value: Any) -> bool:
    try:
        return value != value
    except ArithmeticError:
        # signalling Decimal NaN refuses comparison
        return True


def _truthy(value: Any) -> bool:
    """Loose truthiness used by the any-of groups (0, "", False, None, NaN are falsy)."""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, numbers.Number):
        return not is_nan(value) and value != 0
    return True


def first_truthy(*values: Any) -> Any:
    """Return the first truthy value, else the last one (``a || b || c``)."""
    for value in values:
        if _truthy(value):
            return value
    return values[-1] if values else None


@dataclass(slots=True, frozen=True)
class AthleteRecord:
    """Base identity row from the ``athlete`` table."""

    id: str | None = None
    phone: Any = None
    current_step: Any = None
    completion_percentage: Any = None
    first_name: str | None = None
    profile_published: bool = False


@dataclass(slots=True, frozen=True)
class ContactsVerification:
    """Identity document and residence data; ``review_status`` is canonical."""

    id_document_type: Any = None
    id_document_type_other: Any = None
    id_document_url: Any = None
    id_selfie_url: Any = None
    residence_region: Any = None
    residence_postal_code: Any = None
    residence_address: Any = None
    residence_city: Any = None
    residence_country: Any = None
    review_status: str = ""

    @property
    def other_id_type_required(self) -> bool:
        return isinstance(self.id_document_type, str) and self.id_document_type.lower() == "other"

    @property
    def is_approved(self) -> bool:
        return self.review_status == "approved"


@dataclass(slots=True, frozen=True)
class SportsExperience:
    sport: Any = None
    role: Any = None
    category: Any = None
    team: Any = None
    previous_team: Any = None
    years_experience: Any = None
    seeking_team: Any = None
    secondary_role: Any = None
    playing_style: Any = None
    contract_status: Any = None
    contract_end_date: Any = None
    contract_notes: Any = None
    preferred_regions: tuple = ()
    trial_window: Any = None
    is_represented: Any = None
    agent_name: Any = None
    agency_name: Any = None

    @property
    def seeking_team_known(self) -> bool:
        # Tri-state: an explicit "no" is still an answer
        return self.seeking_team is True or self.seeking_team is False

    @property
    def has_contract_details(self) -> bool:
        return any(
            _truthy(v) for v in (self.contract_status, self.contract_end_date, self.contract_notes)
        )

    @property
    def has_representation(self) -> bool:
        return any(_truthy(v) for v in (self.is_represented, self.agent_name, self.agency_name))


@dataclass(slots=True, frozen=True)
class PhysicalMetrics:
    physical_measured_at: Any = None
    height_cm: Any = None
    weight_kg: Any = None
    wingspan_cm: Any = None
    standing_reach_cm: Any = None
    body_fat_percent: Any = None
    dominant_hand: Any = None
    dominant_foot: Any = None
    dominant_eye: Any = None
    physical_notes: Any = None
    performance_measured_at: Any = None
    grip_strength_left_kg: Any = None
    grip_strength_right_kg: Any = None
    vertical_jump_cmj_cm: Any = None
    standing_long_jump_cm: Any = None
    sprint_10m_s: Any = None
    sprint_20m_s: Any = None
    pro_agility_5_10_5_s: Any = None
    sit_and_reach_cm: Any = None
    plank_hold_s: Any = None
    cooper_12min_m: Any = None
    performance_notes: Any = None

    @property
    def grip_strength_recorded(self) -> bool:
        return _truthy(self.grip_strength_left_kg) or _truthy(self.grip_strength_right_kg)

    @property
    def speed_test_recorded(self) -> bool:
        return any(
            _truthy(v) for v in (self.sprint_10m_s, self.sprint_20m_s, self.pro_agility_5_10_5_s)
        )


@dataclass(slots=True, frozen=True)
class AwardRecord:
    title: Any = None
    awarding_entity: Any = None
    date_awarded: Any = None
    season_start: Any = None
    season_end: Any = None
    description: Any = None
    evidence_file_path: Any = None
    evidence_external_url: Any = None

    @property
    def award_period(self) -> Any:
        return first_truthy(self.date_awarded, self.season_start, self.season_end)

    @property
    def evidence(self) -> Any:
        return first_truthy(self.evidence_file_path, self.evidence_external_url)


@dataclass(slots=True, frozen=True)
class MediaItem:
    id: Any = None
    category: str = ""


@dataclass(slots=True, frozen=True)
class MediaGameMeta:
    media_item_id: Any = None
    match_date: Any = None
    opponent: Any = None
    competition: Any = None
    season: Any = None
    team_level: Any = None


@dataclass(slots=True, frozen=True)
class SocialProfile:
    platform: Any = None
    profile_url: Any = None
    handle: Any = None


@dataclass(slots=True, frozen=True)
class AthleteProfileSnapshot:
    """Everything the completion engine needs for one athlete, assembled per call."""

    athlete: AthleteRecord | None = None
    contacts_verification: ContactsVerification | None = None
    sports_experience: SportsExperience | None = None
    physical: PhysicalMetrics | None = None
    awards: tuple[AwardRecord, ...] = ()
    media_items: tuple[MediaItem, ...] = ()
    media_game_meta: tuple[MediaGameMeta, ...] = ()
    social_profiles: tuple[SocialProfile, ...] = ()


@dataclass(slots=True, frozen=True)
class AthleteStats:
    """Engagement counters feeding the talent score."""

    profile_views: int = 0
    contact_unlocks: int = 0
    messaging_operators: int = 0
    search_impressions: int = 0
    first_seen_at: datetime | None = None
    last_seen_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class SectionResult:
    filled: int
    total: int
    ratio: float
    contributes: bool
    review_status: str | None = None

    def as_dict(self) -> dict[str, Any]:
        data = {
            "filled": self.filled,
            "total": self.total,
            "ratio": self.ratio,
            "contributes": self.contributes,
        }
        if self.review_status is not None:
            data["review_status"] = self.review_status
        return data


@dataclass(slots=True, frozen=True)
class CompletionResult:
    completion: int
    breakdown: dict[str, SectionResult] = field(default_factory=dict)

    @property
    def contributing_sections(self) -> list[str]:
        return [name for name, section in self.breakdown.items() if section.contributes]
