"""
Profile completion aggregator.

``completion = 40 + 10 * contributing sections``, capped at 100. The 40 is
the floor every athlete gets for starting the wizard.
"""

from typing import Any

from ..domain.models import AthleteProfileSnapshot, CompletionResult
from ..domain.normalize import snapshot_from_mapping
from .sections import (
    evaluate_awards,
    evaluate_contacts,
    evaluate_media,
    evaluate_physical,
    evaluate_social,
    evaluate_sports,
)

BASE_COMPLETION = 40
SECTION_WEIGHT = 10
MAX_COMPLETION = 100

SECTION_NAMES = ("contacts", "sports", "physical", "awards", "media", "social")


def compute_profile_completion(
    snapshot: AthleteProfileSnapshot | dict[str, Any] | None = None,
) -> CompletionResult:
    """
    Score a profile snapshot.

    Accepts a typed snapshot or a raw payload (snake_case or camelCase keys).
    Never raises; malformed parts simply count as not filled.
    """
    snap = snapshot_from_mapping(snapshot)

    breakdown = {
        "contacts": evaluate_contacts(snap.athlete, snap.contacts_verification),
        "sports": evaluate_sports(snap.sports_experience),
        "physical": evaluate_physical(snap.physical),
        "awards": evaluate_awards(snap.awards),
        "media": evaluate_media(snap.media_items, snap.media_game_meta),
        "social": evaluate_social(snap.social_profiles),
    }

    contributing = sum(1 for section in breakdown.values() if section.contributes)
    completion = min(MAX_COMPLETION, BASE_COMPLETION + SECTION_WEIGHT * contributing)
    return CompletionResult(completion=completion, breakdown=breakdown)


def clamp_stored_completion(value: Any) -> int:
    """Clamp a completion value into the persisted range [40, 100]."""
    try:
        numeric = round(float(value))
    except (TypeError, ValueError, OverflowError):
        return BASE_COMPLETION
    return max(BASE_COMPLETION, min(MAX_COMPLETION, numeric))
