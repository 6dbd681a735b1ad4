import uuid
from decimal import Decimal

import pytest

from app.features.profile_completion.domain.models import (
    AthleteProfileSnapshot,
    AthleteRecord,
    ContactsVerification,
    MediaItem,
    SportsExperience,
)
from app.features.profile_completion.domain.normalize import (
    as_sequence,
    athlete_from_row,
    build_snapshot,
    canonical_review_status,
    contacts_verification_from_row,
    snapshot_from_mapping,
    sports_experience_from_row,
    stats_from_row,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (" Approved ", "approved"),
        ("IN REVIEW", "in_review"),
        ("needs - changes", "needs_changes"),
        ("", ""),
        (None, ""),
        (1, ""),
    ],
)
def test_canonical_review_status(value, expected):
    assert canonical_review_status(value) == expected


def test_as_sequence_shapes():
    assert as_sequence(None) == []
    assert as_sequence({"a": 1}) == [{"a": 1}]
    assert as_sequence(({"a": 1},)) == [{"a": 1}]


def test_athlete_from_row_stringifies_uuid():
    athlete_uuid = uuid.uuid4()

    athlete = athlete_from_row({"id": athlete_uuid, "profile_published": "yes", "extra": 1})

    assert athlete.id == str(athlete_uuid)
    assert athlete.profile_published is False


def test_typed_records_pass_through():
    athlete = AthleteRecord(id="a1")

    assert athlete_from_row(athlete) is athlete
    assert athlete_from_row("nope") is None


def test_contacts_legacy_column_aliases():
    verification = contacts_verification_from_row(
        {
            "state_region": "Veneto",
            "postal_code": "30100",
            "address": "Calle Larga 5",
            "review_status": "Approved",
        }
    )

    assert verification.residence_region == "Veneto"
    assert verification.residence_postal_code == "30100"
    assert verification.residence_address == "Calle Larga 5"
    assert verification.is_approved is True


def test_preferred_regions_must_be_a_list():
    assert sports_experience_from_row({"preferred_regions": "Europe"}).preferred_regions == ()
    assert sports_experience_from_row({"preferred_regions": ["Asia"]}).preferred_regions == (
        "Asia",
    )


def test_stats_from_row_coerces_counters():
    stats = stats_from_row(
        {"profile_views": "21", "contact_unlocks": 4.9, "search_impressions": float("nan")}
    )

    assert stats.profile_views == 21
    assert stats.contact_unlocks == 4
    assert stats.search_impressions == 0
    assert stats.messaging_operators == 0


def test_build_snapshot_drops_non_mapping_rows():
    snapshot = build_snapshot(
        awards=[{"title": "MVP"}, "junk"],
        media_items=[{"id": 1, "category": 5}],
    )

    assert len(snapshot.awards) == 1
    assert snapshot.media_items[0].category == ""
    assert snapshot.athlete is None


def test_snapshot_from_mapping_prefers_snake_case():
    snapshot = snapshot_from_mapping(
        {
            "social_profiles": [{"platform": "instagram"}],
            "socialProfiles": [{"platform": "tiktok"}],
        }
    )

    assert snapshot.social_profiles[0].platform == "instagram"
    assert snapshot_from_mapping(snapshot) == snapshot


def test_stats_from_row_handles_huge_and_signalling_values():
    stats = stats_from_row(
        {
            "profile_views": 10**400,
            "contact_unlocks": Decimal("sNaN"),
            "messaging_operators": "1e400",
        }
    )

    assert stats.profile_views == 10**400
    assert stats.contact_unlocks == 0
    assert stats.messaging_operators == 0


def test_as_sequence_treats_nan_like_values_as_empty():
    assert as_sequence(Decimal("sNaN")) == []
    assert as_sequence(float("nan")) == []
    assert as_sequence(0) == []


def test_snapshot_from_mapping_renormalizes_typed_snapshot():
    snapshot = AthleteProfileSnapshot(
        awards=None,
        sports_experience={"sport": "Rugby", "preferred_regions": "Oceania"},
        media_items=[MediaItem(id=1, category="intro"), {"id": 2, "category": "gallery"}, "junk"],
        contacts_verification=ContactsVerification(review_status=" Approved "),
    )

    normalized = snapshot_from_mapping(snapshot)

    assert normalized.awards == ()
    assert isinstance(normalized.sports_experience, SportsExperience)
    assert normalized.sports_experience.preferred_regions == ()
    assert [item.id for item in normalized.media_items] == [1, 2]
    assert normalized.contacts_verification.review_status == "approved"
