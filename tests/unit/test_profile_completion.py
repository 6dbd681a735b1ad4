import copy
import itertools

import pytest

from app.features.profile_completion.domain.models import AthleteProfileSnapshot
from app.features.profile_completion.engine.completion import (
    SECTION_NAMES,
    clamp_stored_completion,
    compute_profile_completion,
)

_SECTION_KEYS = {
    "contacts": ("contacts_verification",),
    "sports": ("sports_experience",),
    "physical": ("physical",),
    "awards": ("awards",),
    "media": ("media_items", "media_game_meta"),
    "social": ("social_profiles",),
}


def test_empty_snapshot_scores_floor():
    result = compute_profile_completion({})

    assert result.completion == 40
    assert result.contributing_sections == []
    assert set(result.breakdown) == set(SECTION_NAMES)
    for name in ("awards", "social"):
        assert result.breakdown[name].ratio == 0.0
        assert result.breakdown[name].total == 0


def test_none_snapshot_scores_floor():
    assert compute_profile_completion(None).completion == 40


def test_complete_profile_scores_full(profile_rows):
    result = compute_profile_completion(profile_rows)

    assert result.completion == 100
    assert result.contributing_sections == list(SECTION_NAMES)


def test_each_section_adds_ten(profile_rows):
    for name in SECTION_NAMES:
        rows = dict(profile_rows)
        for key in _SECTION_KEYS[name]:
            rows.pop(key)

        result = compute_profile_completion(rows)

        assert result.completion == 90, name
        assert name not in result.contributing_sections


def test_completion_stays_on_the_ten_point_grid(profile_rows):
    for present in itertools.product((True, False), repeat=len(SECTION_NAMES)):
        rows = {"athlete": profile_rows["athlete"]}
        for name, keep in zip(SECTION_NAMES, present):
            if keep:
                for key in _SECTION_KEYS[name]:
                    rows[key] = profile_rows[key]

        result = compute_profile_completion(rows)

        assert result.completion == 40 + 10 * sum(present)
        assert result.completion % 10 == 0


def test_review_status_is_canonicalized(profile_rows):
    profile_rows["contacts_verification"]["review_status"] = " Approved "

    result = compute_profile_completion(profile_rows)

    assert result.breakdown["contacts"].contributes is True
    assert result.breakdown["contacts"].review_status == "approved"


@pytest.mark.parametrize("status", ["pending", "in-review", "rejected", None])
def test_unapproved_contacts_do_not_contribute(profile_rows, status):
    profile_rows["contacts_verification"]["review_status"] = status

    result = compute_profile_completion(profile_rows)

    assert result.breakdown["contacts"].contributes is False
    assert result.completion == 90


def test_game_without_opponent_is_not_counted(profile_rows):
    profile_rows["media_game_meta"][1]["opponent"] = None

    result = compute_profile_completion(profile_rows)

    assert result.breakdown["media"].filled == 10
    assert result.breakdown["media"].contributes is True


def test_camel_case_payload_is_accepted(profile_rows):
    payload = {
        "athlete": profile_rows["athlete"],
        "contactsVerification": profile_rows["contacts_verification"],
        "sportsExperience": profile_rows["sports_experience"],
        "mediaItems": profile_rows["media_items"],
        "mediaGameMeta": profile_rows["media_game_meta"],
        "socialProfiles": profile_rows["social_profiles"],
    }

    result = compute_profile_completion(payload)

    assert result.contributing_sections == ["contacts", "sports", "media", "social"]
    assert result.completion == 80


def test_single_rows_where_lists_are_expected(profile_rows):
    profile_rows["awards"] = profile_rows["awards"][0]
    profile_rows["social_profiles"] = profile_rows["social_profiles"][0]

    result = compute_profile_completion(profile_rows)

    assert result.completion == 100


def test_malformed_parts_do_not_raise(profile_rows):
    profile_rows["physical"] = "not a row"
    profile_rows["awards"] = [None, 3, "x"]
    profile_rows["media_items"] = {"unexpected": True}
    profile_rows["social_profiles"] = 42

    result = compute_profile_completion(profile_rows)

    assert result.completion == 60


def test_computation_is_deterministic(profile_rows):
    first = compute_profile_completion(profile_rows)
    second = compute_profile_completion(profile_rows)

    assert first == second


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, 40), (55.4, 55), (100, 100), (130, 100), ("70", 70), (None, 40), ("abc", 40)],
)
def test_clamp_stored_completion(value, expected):
    assert clamp_stored_completion(value) == expected


def test_input_payload_is_not_mutated(profile_rows):
    before = copy.deepcopy(profile_rows)

    compute_profile_completion(profile_rows)

    assert profile_rows == before


def test_typed_snapshot_with_missing_and_raw_fields(profile_rows):
    snapshot = AthleteProfileSnapshot(
        athlete=profile_rows["athlete"],
        contacts_verification=profile_rows["contacts_verification"],
        sports_experience=profile_rows["sports_experience"],
        physical="not a row",
        awards=None,
        media_items=None,
        media_game_meta=5,
        social_profiles=profile_rows["social_profiles"][0],
    )

    result = compute_profile_completion(snapshot)

    assert result.contributing_sections == ["contacts", "sports", "social"]
    assert result.completion == 70
    assert result.breakdown["awards"].total == 0
