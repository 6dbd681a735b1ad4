"""
Adapters from raw database rows to the typed profile snapshot.

Rows arrive as dicts (psycopg ``dict_row``) or from JSON payloads, so any of
them may be missing, ``None``, a single row where a list was expected, or the
wrong type entirely. Nothing here raises: unusable input becomes an empty
record or is dropped.
"""

import dataclasses
import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from .models import (
    AthleteProfileSnapshot,
    AthleteRecord,
    AthleteStats,
    AwardRecord,
    ContactsVerification,
    MediaGameMeta,
    MediaItem,
    PhysicalMetrics,
    SocialProfile,
    SportsExperience,
    _truthy,
    first_truthy,
)

_STATUS_SEPARATORS = re.compile(r"[\s\-]+")


def as_sequence(value: Any) -> list:
    """Normalize a list, a single item, or nothing into a list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value] if _truthy(value) else []


def canonical_review_status(value: Any) -> str:
    """``" Approved "`` -> ``"approved"``; ``"in-review"`` -> ``"in_review"``."""
    if not isinstance(value, str):
        return ""
    return _STATUS_SEPARATORS.sub("_", value.strip().lower())


def _row(value: Any) -> Mapping | None:
    return value if isinstance(value, Mapping) else None


def _pick(cls, row: Mapping, **overrides):
    """Build ``cls`` from the keys of ``row`` that match its fields."""
    names = {f.name for f in dataclasses.fields(cls)}
    values = {key: row[key] for key in names if key in row}
    values.update(overrides)
    return cls(**values)


def _rows(value: Any, cls, from_row=None) -> tuple:
    """Typed instances of ``cls`` pass through; mappings are converted; the rest is dropped."""
    convert = from_row or (lambda row: _pick(cls, row))
    records = []
    for row in as_sequence(value):
        if isinstance(row, cls):
            records.append(row)
        elif isinstance(row, Mapping):
            records.append(convert(row))
    return tuple(records)


def athlete_from_row(value: Any) -> AthleteRecord | None:
    if isinstance(value, AthleteRecord):
        return value
    row = _row(value)
    if row is None:
        return None
    return _pick(
        AthleteRecord,
        row,
        id=str(row["id"]) if row.get("id") is not None else None,
        profile_published=row.get("profile_published") is True,
    )


def contacts_verification_from_row(value: Any) -> ContactsVerification | None:
    if isinstance(value, ContactsVerification):
        status = canonical_review_status(value.review_status)
        if status == value.review_status:
            return value
        return dataclasses.replace(value, review_status=status)
    row = _row(value)
    if row is None:
        return None
    return _pick(
        ContactsVerification,
        row,
        residence_region=first_truthy(row.get("residence_region"), row.get("state_region")),
        residence_postal_code=first_truthy(
            row.get("residence_postal_code"), row.get("postal_code")
        ),
        residence_address=first_truthy(row.get("residence_address"), row.get("address")),
        review_status=canonical_review_status(row.get("review_status")),
    )


def sports_experience_from_row(value: Any) -> SportsExperience | None:
    if isinstance(value, SportsExperience):
        return value
    row = _row(value)
    if row is None:
        return None
    regions = row.get("preferred_regions")
    return _pick(
        SportsExperience,
        row,
        preferred_regions=tuple(regions) if isinstance(regions, (list, tuple)) else (),
    )


def physical_from_row(value: Any) -> PhysicalMetrics | None:
    if isinstance(value, PhysicalMetrics):
        return value
    row = _row(value)
    return _pick(PhysicalMetrics, row) if row is not None else None


def media_item_from_row(row: Mapping) -> MediaItem:
    category = row.get("category")
    return MediaItem(id=row.get("id"), category=category if isinstance(category, str) else "")


def _coerce_count(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return int(value or 0)
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal):
        return int(value) if value.is_finite() else 0
    if isinstance(value, float):
        numeric = value
    elif isinstance(value, str):
        try:
            numeric = float(value.strip() or 0)
        except ValueError:
            return 0
    else:
        return 0
    return int(numeric) if math.isfinite(numeric) else 0


def stats_from_row(value: Any) -> AthleteStats:
    if isinstance(value, AthleteStats):
        return value
    row = _row(value) or {}
    return AthleteStats(
        profile_views=_coerce_count(row.get("profile_views")),
        contact_unlocks=_coerce_count(row.get("contact_unlocks")),
        messaging_operators=_coerce_count(row.get("messaging_operators")),
        search_impressions=_coerce_count(row.get("search_impressions")),
        first_seen_at=row.get("first_seen_at"),
        last_seen_at=row.get("last_seen_at"),
    )


def build_snapshot(
    *,
    athlete: Any = None,
    contacts_verification: Any = None,
    sports_experience: Any = None,
    physical: Any = None,
    awards: Any = None,
    media_items: Any = None,
    media_game_meta: Any = None,
    social_profiles: Any = None,
) -> AthleteProfileSnapshot:
    """Assemble a snapshot from whatever the record store returned."""
    return AthleteProfileSnapshot(
        athlete=athlete_from_row(athlete),
        contacts_verification=contacts_verification_from_row(contacts_verification),
        sports_experience=sports_experience_from_row(sports_experience),
        physical=physical_from_row(physical),
        awards=_rows(awards, AwardRecord),
        media_items=_rows(media_items, MediaItem, media_item_from_row),
        media_game_meta=_rows(media_game_meta, MediaGameMeta),
        social_profiles=_rows(social_profiles, SocialProfile),
    )


_PAYLOAD_KEYS = {
    "athlete": ("athlete",),
    "contacts_verification": ("contacts_verification", "contactsVerification"),
    "sports_experience": ("sports_experience", "sportsExperience"),
    "physical": ("physical",),
    "awards": ("awards",),
    "media_items": ("media_items", "mediaItems"),
    "media_game_meta": ("media_game_meta", "mediaGameMeta"),
    "social_profiles": ("social_profiles", "socialProfiles"),
}


def snapshot_from_mapping(data: Any) -> AthleteProfileSnapshot:
    """
    Accept a snake_case or camelCase payload (e.g. a front-end draft).

    A typed snapshot is re-normalized field by field, since its fields may
    still hold raw rows or ``None``.
    """
    if isinstance(data, AthleteProfileSnapshot):
        return build_snapshot(
            **{f.name: getattr(data, f.name) for f in dataclasses.fields(data)}
        )
    payload = _row(data) or {}
    kwargs = {}
    for name, aliases in _PAYLOAD_KEYS.items():
        for alias in aliases:
            if payload.get(alias) is not None:
                kwargs[name] = payload[alias]
                break
    return build_snapshot(**kwargs)
