"""Typed snapshot models and the raw-row adapters that build them."""

from .models import (  # noqa: F401
    AthleteProfileSnapshot,
    AthleteRecord,
    AthleteStats,
    CompletionResult,
    SectionResult,
)
from .normalize import build_snapshot, canonical_review_status, snapshot_from_mapping  # noqa: F401
