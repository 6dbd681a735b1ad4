"""
Pure profile scoring engine.

No I/O and no state: every function here is deterministic in its inputs and
never raises on malformed data.
"""

from .athlete_score import (  # noqa: F401
    MAX_SEGMENTS,
    SEGMENTS_PER_STAR,
    STAR_COUNT,
    build_star_fills,
    compute_athlete_score_segments,
    score_label,
)
from .completion import compute_profile_completion  # noqa: F401
from .presence import count_filled, is_filled  # noqa: F401
