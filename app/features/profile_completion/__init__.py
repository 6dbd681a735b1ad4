"""
Athlete profile completion feature package.

Keeps every layer of the profile scoring flow co-located: domain snapshot
models, the pure scoring engine, the record store, the service, and the API
router.
"""

from .api.router import router as profile_router  # noqa: F401
from .domain.models import AthleteProfileSnapshot, CompletionResult, SectionResult  # noqa: F401
from .engine.athlete_score import build_star_fills, compute_athlete_score_segments  # noqa: F401
from .engine.completion import compute_profile_completion  # noqa: F401
from .service import ProfileCompletionService  # noqa: F401
