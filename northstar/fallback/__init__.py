# Fallback Module
# Deterministic stage generators built only from the user's structured input

from .timelines import build_fallback_timelines
from .tradeoffs import build_fallback_tradeoffs, derive_weights
from .plan import build_fallback_plan
from .trailer import build_fallback_trailer

__all__ = [
    "build_fallback_timelines",
    "build_fallback_tradeoffs",
    "derive_weights",
    "build_fallback_plan",
    "build_fallback_trailer",
]
