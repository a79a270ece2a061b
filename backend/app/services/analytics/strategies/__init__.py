"""
Sub-score calculators.

Each calculator reduces the shared run set to one bounded integer
for a single dimension of the run score.
"""
from app.services.analytics.strategies.base import (
    ScoringContext,
    SubScore,
    SubScoreCalculator,
    clamp_score,
    round_half_away,
)
from app.services.analytics.strategies.consistency import ConsistencyCalculator
from app.services.analytics.strategies.social import SocialCalculator
from app.services.analytics.strategies.speed import PaceCalculator, ProgressCalculator
from app.services.analytics.strategies.volume import EnduranceCalculator, ElevationCalculator

__all__ = [
    "ScoringContext",
    "SubScore",
    "SubScoreCalculator",
    "clamp_score",
    "round_half_away",
    "PaceCalculator",
    "EnduranceCalculator",
    "ConsistencyCalculator",
    "ProgressCalculator",
    "SocialCalculator",
    "ElevationCalculator",
]
