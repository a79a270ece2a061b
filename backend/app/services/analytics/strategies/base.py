"""
Base Calculator - Abstract interface for sub-score calculations.
"""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from app.services.analytics.adapter import ActivityRecord

SCORE_MIN = 1
SCORE_MAX = 100


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    This is the only rounding rule used by the scoring engine
    (Python's built-in round() rounds halves to even).
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def clamp_score(value: float) -> int:
    """
    Round `value` and clamp it to [SCORE_MIN, SCORE_MAX].

    NaN maps to SCORE_MIN and infinities to the nearest bound.
    """
    if math.isnan(value):
        return SCORE_MIN
    if math.isinf(value):
        return SCORE_MAX if value > 0 else SCORE_MIN
    return min(max(round_half_away(value), SCORE_MIN), SCORE_MAX)


def mean_of(runs: Sequence[ActivityRecord], attr: Callable[[ActivityRecord], float]) -> float:
    """Arithmetic mean of `attr` over a non-empty run list."""
    return sum(attr(r) for r in runs) / len(runs)


@dataclass(frozen=True)
class ScoringContext:
    """
    Inputs shared by every calculator in one engine run.

    `avg_speed` is the all-time mean average speed of `runs`, computed
    once and read by both the pace and progress calculators.
    """
    runs: List[ActivityRecord]
    reference: datetime
    avg_speed: float

    @classmethod
    def build(cls, runs: Sequence[ActivityRecord], reference: datetime) -> "ScoringContext":
        runs = list(runs)
        if not runs:
            raise ValueError("ScoringContext requires at least one run")
        avg_speed = mean_of(runs, lambda r: r.average_speed_meters_per_second)
        return cls(runs=runs, reference=reference, avg_speed=avg_speed)


@dataclass(frozen=True)
class SubScore:
    """One computed sub-score with the raw value it came from."""
    name: str
    raw: Optional[float]
    value: int


class SubScoreCalculator(ABC):
    """
    Abstract base class for one dimension of the run score.

    Subclasses map the shared run set to a raw value; `compute` turns it
    into a bounded integer. Calculators hold no state between calls.
    """

    name: str = "unknown"

    @abstractmethod
    def raw_score(self, context: ScoringContext) -> float:
        """
        Compute the unclamped score.

        Args:
            context: Shared scoring inputs

        Returns:
            Raw score on the 0-100 scale (may fall outside it)
        """
        pass

    def compute(self, context: ScoringContext) -> SubScore:
        """
        Compute the bounded sub-score.

        Args:
            context: Shared scoring inputs

        Returns:
            SubScore with the raw value and clamped integer
        """
        raw = self.raw_score(context)
        return SubScore(name=self.name, raw=raw, value=clamp_score(raw))
