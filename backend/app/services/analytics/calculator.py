"""
Score Engine - Main engine for computing the run score.

Orchestrates:
- Filtering the activity history down to runs
- Computing the shared all-time average speed once
- Running each sub-score calculator over the same run set
- Aggregating the six sub-scores into the overall score
"""
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from app.core.logging import ScoreDebugLogger, get_logger
from app.services.analytics.adapter import ActivityRecord
from app.services.analytics.periods import filter_runs
from app.services.analytics.strategies import (
    ConsistencyCalculator,
    ElevationCalculator,
    EnduranceCalculator,
    PaceCalculator,
    ProgressCalculator,
    ScoringContext,
    SocialCalculator,
    SubScoreCalculator,
    round_half_away,
)

logger = get_logger(__name__)

SUB_SCORE_NAMES = ("pace", "endurance", "consistency", "progress", "social", "elevation")


@dataclass(frozen=True)
class ScoreBreakdown:
    """Six sub-scores and the overall score, each an integer."""
    pace: int = 0
    endurance: int = 0
    consistency: int = 0
    progress: int = 0
    social: int = 0
    elevation: int = 0
    overall: int = 0

    @classmethod
    def empty(cls) -> "ScoreBreakdown":
        return cls()

    def sub_scores(self) -> List[int]:
        return [getattr(self, name) for name in SUB_SCORE_NAMES]

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def aggregate_overall(sub_scores: Sequence[int]) -> int:
    """
    Combine sub-scores into the overall score.

    The inputs must already be clamped integers. Their mean is rounded
    half away from zero, so [10, 20, 30, 40, 50, 57] (mean 34.5) gives 35.
    Averaging unrounded raw values instead changes results at .5 ties.
    """
    if not sub_scores:
        return 0
    return round_half_away(sum(sub_scores) / len(sub_scores))


class ScoreEngine:
    """
    Stateless run score engine.

    Usage:
        engine = ScoreEngine()
        breakdown = engine.compute(activities, reference_instant=now)
    """

    def __init__(
        self,
        week_start: Optional[int] = None,
        debug_log: Optional[bool] = None,
    ):
        self._calculators: List[SubScoreCalculator] = [
            PaceCalculator(),
            EnduranceCalculator(),
            ConsistencyCalculator(week_start=week_start),
            ProgressCalculator(),
            SocialCalculator(),
            ElevationCalculator(),
        ]
        self._debug_logger = ScoreDebugLogger(logger, enabled=debug_log)

    def compute(
        self,
        activities: Sequence[ActivityRecord],
        reference_instant: Optional[datetime] = None,
    ) -> ScoreBreakdown:
        """
        Compute the run score for an activity history.

        Args:
            activities: Activity records for the selected period
            reference_instant: Local "now" the lookback windows end at.
                Defaults to the current local time.

        Returns:
            ScoreBreakdown; all zeros when there are no runs
        """
        if reference_instant is None:
            reference_instant = datetime.now()
        reference_instant = reference_instant.replace(tzinfo=None)

        with self._debug_logger.track(
            activity_count=len(activities),
            reference_instant=reference_instant.isoformat(),
        ) as tracker:
            runs = filter_runs(activities)
            tracker.set_run_count(len(runs))

            if not runs:
                tracker.set_overall(0)
                return ScoreBreakdown.empty()

            context = ScoringContext.build(runs, reference_instant)

            scores: Dict[str, int] = {}
            for calculator in self._calculators:
                sub_score = calculator.compute(context)
                tracker.add_sub_score(sub_score.name, sub_score.raw, sub_score.value)
                scores[sub_score.name] = sub_score.value

            overall = aggregate_overall([scores[name] for name in SUB_SCORE_NAMES])
            tracker.set_overall(overall)

            return ScoreBreakdown(overall=overall, **scores)


def calculate_run_score(
    activities: Sequence[ActivityRecord],
    reference_instant: Optional[datetime] = None,
) -> ScoreBreakdown:
    """Compute a run score with default settings."""
    return ScoreEngine().compute(activities, reference_instant)
