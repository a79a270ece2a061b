"""
Speed-based calculators: pace and progress.

Both read the all-time average speed from the shared ScoringContext.
"""
from typing import List

from app.services.analytics.adapter import ActivityRecord
from app.services.analytics.periods import lookback_start, runs_in_window
from app.services.analytics.strategies.base import (
    ScoringContext,
    SubScore,
    SubScoreCalculator,
    clamp_score,
    mean_of,
)


class PaceCalculator(SubScoreCalculator):
    """
    Linear map of all-time average speed.

    2.0 m/s scores 0 and 4.5 m/s scores 100 before clamping,
    so ~2.5 m/s (6:40/km) lands at 20.
    """

    name = "pace"

    FLOOR_SPEED = 2.0  # m/s
    SPEED_RANGE = 2.5  # m/s from floor to a score of 100

    def raw_score(self, context: ScoringContext) -> float:
        return (context.avg_speed - self.FLOOR_SPEED) / self.SPEED_RANGE * 100


class ProgressCalculator(SubScoreCalculator):
    """
    Recent average speed relative to the all-time average.

    A 10% improvement over the last four weeks scores ~90, no change 60,
    and a 20% decline bottoms out. With no runs in the window the score is
    a flat INACTIVE_SCORE.
    """

    name = "progress"

    WINDOW_WEEKS = 4
    BASELINE = 60
    IMPROVEMENT_WEIGHT = 300
    INACTIVE_SCORE = 40

    def recent_runs(self, context: ScoringContext) -> List[ActivityRecord]:
        start = lookback_start(context.reference, self.WINDOW_WEEKS)
        return runs_in_window(context.runs, start, context.reference)

    def raw_score(self, context: ScoringContext) -> float:
        recent = self.recent_runs(context)
        if not recent:
            return float(self.INACTIVE_SCORE)
        return self._raw_from(context, recent)

    def _raw_from(self, context: ScoringContext, recent: List[ActivityRecord]) -> float:
        recent_avg_speed = mean_of(recent, lambda r: r.average_speed_meters_per_second)

        if context.avg_speed == 0:
            improvement = 0.0
        else:
            improvement = (recent_avg_speed - context.avg_speed) / context.avg_speed

        return self.BASELINE + improvement * self.IMPROVEMENT_WEIGHT

    def compute(self, context: ScoringContext) -> SubScore:
        recent = self.recent_runs(context)
        if not recent:
            return SubScore(name=self.name, raw=None, value=self.INACTIVE_SCORE)
        raw = self._raw_from(context, recent)
        return SubScore(name=self.name, raw=raw, value=clamp_score(raw))
