"""
Consistency calculator - training frequency over recent calendar weeks.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional, Set

from app.services.analytics.periods import (
    lookback_start,
    runs_in_window,
    week_bucket_of,
    whole_weeks_between,
)
from app.services.analytics.strategies.base import (
    ScoringContext,
    SubScore,
    SubScoreCalculator,
    clamp_score,
)


@dataclass(frozen=True)
class WeeklyActivity:
    """Run distribution over the lookback window."""
    recent_run_count: int
    active_weeks: Set[date]
    window_weeks: int

    @property
    def weeks_active(self) -> int:
        return len(self.active_weeks)

    @property
    def runs_per_active_week(self) -> float:
        return self.recent_run_count / max(self.weeks_active, 1)


class ConsistencyCalculator(SubScoreCalculator):
    """
    Runs per active week over the last eight weeks.

    Four runs in every active week scores 100. Training in fewer than
    MIN_ACTIVE_WEEKS distinct weeks halves the score, provided the window
    covers at least MIN_ACTIVE_WEEKS whole weeks.
    """

    name = "consistency"

    WINDOW_WEEKS = 8
    RUNS_PER_WEEK_FOR_MAX = 4
    MIN_ACTIVE_WEEKS = 4
    PENALTY_FACTOR = 0.5

    def __init__(self, week_start: Optional[int] = None):
        self.week_start = week_start

    def weekly_activity(self, context: ScoringContext) -> WeeklyActivity:
        start = lookback_start(context.reference, self.WINDOW_WEEKS)
        recent = runs_in_window(context.runs, start, context.reference)
        weeks = {week_bucket_of(r.start_time, self.week_start) for r in recent}
        return WeeklyActivity(
            recent_run_count=len(recent),
            active_weeks=weeks,
            window_weeks=whole_weeks_between(start, context.reference),
        )

    def raw_score(self, context: ScoringContext) -> float:
        return self._raw_from(self.weekly_activity(context))

    def _raw_from(self, activity: WeeklyActivity) -> float:
        return activity.runs_per_active_week / self.RUNS_PER_WEEK_FOR_MAX * 100

    def is_penalized(self, activity: WeeklyActivity) -> bool:
        return (
            activity.weeks_active < self.MIN_ACTIVE_WEEKS
            and activity.window_weeks >= self.MIN_ACTIVE_WEEKS
        )

    def compute(self, context: ScoringContext) -> SubScore:
        activity = self.weekly_activity(context)
        raw = self._raw_from(activity)

        # Penalty applies to the already clamped score
        score: float = clamp_score(raw)
        if self.is_penalized(activity):
            score *= self.PENALTY_FACTOR

        return SubScore(name=self.name, raw=raw, value=clamp_score(score))
