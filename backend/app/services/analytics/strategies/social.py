"""
Social calculator - kudos received per run.
"""
from app.services.analytics.strategies.base import ScoringContext, SubScoreCalculator, mean_of


class SocialCalculator(SubScoreCalculator):
    """An average of 15 kudos per run scores 100."""

    name = "social"

    KUDOS_FOR_MAX = 15

    def raw_score(self, context: ScoringContext) -> float:
        avg_kudos = mean_of(context.runs, lambda r: r.kudos_count)
        return avg_kudos / self.KUDOS_FOR_MAX * 100
