"""
Volume-based calculators: endurance and elevation.
"""
from app.services.analytics.adapter import ActivityRecord
from app.services.analytics.strategies.base import ScoringContext, SubScoreCalculator

MARATHON_METERS = 42195


class EnduranceCalculator(SubScoreCalculator):
    """Longest run as a share of the marathon distance."""

    name = "endurance"

    def longest_run(self, context: ScoringContext) -> ActivityRecord:
        """Longest run; the first one in input order wins a tie."""
        return max(context.runs, key=lambda r: r.distance_meters)

    def raw_score(self, context: ScoringContext) -> float:
        return self.longest_run(context).distance_meters / MARATHON_METERS * 100


class ElevationCalculator(SubScoreCalculator):
    """
    Climbing density across all runs.

    15 m of gain per km (hilly terrain) scores 100.
    """

    name = "elevation"

    HILLY_METERS_PER_KM = 15

    def meters_per_km(self, context: ScoringContext) -> float:
        total_elevation = sum(r.total_elevation_gain_meters for r in context.runs)
        total_distance_km = sum(r.distance_meters for r in context.runs) / 1000
        if total_distance_km <= 0:
            return 0.0
        return total_elevation / total_distance_km

    def raw_score(self, context: ScoringContext) -> float:
        return self.meters_per_km(context) / self.HILLY_METERS_PER_KM * 100
