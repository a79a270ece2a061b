"""
Gear Usage - Per-shoe totals over "Run" activities.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.core.logging import get_logger
from app.services.analytics.adapter import ActivityRecord
from app.services.analytics.periods import filter_runs

logger = get_logger(__name__)

UNKNOWN_GEAR = "Unknown Gear"


@dataclass(frozen=True)
class GearUsage:
    """Usage totals for one piece of gear."""
    gear_id: str
    name: str
    run_count: int
    distance_meters: float
    avg_speed_meters_per_second: float

    @property
    def distance_km(self) -> float:
        return round(self.distance_meters / 1000, 1)

    @property
    def avg_pace_seconds_per_km(self) -> Optional[float]:
        """Pace from the mean of per-run average speeds; None without speed."""
        if self.avg_speed_meters_per_second <= 0:
            return None
        return 1000 / self.avg_speed_meters_per_second


class GearUsageCalculator:
    """
    Aggregate runs by gear_id.

    Usage:
        usage = GearUsageCalculator().compute(activities, gear_names={"g1": "Pegasus"})
    """

    def compute(
        self,
        activities: Sequence[ActivityRecord],
        gear_names: Optional[Mapping[str, str]] = None,
    ) -> List[GearUsage]:
        """
        Per-gear usage, most distance first.

        Args:
            activities: Activity records; only runs with a gear_id count
            gear_names: Known gear names by id (e.g. the athlete's shoes)

        Returns:
            GearUsage entries for gear with at least one run
        """
        gear_names = gear_names or {}
        totals: Dict[str, Dict[str, Any]] = {}

        for run in filter_runs(activities):
            if not run.gear_id:
                continue
            entry = totals.setdefault(run.gear_id, {
                "name": gear_names.get(run.gear_id) or run.gear_name or UNKNOWN_GEAR,
                "count": 0,
                "distance": 0.0,
                "total_speed": 0.0,
            })
            entry["count"] += 1
            entry["distance"] += run.distance_meters
            entry["total_speed"] += run.average_speed_meters_per_second

        usage = [
            GearUsage(
                gear_id=gear_id,
                name=entry["name"],
                run_count=entry["count"],
                distance_meters=entry["distance"],
                avg_speed_meters_per_second=entry["total_speed"] / entry["count"],
            )
            for gear_id, entry in totals.items()
        ]
        # stable: equal distances keep first-seen order
        usage.sort(key=lambda g: g.distance_meters, reverse=True)

        logger.debug("Computed gear usage", gear_count=len(usage))

        return usage


def gear_names_from_athlete(athlete: Mapping[str, Any]) -> Dict[str, str]:
    """Map gear ids to names from a Strava athlete profile's shoes."""
    return {
        shoe["id"]: shoe.get("name") or UNKNOWN_GEAR
        for shoe in athlete.get("shoes") or []
        if shoe.get("id")
    }
