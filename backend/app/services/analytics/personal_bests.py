"""
Personal Bests - Longest run and fastest efforts at milestone distances.

A run counts towards a milestone when its total distance falls inside the
milestone's band; the fastest is the one with the least moving time.
"""
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from app.core.logging import get_logger
from app.services.analytics.adapter import ActivityRecord
from app.services.analytics.periods import filter_runs

logger = get_logger(__name__)


@dataclass(frozen=True)
class Milestone:
    """A race distance with the band of run distances that qualify for it."""
    label: str
    distance_meters: float
    max_distance_meters: Optional[float] = None

    MIN_FACTOR = 0.98
    MAX_FACTOR = 1.25

    @property
    def min_distance(self) -> float:
        return self.distance_meters * self.MIN_FACTOR

    @property
    def max_distance(self) -> float:
        if self.max_distance_meters is not None:
            return self.max_distance_meters
        return self.distance_meters * self.MAX_FACTOR

    def qualifies(self, run: ActivityRecord) -> bool:
        return self.min_distance <= run.distance_meters <= self.max_distance


MILESTONES = (
    Milestone("5K", 5000),
    Milestone("10K", 10000),
    # 1.25x would admit runs well past 26 km
    Milestone("Half Marathon", 21097.5, max_distance_meters=24000),
)


@dataclass(frozen=True)
class PersonalBest:
    """One best effort and the run it came from."""
    label: str
    activity_id: str
    distance_meters: float
    moving_time_seconds: float
    start_time: datetime

    @classmethod
    def from_run(cls, label: str, run: ActivityRecord) -> "PersonalBest":
        return cls(
            label=label,
            activity_id=run.id,
            distance_meters=run.distance_meters,
            moving_time_seconds=run.moving_time_seconds,
            start_time=run.start_time,
        )


@dataclass(frozen=True)
class PersonalBests:
    longest_run: Optional[PersonalBest] = None
    fastest: List[PersonalBest] = field(default_factory=list)

    def to_list(self) -> List[Dict[str, Any]]:
        """Longest run first, then milestones in distance order."""
        bests = ([self.longest_run] if self.longest_run else []) + self.fastest
        return [asdict(best) for best in bests]


class PersonalBestsCalculator:
    """
    Best efforts over the "Run" activities of a history.

    Usage:
        bests = PersonalBestsCalculator().compute(activities)
    """

    def __init__(self, milestones: Sequence[Milestone] = MILESTONES):
        self.milestones = list(milestones)

    def longest_run(self, runs: Sequence[ActivityRecord]) -> Optional[ActivityRecord]:
        """Longest run; the first one in input order wins a tie."""
        if not runs:
            return None
        return max(runs, key=lambda r: r.distance_meters)

    def fastest_for(
        self,
        milestone: Milestone,
        runs: Sequence[ActivityRecord],
    ) -> Optional[ActivityRecord]:
        """Qualifying run with the least moving time; first wins a tie."""
        matching = [r for r in runs if milestone.qualifies(r)]
        if not matching:
            return None
        return min(matching, key=lambda r: r.moving_time_seconds)

    def compute(self, activities: Sequence[ActivityRecord]) -> PersonalBests:
        runs = filter_runs(activities)
        if not runs:
            return PersonalBests()

        longest = self.longest_run(runs)
        fastest = []
        for milestone in self.milestones:
            best = self.fastest_for(milestone, runs)
            if best is not None:
                fastest.append(PersonalBest.from_run(f"Fastest {milestone.label}", best))

        logger.debug(
            "Computed personal bests",
            run_count=len(runs),
            milestones_found=len(fastest),
        )

        return PersonalBests(
            longest_run=PersonalBest.from_run("Longest Run", longest),
            fastest=fastest,
        )
