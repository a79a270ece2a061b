"""
Data Source Adapters - Normalize raw activity data from various sources.

Supported sources:
- Strava API (SummaryActivity payloads)
- Manual input (already normalized field names)
"""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from app.core.logging import get_logger

logger = get_logger(__name__)


class ActivityDataError(ValueError):
    """Raised when a raw activity record cannot be normalized."""


@dataclass(frozen=True)
class ActivityRecord:
    """
    Unified activity record.

    This is the intermediate representation after adapting raw data
    from any source. The score engine reads only this format.

    `start_time` is the provider's local wall-clock time as a naive
    datetime. It is never converted to UTC; an aware datetime keeps its
    clock reading and loses its tzinfo.
    """
    id: str
    activity_type: str  # Provider category, e.g. "Run", "Ride", "Walk"
    start_time: datetime
    distance_meters: float = 0.0
    moving_time_seconds: float = 0.0
    average_speed_meters_per_second: float = 0.0
    total_elevation_gain_meters: float = 0.0
    kudos_count: int = 0

    # Carried through, not scored
    name: Optional[str] = None
    sport_type: Optional[str] = None
    elapsed_time_seconds: float = 0.0
    max_speed_meters_per_second: float = 0.0
    gear_id: Optional[str] = None
    gear_name: Optional[str] = None

    def __post_init__(self):
        if self.start_time.tzinfo is not None:
            object.__setattr__(self, "start_time", self.start_time.replace(tzinfo=None))

    @property
    def is_run(self) -> bool:
        return self.activity_type == "Run"


def parse_local_timestamp(value: Any) -> datetime:
    """
    Parse a local start timestamp into a naive wall-clock datetime.

    Strava's `start_date_local` carries a misleading trailing "Z"; it is
    dropped so the clock reading is kept as-is. Any explicit offset is
    discarded the same way.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)

    if not isinstance(value, str) or not value.strip():
        raise ActivityDataError(f"Invalid start timestamp: {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1]

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ActivityDataError(f"Invalid start timestamp: {value!r}") from e

    return parsed.replace(tzinfo=None)


class RawDataAdapter(ABC):
    """Abstract base class for data source adapters."""

    source_name: str = "unknown"

    @abstractmethod
    def normalize(self, raw_data: Dict[str, Any]) -> ActivityRecord:
        """
        Normalize raw data to unified format.

        Args:
            raw_data: Raw data from the source

        Returns:
            ActivityRecord with unified structure

        Raises:
            ActivityDataError: If the record has no usable start time
        """
        pass

    def normalize_many(self, raw_items: Sequence[Dict[str, Any]]) -> List[ActivityRecord]:
        """Normalize a batch of raw records, preserving input order."""
        return [self.normalize(raw) for raw in raw_items]

    @staticmethod
    def _number(raw_data: Dict[str, Any], key: str) -> float:
        """Read a finite numeric field, treating missing or null as zero."""
        value = raw_data.get(key)
        if value is None:
            return 0.0
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ActivityDataError(f"Field {key!r} is not numeric: {value!r}") from e
        if not math.isfinite(number):
            raise ActivityDataError(f"Field {key!r} is not finite: {value!r}")
        return number


class StravaAdapter(RawDataAdapter):
    """
    Adapter for Strava API data.

    Strava's activity list endpoint returns SummaryActivity objects with
    distance in meters, times in seconds and speeds in m/s, so values map
    across without unit conversion.
    """

    source_name = "strava"

    def normalize(self, raw_data: Dict[str, Any]) -> ActivityRecord:
        """Normalize a Strava SummaryActivity."""
        if "start_date_local" not in raw_data:
            raise ActivityDataError(
                f"Strava activity {raw_data.get('id')!r} has no start_date_local"
            )

        distance = self._number(raw_data, "distance")
        moving_time = self._number(raw_data, "moving_time")
        average_speed = self._number(raw_data, "average_speed")

        # Older uploads can omit average_speed
        if "average_speed" not in raw_data and moving_time > 0:
            average_speed = distance / moving_time

        record = ActivityRecord(
            id=str(raw_data.get("id")),
            activity_type=str(raw_data.get("type") or raw_data.get("sport_type") or ""),
            start_time=parse_local_timestamp(raw_data["start_date_local"]),
            distance_meters=distance,
            moving_time_seconds=moving_time,
            average_speed_meters_per_second=average_speed,
            total_elevation_gain_meters=self._number(raw_data, "total_elevation_gain"),
            kudos_count=int(self._number(raw_data, "kudos_count")),
            name=raw_data.get("name"),
            sport_type=raw_data.get("sport_type"),
            elapsed_time_seconds=self._number(raw_data, "elapsed_time"),
            max_speed_meters_per_second=self._number(raw_data, "max_speed"),
            gear_id=raw_data.get("gear_id"),
            gear_name=(raw_data.get("gear") or {}).get("name"),
        )

        logger.debug(
            "Normalized Strava activity",
            activity_id=record.id,
            activity_type=record.activity_type,
            distance=record.distance_meters,
        )

        return record


class ManualAdapter(RawDataAdapter):
    """
    Adapter for records already using the unified field names.

    Used for exported or hand-written activity histories.
    """

    source_name = "manual"

    def normalize(self, raw_data: Dict[str, Any]) -> ActivityRecord:
        """Normalize manually entered data."""
        if "start_time" not in raw_data:
            raise ActivityDataError(f"Activity {raw_data.get('id')!r} has no start_time")

        record = ActivityRecord(
            id=str(raw_data.get("id")),
            activity_type=str(raw_data.get("activity_type") or ""),
            start_time=parse_local_timestamp(raw_data["start_time"]),
            distance_meters=self._number(raw_data, "distance_meters"),
            moving_time_seconds=self._number(raw_data, "moving_time_seconds"),
            average_speed_meters_per_second=self._number(raw_data, "average_speed_meters_per_second"),
            total_elevation_gain_meters=self._number(raw_data, "total_elevation_gain_meters"),
            kudos_count=int(self._number(raw_data, "kudos_count")),
            name=raw_data.get("name"),
            gear_id=raw_data.get("gear_id"),
            gear_name=raw_data.get("gear_name"),
        )

        logger.debug(
            "Normalized manual activity",
            activity_id=record.id,
            activity_type=record.activity_type,
        )

        return record


# Adapter registry
_ADAPTERS = {
    "strava": StravaAdapter,
    "manual": ManualAdapter,
}


def get_adapter(source: str) -> RawDataAdapter:
    """
    Get the appropriate adapter for a data source.

    Args:
        source: Data source name (strava, manual)

    Returns:
        Adapter instance
    """
    adapter_class = _ADAPTERS.get(source.lower())

    if not adapter_class:
        logger.warning("Unknown data source, falling back to manual", source=source)
        adapter_class = ManualAdapter

    return adapter_class()
