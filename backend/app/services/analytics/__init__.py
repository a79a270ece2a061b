"""
Analytics module - Activity normalization and run score calculation.

This module provides:
- Data adapters for normalizing raw activity data from various sources
- Period selection and calendar week helpers
- Sub-score calculators
- The run score engine
- Personal bests and gear usage
"""
from app.services.analytics.adapter import (
    ActivityDataError,
    ActivityRecord,
    RawDataAdapter,
    StravaAdapter,
    ManualAdapter,
    get_adapter,
)
from app.services.analytics.calculator import (
    ScoreBreakdown,
    ScoreEngine,
    aggregate_overall,
    calculate_run_score,
)
from app.services.analytics.gear import (
    GearUsage,
    GearUsageCalculator,
    gear_names_from_athlete,
)
from app.services.analytics.personal_bests import (
    PersonalBest,
    PersonalBests,
    PersonalBestsCalculator,
)
from app.services.analytics.periods import (
    available_years,
    filter_runs,
    select_year,
    week_bucket_of,
)

__all__ = [
    # Data structures
    "ActivityRecord",
    "ActivityDataError",
    "ScoreBreakdown",
    # Adapters
    "RawDataAdapter",
    "StravaAdapter",
    "ManualAdapter",
    "get_adapter",
    # Periods
    "available_years",
    "filter_runs",
    "select_year",
    "week_bucket_of",
    # Engine
    "ScoreEngine",
    "aggregate_overall",
    "calculate_run_score",
    # Highlights
    "GearUsage",
    "GearUsageCalculator",
    "gear_names_from_athlete",
    "PersonalBest",
    "PersonalBests",
    "PersonalBestsCalculator",
]
