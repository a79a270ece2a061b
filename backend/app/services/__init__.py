"""
Services module - Application business logic layer.

Modules:
- analytics: Activity normalization and run score engine
- external: External service integrations
"""
from app.services.analytics import ScoreEngine, calculate_run_score
from app.services.external import StravaService

__all__ = [
    "ScoreEngine",
    "calculate_run_score",
    "StravaService",
]
