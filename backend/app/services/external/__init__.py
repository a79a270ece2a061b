"""
External Services - Integration with external platforms.

Services:
- StravaService: Strava activity and athlete data
"""
from app.services.external.strava import StravaAPIError, StravaService

__all__ = [
    "StravaAPIError",
    "StravaService",
]
