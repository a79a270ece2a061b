"""
Application configuration.
All values loaded from environment variables.
"""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console

    # Score Debug Logging - enables per-sub-score raw value tracing
    SCORE_DEBUG_LOG: bool = False

    # Scoring
    # First day of a calendar week, Python weekday numbering (0=Monday, 6=Sunday)
    SCORE_WEEK_START: int = 6

    # Strava
    STRAVA_API_URL: str = "https://www.strava.com/api/v3"
    STRAVA_PER_PAGE: int = 200
    STRAVA_MAX_PAGES: int = 30
    STRAVA_TIMEOUT_SECONDS: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
