"""
Strava Service - Read-only access to an athlete's Strava data.

Token issuance and refresh happen elsewhere; every call takes an
already-valid bearer token.
"""
from typing import Any, Dict, List, Optional
from abc import ABC, abstractmethod

import httpx

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class StravaAPIError(Exception):
    """Raised when Strava cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StravaServiceInterface(ABC):
    """Abstract interface for Strava integration."""

    @abstractmethod
    async def get_athlete(self, access_token: str) -> Dict[str, Any]:
        """Get authenticated athlete profile."""
        pass

    @abstractmethod
    async def get_activities(self, access_token: str) -> List[Dict[str, Any]]:
        """Get all athlete activities."""
        pass


class StravaService(StravaServiceInterface):
    """
    Strava API v3 client built on httpx.

    Usage:
        service = StravaService()
        activities = await service.get_activities(access_token)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        per_page: Optional[int] = None,
        max_pages: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Strava service.

        Args:
            base_url: API root, defaults to settings.STRAVA_API_URL
            per_page: Activities requested per page
            max_pages: Hard cap on pages fetched per listing
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.STRAVA_API_URL).rstrip("/")
        self.per_page = per_page or settings.STRAVA_PER_PAGE
        self.max_pages = max_pages or settings.STRAVA_MAX_PAGES
        self.timeout = timeout or settings.STRAVA_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self, access_token: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error("Strava request failed", path=path, error_type=type(e).__name__)
            raise StravaAPIError(f"Strava request failed: {e}") from e

        if response.status_code != 200:
            logger.warning(
                "Strava API error",
                path=path,
                status_code=response.status_code,
            )
            raise StravaAPIError(
                f"Strava API error: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return response.json()

    async def get_athlete(self, access_token: str) -> Dict[str, Any]:
        """
        Get authenticated athlete profile.

        Raises:
            StravaAPIError: On transport failure or non-200 response
        """
        async with self._client(access_token) as client:
            return await self._get_json(client, "/athlete")

    async def get_activities(self, access_token: str) -> List[Dict[str, Any]]:
        """
        Get every activity of the athlete, newest first.

        Pages through /athlete/activities until an empty or short page,
        or until max_pages is reached. A failing first page raises; a
        failing later page ends the listing with what was collected.

        Raises:
            StravaAPIError: If the first page cannot be fetched
        """
        activities: List[Dict[str, Any]] = []

        async with self._client(access_token) as client:
            for page in range(1, self.max_pages + 1):
                try:
                    batch = await self._get_json(
                        client,
                        "/athlete/activities",
                        params={"per_page": self.per_page, "page": page},
                    )
                except StravaAPIError:
                    if page == 1:
                        raise
                    logger.warning(
                        "Stopping activity pagination after failed page",
                        page=page,
                        collected=len(activities),
                    )
                    break

                if not batch:
                    break

                activities.extend(batch)

                if len(batch) < self.per_page:
                    break
            else:
                logger.info(
                    "Reached Strava page limit",
                    max_pages=self.max_pages,
                    collected=len(activities),
                )

        logger.info("Fetched Strava activities", count=len(activities))
        return activities

