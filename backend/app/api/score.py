"""
Run Score API endpoints.
"""
from datetime import date, datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel, Field

from app.core.logging import get_logger
from app.services.analytics import (
    ActivityDataError,
    ActivityRecord,
    GearUsageCalculator,
    PersonalBestsCalculator,
    ScoreBreakdown,
    ScoreEngine,
    available_years,
    filter_runs,
    gear_names_from_athlete,
    get_adapter,
    select_year,
)
from app.services.external import StravaAPIError, StravaService

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class ScoreRequest(BaseModel):
    """Request to score a supplied activity history."""
    activities: list[dict[str, Any]] = Field(..., description="Raw activity records")
    source: str = Field("strava", description="Record format: strava or manual")
    referenceInstant: Optional[datetime] = Field(
        None, description="Local time the lookback windows end at (defaults to now)"
    )
    year: Optional[int] = Field(None, description="Only score activities started in this year")


class ScoreBreakdownResponse(BaseModel):
    """Run score response."""
    pace: int
    endurance: int
    consistency: int
    progress: int
    social: int
    elevation: int
    overall: int
    runCount: int
    year: Optional[int]
    referenceInstant: datetime


class YearsResponse(BaseModel):
    """Years with activity, newest first."""
    years: list[int]


class HighlightsRequest(BaseModel):
    """Request for personal bests and gear usage of a supplied history."""
    activities: list[dict[str, Any]] = Field(..., description="Raw activity records")
    source: str = Field("strava", description="Record format: strava or manual")
    year: Optional[int] = Field(None, description="Only use activities started in this year")


class PersonalBestResponse(BaseModel):
    """One best effort."""
    label: str
    activityId: str
    distanceMeters: float
    movingTimeSeconds: float
    startTime: datetime


class GearUsageResponse(BaseModel):
    """Usage totals for one piece of gear."""
    gearId: str
    name: str
    runCount: int
    distanceKm: float
    avgPaceSecondsPerKm: Optional[float]


class HighlightsResponse(BaseModel):
    """Personal bests and gear usage."""
    personalBests: list[PersonalBestResponse]
    gear: list[GearUsageResponse]
    year: Optional[int]


# ========================================
# Dependencies
# ========================================

def get_strava_service() -> StravaService:
    return StravaService()


def get_score_engine() -> ScoreEngine:
    return ScoreEngine()


def require_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """Extract the Strava access token from the Authorization header."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    token = authorization[7:].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return token


# ========================================
# Helpers
# ========================================

def _normalize(raw_items: list[dict[str, Any]], source: str) -> List[ActivityRecord]:
    try:
        return get_adapter(source).normalize_many(raw_items)
    except ActivityDataError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _strava_http_error(error: StravaAPIError) -> HTTPException:
    if error.status_code == 401:
        return HTTPException(status_code=401, detail="Strava rejected the access token")
    return HTTPException(status_code=502, detail=str(error))


async def _fetch_strava_records(service: StravaService, token: str) -> List[ActivityRecord]:
    try:
        raw_items = await service.get_activities(token)
    except StravaAPIError as e:
        raise _strava_http_error(e)
    return _normalize(raw_items, "strava")


def _build_highlights(
    records: List[ActivityRecord],
    year: Optional[int],
    gear_names: Optional[dict[str, str]] = None,
) -> HighlightsResponse:
    bests = PersonalBestsCalculator().compute(records)
    gear = GearUsageCalculator().compute(records, gear_names)

    return HighlightsResponse(
        personalBests=[
            PersonalBestResponse(
                label=best["label"],
                activityId=best["activity_id"],
                distanceMeters=best["distance_meters"],
                movingTimeSeconds=best["moving_time_seconds"],
                startTime=best["start_time"],
            )
            for best in bests.to_list()
        ],
        gear=[
            GearUsageResponse(
                gearId=usage.gear_id,
                name=usage.name,
                runCount=usage.run_count,
                distanceKm=usage.distance_km,
                avgPaceSecondsPerKm=usage.avg_pace_seconds_per_km,
            )
            for usage in gear
        ],
        year=year,
    )


def _build_response(
    breakdown: ScoreBreakdown,
    records: List[ActivityRecord],
    year: Optional[int],
    reference: datetime,
) -> ScoreBreakdownResponse:
    return ScoreBreakdownResponse(
        **breakdown.to_dict(),
        runCount=len(filter_runs(records)),
        year=year,
        referenceInstant=reference,
    )


# ========================================
# API Endpoints
# ========================================

@router.post("", response_model=ScoreBreakdownResponse)
async def score_activities(
    request: ScoreRequest,
    engine: ScoreEngine = Depends(get_score_engine),
):
    """
    Score a supplied activity history.
    """
    records = _normalize(request.activities, request.source)
    if request.year is not None:
        records = select_year(records, request.year)

    reference = (request.referenceInstant or datetime.now()).replace(tzinfo=None)
    breakdown = engine.compute(records, reference)

    logger.info(
        "Scored supplied activities",
        activity_count=len(records),
        year=request.year,
        overall=breakdown.overall,
    )

    return _build_response(breakdown, records, request.year, reference)


@router.get("/strava", response_model=ScoreBreakdownResponse)
async def score_strava_activities(
    year: Optional[int] = Query(None, description="Year to score, defaults to the latest"),
    token: str = Depends(require_bearer_token),
    service: StravaService = Depends(get_strava_service),
    engine: ScoreEngine = Depends(get_score_engine),
):
    """
    Fetch the athlete's Strava history and score one year of it.
    """
    records = await _fetch_strava_records(service, token)

    if year is None:
        year = available_years(records)[0]
    selected = select_year(records, year)

    reference = datetime.now()
    breakdown = engine.compute(selected, reference)

    logger.info(
        "Scored Strava activities",
        activity_count=len(selected),
        year=year,
        overall=breakdown.overall,
    )

    return _build_response(breakdown, selected, year, reference)


@router.get("/strava/years", response_model=YearsResponse)
async def list_strava_years(
    token: str = Depends(require_bearer_token),
    service: StravaService = Depends(get_strava_service),
):
    """
    List the years the athlete has activities in.
    """
    records = await _fetch_strava_records(service, token)
    return YearsResponse(years=available_years(records, date.today()))


@router.post("/highlights", response_model=HighlightsResponse)
async def highlight_activities(request: HighlightsRequest):
    """
    Personal bests and gear usage of a supplied activity history.
    """
    records = _normalize(request.activities, request.source)
    if request.year is not None:
        records = select_year(records, request.year)

    return _build_highlights(records, request.year)


@router.get("/strava/highlights", response_model=HighlightsResponse)
async def highlight_strava_activities(
    year: Optional[int] = Query(None, description="Only use activities started in this year"),
    token: str = Depends(require_bearer_token),
    service: StravaService = Depends(get_strava_service),
):
    """
    Personal bests and gear usage from the athlete's Strava history.

    Gear names come from the athlete profile's shoes.
    """
    records = await _fetch_strava_records(service, token)
    if year is not None:
        records = select_year(records, year)

    try:
        athlete = await service.get_athlete(token)
    except StravaAPIError as e:
        raise _strava_http_error(e)

    return _build_highlights(records, year, gear_names_from_athlete(athlete))
