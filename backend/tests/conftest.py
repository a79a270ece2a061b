"""
Shared fixtures for the run score tests.

REFERENCE is a Saturday; with the default Sunday week start it is the
last day of its calendar week.
"""
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.analytics import ActivityRecord

REFERENCE = datetime(2024, 6, 15, 12, 0)


def make_activity(
    activity_id="1",
    activity_type="Run",
    start_time=None,
    days_ago=1,
    distance=10000.0,
    moving_time=3000.0,
    speed=3.0,
    elevation=0.0,
    kudos=0,
    gear_id=None,
):
    if start_time is None:
        start_time = REFERENCE - timedelta(days=days_ago)
    return ActivityRecord(
        id=str(activity_id),
        activity_type=activity_type,
        start_time=start_time,
        distance_meters=distance,
        moving_time_seconds=moving_time,
        average_speed_meters_per_second=speed,
        total_elevation_gain_meters=elevation,
        kudos_count=kudos,
        gear_id=gear_id,
    )


@pytest.fixture
def make_run():
    """Factory for ActivityRecord instances relative to REFERENCE."""
    return make_activity


@pytest.fixture
def reference():
    return REFERENCE


@pytest.fixture
def sample_history():
    """Three runs and a ride with hand-checked scores."""
    return [
        make_activity("r1", days_ago=1, distance=10000, speed=3.0, elevation=100, kudos=6),
        make_activity("r2", days_ago=8, distance=20000, speed=3.0, elevation=200, kudos=9),
        make_activity("ride", activity_type="Ride", days_ago=2, distance=50000, speed=8.0, kudos=40),
        make_activity("r3", days_ago=70, distance=12000, speed=3.0, elevation=0, kudos=0),
    ]


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
