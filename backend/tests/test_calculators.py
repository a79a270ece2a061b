from datetime import timedelta

import pytest

from app.services.analytics.strategies import (
    ConsistencyCalculator,
    ElevationCalculator,
    EnduranceCalculator,
    PaceCalculator,
    ProgressCalculator,
    ScoringContext,
    SocialCalculator,
)


def _context(runs, reference):
    return ScoringContext.build(runs, reference)


def test_context_requires_runs(reference):
    with pytest.raises(ValueError):
        ScoringContext.build([], reference)


def test_context_shares_all_time_average_speed(make_run, reference):
    runs = [make_run("a", speed=2.0), make_run("b", speed=4.0, days_ago=100)]
    assert _context(runs, reference).avg_speed == pytest.approx(3.0)


# ---------- pace ----------

@pytest.mark.parametrize("speed, expected", [(2.0, 1), (3.0, 40), (4.5, 100), (6.0, 100), (1.0, 1)])
def test_pace_score(make_run, reference, speed, expected):
    ctx = _context([make_run(speed=speed)], reference)
    assert PaceCalculator().compute(ctx).value == expected


# ---------- endurance ----------

@pytest.mark.parametrize("distance, expected", [(42195, 100), (0, 1), (21097.5, 50), (60000, 100)])
def test_endurance_score(make_run, reference, distance, expected):
    ctx = _context([make_run(distance=distance)], reference)
    assert EnduranceCalculator().compute(ctx).value == expected


def test_endurance_longest_run_tie_prefers_first(make_run, reference):
    first = make_run("first", distance=10000)
    second = make_run("second", distance=10000)
    calc = EnduranceCalculator()
    assert calc.longest_run(_context([first, second], reference)).id == "first"
    assert calc.longest_run(_context([second, first], reference)).id == "second"


# ---------- consistency ----------

def test_consistency_one_run_per_week(make_run, reference):
    runs = [
        make_run(str(k), start_time=reference - timedelta(weeks=k, hours=1))
        for k in range(8)
    ]
    calc = ConsistencyCalculator()
    ctx = _context(runs, reference)

    activity = calc.weekly_activity(ctx)
    assert activity.weeks_active == 8
    assert activity.runs_per_active_week == 1
    assert calc.compute(ctx).value == 25


def test_consistency_single_week_is_penalized(make_run, reference):
    runs = [
        make_run(str(i), start_time=reference - timedelta(hours=i + 1))
        for i in range(8)
    ]
    calc = ConsistencyCalculator()
    ctx = _context(runs, reference)

    activity = calc.weekly_activity(ctx)
    assert activity.weeks_active == 1
    assert activity.window_weeks == 8
    assert calc.is_penalized(activity)
    # 8 runs/week clamps to 100 before halving
    assert calc.compute(ctx).value == 50


def test_consistency_penalty_rounds_half_away(make_run, reference):
    runs = [make_run("a", days_ago=1), make_run("b", days_ago=8)]
    # 1 run per active week -> 25, two active weeks -> halved to 12.5
    assert ConsistencyCalculator().compute(_context(runs, reference)).value == 13


def test_consistency_no_recent_runs(make_run, reference):
    runs = [make_run("old", days_ago=365)]
    sub = ConsistencyCalculator().compute(_context(runs, reference))
    assert sub.raw == 0
    assert sub.value == 1


def test_consistency_ignores_runs_after_reference(make_run, reference):
    runs = [make_run("future", start_time=reference + timedelta(days=1))]
    activity = ConsistencyCalculator().weekly_activity(_context(runs, reference))
    assert activity.recent_run_count == 0


def test_consistency_week_start_changes_buckets(make_run, reference):
    # Sunday and the following Monday: same week when weeks start on
    # Sunday, different weeks when they start on Monday.
    sunday = reference - timedelta(days=6)
    monday = reference - timedelta(days=5)
    runs = [make_run("sun", start_time=sunday), make_run("mon", start_time=monday)]
    ctx = _context(runs, reference)

    assert ConsistencyCalculator(week_start=6).weekly_activity(ctx).weeks_active == 1
    assert ConsistencyCalculator(week_start=0).weekly_activity(ctx).weeks_active == 2


# ---------- progress ----------

def test_progress_inactive_recently(make_run, reference):
    runs = [make_run("old", days_ago=60, speed=5.0)]
    sub = ProgressCalculator().compute(_context(runs, reference))
    assert sub.value == 40
    assert sub.raw is None


def test_progress_flat(make_run, reference):
    runs = [make_run("old", days_ago=60, speed=3.0), make_run("new", days_ago=3, speed=3.0)]
    assert ProgressCalculator().compute(_context(runs, reference)).value == 60


def test_progress_improvement_and_decline(make_run, reference):
    improving = [make_run("old", days_ago=60, speed=2.0), make_run("new", days_ago=3, speed=4.0)]
    declining = [make_run("old", days_ago=60, speed=4.0), make_run("new", days_ago=3, speed=2.0)]
    assert ProgressCalculator().compute(_context(improving, reference)).value == 100
    assert ProgressCalculator().compute(_context(declining, reference)).value == 1


def test_progress_uses_shared_average_speed(make_run, reference):
    runs = [make_run("old", days_ago=60, speed=3.0), make_run("new", days_ago=3, speed=3.3)]
    ctx = _context(runs, reference)
    improvement = (3.3 - ctx.avg_speed) / ctx.avg_speed
    assert ProgressCalculator().raw_score(ctx) == pytest.approx(60 + improvement * 300)
    assert ProgressCalculator().compute(ctx).value == 74


def test_progress_zero_average_speed(make_run, reference):
    runs = [make_run("static", days_ago=2, speed=0.0)]
    assert ProgressCalculator().compute(_context(runs, reference)).value == 60


# ---------- social ----------

@pytest.mark.parametrize("kudos, expected", [(15, 100), (0, 1), (30, 100), (3, 20)])
def test_social_score(make_run, reference, kudos, expected):
    ctx = _context([make_run(kudos=kudos)], reference)
    assert SocialCalculator().compute(ctx).value == expected


# ---------- elevation ----------

def test_elevation_zero_distance_guard(make_run, reference):
    ctx = _context([make_run(distance=0, elevation=50)], reference)
    calc = ElevationCalculator()
    assert calc.meters_per_km(ctx) == 0
    assert calc.compute(ctx).value == 1


def test_elevation_hilly_and_rolling(make_run, reference):
    hilly = _context([make_run(distance=10000, elevation=150)], reference)
    rolling = _context(
        [make_run("a", distance=5000, elevation=50), make_run("b", distance=5000, elevation=25)],
        reference,
    )
    assert ElevationCalculator().compute(hilly).value == 100
    assert ElevationCalculator().compute(rolling).value == 50


def test_progress_filters_window_once(make_run, reference):
    class CountingProgress(ProgressCalculator):
        calls = 0

        def recent_runs(self, context):
            CountingProgress.calls += 1
            return super().recent_runs(context)

    runs = [make_run("old", days_ago=60, speed=3.0), make_run("new", days_ago=3, speed=3.0)]
    assert CountingProgress().compute(_context(runs, reference)).value == 60
    assert CountingProgress.calls == 1
