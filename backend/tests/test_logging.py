import pytest

from app.core.logging import ScoreDebugLogger, get_logger
from app.services.analytics import ScoreEngine


def test_score_tracker_summary():
    debug_logger = ScoreDebugLogger(get_logger("tests"), enabled=True)

    with debug_logger.track(activity_count=3, reference_instant="2024-06-15T12:00:00") as tracker:
        tracker.set_run_count(2)
        tracker.add_sub_score("pace", 40.0, 40)
        tracker.add_sub_score("progress", None, 40)
        tracker.set_overall(40)

    summary = tracker.get_summary()
    assert summary["run_count"] == 2
    assert summary["sub_scores"] == {"pace": 40, "progress": 40}
    assert summary["overall"] == 40
    assert summary["success"] is True
    assert summary["duration_ms"] >= 0


def test_score_tracker_records_failure():
    debug_logger = ScoreDebugLogger(get_logger("tests"), enabled=False)

    with pytest.raises(RuntimeError):
        with debug_logger.track(activity_count=0) as tracker:
            raise RuntimeError("boom")

    assert tracker.get_summary()["success"] is False
    assert tracker.log.error_type == "RuntimeError"


def test_engine_with_debug_logging(sample_history, reference):
    quiet = ScoreEngine(debug_log=False).compute(sample_history, reference)
    verbose = ScoreEngine(debug_log=True).compute(sample_history, reference)
    assert quiet == verbose
