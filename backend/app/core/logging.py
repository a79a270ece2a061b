"""
Structured logging configuration.
Designed for easy debugging of score computations.
"""
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Optional

import structlog
from structlog.types import Processor

from app.core.config import settings


def setup_logging() -> None:
    """Configure structured logging for the application."""

    # Common processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        # JSON format for production
        renderer = structlog.processors.JSONRenderer()
    else:
        # Console format for development
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# ========================================
# Score Debug Logging
# ========================================

@dataclass
class ScoreComputationLog:
    """Complete log entry for one score computation."""
    computation_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    activity_count: int = 0
    run_count: int = 0
    reference_instant: Optional[str] = None

    # name -> {"raw": float | None, "score": int}
    sub_scores: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    overall: Optional[int] = None

    # Timing
    start_time: float = 0.0
    end_time: float = 0.0
    duration_ms: float = 0.0

    # Status
    success: bool = True
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class ScoreDebugLogger:
    """
    Debug logger for score computations.

    Usage:
        debug_logger = ScoreDebugLogger(logger)
        with debug_logger.track(activity_count=len(activities)) as tracker:
            tracker.set_run_count(len(runs))
            tracker.add_sub_score("pace", raw, score)
            tracker.set_overall(overall)
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger, enabled: Optional[bool] = None):
        self.logger = logger
        self.enabled = settings.SCORE_DEBUG_LOG if enabled is None else enabled

    @contextmanager
    def track(
        self,
        activity_count: int,
        reference_instant: Optional[str] = None,
    ) -> Generator["ScoreTracker", None, None]:
        """Context manager for tracking a score computation."""
        tracker = ScoreTracker(
            logger=self.logger,
            enabled=self.enabled,
            activity_count=activity_count,
            reference_instant=reference_instant,
        )
        tracker.start()
        try:
            yield tracker
        except Exception as e:
            tracker.set_error(type(e).__name__, str(e))
            raise
        finally:
            tracker.finish()


class ScoreTracker:
    """Tracker for a single score computation."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        enabled: bool,
        activity_count: int,
        reference_instant: Optional[str],
    ):
        self.logger = logger
        self.enabled = enabled
        self.log = ScoreComputationLog(
            activity_count=activity_count,
            reference_instant=reference_instant,
        )

    def start(self) -> None:
        """Mark the start of the computation."""
        self.log.start_time = time.time()

        if self.enabled:
            self.logger.debug(
                "Score computation started",
                computation_id=self.log.computation_id,
                activity_count=self.log.activity_count,
                reference_instant=self.log.reference_instant,
            )

    def set_run_count(self, run_count: int) -> None:
        self.log.run_count = run_count

    def add_sub_score(self, name: str, raw: Optional[float], score: int) -> None:
        """Record the raw and clamped value of one sub-score."""
        self.log.sub_scores[name] = {"raw": raw, "score": score}

        if self.enabled:
            self.logger.debug(
                "Sub-score computed",
                computation_id=self.log.computation_id,
                sub_score=name,
                raw=None if raw is None else round(raw, 3),
                score=score,
            )

    def set_overall(self, overall: int) -> None:
        self.log.overall = overall

    def set_error(self, error_type: str, error_message: str) -> None:
        """Set error information."""
        self.log.success = False
        self.log.error_type = error_type
        self.log.error_message = error_message

    def finish(self) -> None:
        """Mark the end of the computation and emit the summary."""
        self.log.end_time = time.time()
        self.log.duration_ms = round((self.log.end_time - self.log.start_time) * 1000, 3)

        if not self.log.success:
            self.logger.error(
                "Score computation failed",
                computation_id=self.log.computation_id,
                error_type=self.log.error_type,
                error_message=self.log.error_message,
                duration_ms=self.log.duration_ms,
            )
            return

        self.logger.info(
            "Score computation completed",
            computation_id=self.log.computation_id,
            activity_count=self.log.activity_count,
            run_count=self.log.run_count,
            overall=self.log.overall,
            duration_ms=self.log.duration_ms,
        )

    def get_summary(self) -> dict:
        """Get a summary of the computation."""
        return {
            "computation_id": self.log.computation_id,
            "activity_count": self.log.activity_count,
            "run_count": self.log.run_count,
            "sub_scores": {name: entry["score"] for name, entry in self.log.sub_scores.items()},
            "overall": self.log.overall,
            "duration_ms": self.log.duration_ms,
            "success": self.log.success,
        }
