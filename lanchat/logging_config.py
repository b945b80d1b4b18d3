r"""
Logging setup for the LAN chat server.

The root logger gets a single colorlog handler on stderr. Errors that go
through :func:`log_structured_error` are also counted per category so a
long-running server can report which failures dominate.
"""

import atexit
import logging
import os
import sys
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any

import colorlog

ERROR_HISTORY_PER_TYPE = 1000
RECENT_WINDOW_SECONDS = 3600

LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    timestamp: float
    message: str
    context: dict[str, Any] = field(default_factory=dict)


class ErrorAggregator:
    """Per-category error history with rate summaries.

    Each category keeps at most ``history`` records; older ones fall off.
    """

    def __init__(self, history: int = ERROR_HISTORY_PER_TYPE):
        self.history = history
        self._records: dict[str, deque[ErrorRecord]] = {}
        self._lock = threading.Lock()
        self.started_at = time.time()

    def record_error(self, error_type: str, message: str, context: dict[str, Any] | None = None) -> None:
        record = ErrorRecord(time.time(), message, dict(context or {}))
        with self._lock:
            bucket = self._records.setdefault(error_type, deque(maxlen=self.history))
            bucket.append(record)

    def get_error_summary(self) -> dict[str, dict[str, Any]]:
        """Return ``{category: {total_count, recent_count, rate_per_hour, last_occurrence}}``."""
        now = time.time()
        hours_running = max((now - self.started_at) / 3600, 1)
        with self._lock:
            snapshot = {kind: list(bucket) for kind, bucket in self._records.items()}
        summary: dict[str, dict[str, Any]] = {}
        for kind, records in snapshot.items():
            summary[kind] = {
                "total_count": len(records),
                "recent_count": sum(1 for r in records if now - r.timestamp < RECENT_WINDOW_SECONDS),
                "rate_per_hour": len(records) / hours_running,
                "last_occurrence": records[-1] if records else None,
            }
        return summary

    def reset(self) -> None:
        with self._lock:
            self._records.clear()
            self.started_at = time.time()

    def log_summary_report(self) -> None:
        summary = self.get_error_summary()
        if not summary:
            logging.info("📭 No errors recorded in current session")
            return
        logging.warning(f"🚨 Error summary for {len(summary)} categor{'y' if len(summary) == 1 else 'ies'}")
        for kind, stats in sorted(summary.items(), key=lambda item: -item[1]["total_count"]):
            logging.warning(
                f"  {kind}: {stats['total_count']} total, {stats['recent_count']} in last hour, "
                f"{stats['rate_per_hour']:.1f}/hour"
            )
            last = stats["last_occurrence"]
            if last is not None:
                logging.warning(f"    Last: {last.message}")


error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log ``[TYPE] message | Exception: ... | Context: k=v`` and count it.

    Args:
        error_type: Aggregation category, e.g. ``network`` or ``codec``.
        message: Human readable description.
        exception: Exception to append, if any.
        context: Extra ``key=value`` pairs.
        level: Logging level for the line.
    """
    parts = [f"[{error_type.upper()}] {message}"]
    if exception is not None:
        parts.append(f"Exception: {type(exception).__name__}: {exception}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in context.items()))
    logging.log(level, " | ".join(parts))
    error_aggregator.record_error(error_type, message, context)


class LoggerConfigurator:
    """Installs colored console logging for the process.

    ``DEBUG`` in the environment (``true``/``1``/``yes``) switches the level
    to DEBUG. An error summary is logged once at interpreter exit.
    """

    @staticmethod
    def resolve_level() -> int:
        debug = os.environ.get("DEBUG", "").strip().lower() in ("true", "1", "yes")
        return logging.DEBUG if debug else logging.INFO

    @staticmethod
    def build_formatter() -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            log_colors=LEVEL_COLORS,
            secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
            reset=True,
        )

    def configure(self):
        level = self.resolve_level()
        formatter = self.build_formatter()
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logging.basicConfig(level=level, handlers=[handler])

        root = logging.getLogger()
        root.setLevel(level)
        # basicConfig is a no-op when handlers already exist
        for existing in root.handlers:
            existing.setFormatter(formatter)
        logging.getLogger("asyncio").setLevel(logging.WARNING)

        atexit.register(self._final_report)

    def _final_report(self):
        try:
            logging.info("📊 Final error summary before shutdown:")
            error_aggregator.log_summary_report()
        except Exception as e:  # noqa: BLE001
            logging.error(f"Failed to log final error summary: {e}")
