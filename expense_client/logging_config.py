r"""
Logging configuration module for the Expense Tracker client.

Console output goes through colorlog; every categorized failure is also
counted so a command that degraded (failed data loads, a rejected session)
ends with a short per-category summary.
"""

import atexit
import logging
import os
import sys
import time
from collections import Counter, deque
from typing import Any

import colorlog

# Occurrences kept per category for the summary; counts are never trimmed.
MAX_KEPT_PER_CATEGORY = 100

NOISY_LOGGERS = ("aiohttp", "asyncio")


class ErrorAggregator:
    """Counts structured errors by category over one client run."""

    def __init__(self):
        self.counts: Counter[str] = Counter()
        self.recent: dict[str, deque[dict[str, Any]]] = {}
        self.start_time = time.time()

    def record_error(self, error_type: str, message: str, context: dict[str, Any] = None) -> None:
        self.counts[error_type] += 1
        kept = self.recent.setdefault(error_type, deque(maxlen=MAX_KEPT_PER_CATEGORY))
        kept.append({"timestamp": time.time(), "message": message, "context": context or {}})

    def get_error_summary(self) -> dict[str, Any]:
        """Per category: total count, entries kept, and the latest entry."""
        return {
            error_type: {
                "total_count": total,
                "kept": len(self.recent[error_type]),
                "last_occurrence": self.recent[error_type][-1],
            }
            for error_type, total in self.counts.items()
        }

    def reset(self) -> None:
        self.counts.clear()
        self.recent.clear()
        self.start_time = time.time()

    def log_summary_report(self) -> None:
        if not self.counts:
            logging.debug("No errors recorded during this run")
            return
        elapsed = time.time() - self.start_time
        logging.warning(f"🚨 {sum(self.counts.values())} error(s) in {elapsed:.1f}s")
        for error_type, total in self.counts.most_common():
            last = self.recent[error_type][-1]["message"]
            logging.warning(f"  {error_type} x{total} (last: {last})")


# Global error aggregator instance
error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception = None,
    context: dict[str, Any] = None,
    level: int = logging.ERROR
) -> None:
    """Log one categorized error line and count it.

    The line reads ``[CATEGORY] message | Exception: Type: text | Context: k=v``
    with the last two parts present only when given.

    Args:
        error_type: Category of the error (e.g., 'network', 'auth', 'storage')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    parts = [f"[{error_type.upper()}] {message}"]
    if exception:
        parts.append(f"Exception: {type(exception).__name__}: {str(exception)}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in context.items()))
    logging.log(level, " | ".join(parts))
    error_aggregator.record_error(error_type, message, context)


def _level_from_env() -> int:
    debug_env = os.environ.get("DEBUG", "").lower()
    return logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO


def _console_formatter() -> colorlog.ColoredFormatter:
    return colorlog.ColoredFormatter(
        "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
        datefmt="%H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        },
        secondary_log_colors={"message": {"WARNING": "yellow", "ERROR": "red"}},
        reset=True,
    )


class LoggerConfigurator:
    """Sets up root logging for one CLI invocation.

    ``DEBUG=true|1|yes`` selects DEBUG, otherwise INFO. A ``log_file`` entry
    in the config adds an uncolored file handler next to the console one.
    """

    def __init__(self, config=None):
        self.config = config or {}
        self._summary_registered = False

    def configure(self) -> int:
        """Install the handlers and return the chosen level."""
        log_level = _level_from_env()

        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(_console_formatter())
        handlers: list[logging.Handler] = [console]

        log_file = self.config.get("log_file")
        if log_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
            handlers.append(file_handler)

        logging.basicConfig(level=log_level, handlers=handlers, force=True)
        logging.getLogger().setLevel(log_level)
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        if not self._summary_registered:
            atexit.register(self._log_final_error_summary)
            self._summary_registered = True
        return log_level

    def _log_final_error_summary(self):
        try:
            error_aggregator.log_summary_report()
        except Exception as e:
            logging.error(f"Failed to log final error summary: {e}")
