"""Structured JSON logging for scrape runs.

Logs go to stdout as JSON lines. Optional file output via SCRAPER_LOG_FILE
or the --log-file flag. Every line carries the run_id of the scrape that
produced it, so appended runs in one log file stay separable.
"""

import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

from scope_scraper.config.settings import Settings, get_settings

LOGGER_NAME = "scope_scraper"

# Run-scoped context for correlating log entries
run_id_var: ContextVar[str] = ContextVar("run_id", default="")


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": run_id_var.get(""),
        }
        # Merge any extra fields passed via `extra={}` kwarg
        if hasattr(record, "audit_data"):
            log_entry.update(record.audit_data)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure the scraper logger with JSON output."""
    settings = settings or get_settings()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    formatter = JSONFormatter()

    # Always log to stdout
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def generate_run_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestTimer:
    """Context manager to measure request latency."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
