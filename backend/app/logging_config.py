"""
Structured JSON logging configuration.

Provides structured logging with channels (http, db), request ID tracking,
and context-rich log entries. All log output is valid JSON written to
stdout for container log aggregation.
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# ──────────────────────────────────────────────────────────────
# Context variable to track request ID across requests.
# Each incoming HTTP request gets a unique UUID, which is then
# attached to every log entry produced while serving it.
# ──────────────────────────────────────────────────────────────
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CHANNELS = ["http", "db"]


class StructuredJsonFormatter(logging.Formatter):
    """
    Logging formatter that outputs one JSON object per log entry.

    Each log line contains:
    - timestamp: ISO 8601 timestamp in UTC
    - level: Log severity (INFO, WARNING, ERROR, DEBUG)
    - message: Human-readable log message
    - channel: Log source category (http, db, app)
    - context: Business context (request_id, event_id, registration_id, ...)
    - extra: Additional metadata (ip, duration_ms, ...)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", record.name.split(".")[-1] if "." in record.name else "app"),
            "context": {
                "request_id": request_id_var.get(""),
                **(getattr(record, "context", {}) or {})
            },
            "extra": getattr(record, "extra_data", {}) or {}
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging():
    """
    Configure the root logger and the channel loggers.

    All output goes to stdout through a single handler using
    StructuredJsonFormatter.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    level = getattr(logging, LOG_LEVEL, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Channel loggers inherit the root handler but keep distinct names
    # so entries can be filtered by channel
    for channel in CHANNELS:
        logging.getLogger(f"app.{channel}").setLevel(level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    """Get the logger for a channel (http, db)."""
    return logging.getLogger(f"app.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None):
    """
    Emit a structured log entry with business context and extra metadata.

    Args:
        logger: The channel logger to use
        level: Log level string (INFO, WARNING, ERROR, DEBUG)
        message: Human-readable log message
        context: Business context dict (event_id, student_id, registration_id)
        extra_data: Additional metadata dict (ip, duration_ms, query_params)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        extra={"context": context or {}, "extra_data": extra_data or {}, "channel": logger.name.split(".")[-1]}
    )


def generate_request_id() -> str:
    """Generate a new UUID for request tracking."""
    return str(uuid.uuid4())
