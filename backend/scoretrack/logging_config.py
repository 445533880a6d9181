"""
Structured JSON logging for the record and template stores.

One JSON object per line on stdout. Channels:
- http: request lifecycle and error translation
- db: lock acquisition and rolled-back transactions
- scoring: test and subject-entry mutations, recalculations, history reads
- templates: template CRUD

Store entries carry the ids they touched (test_id, entry_id,
template_id) in "context" and timings in "extra"; entries logged while
serving an HTTP request also carry its request_id.
"""

import logging
import json
import os
import time
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# Request ID of the HTTP request being served, empty outside a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CHANNELS = ["http", "db", "scoring", "templates"]

# Context keys the stores attach, in output order
STORE_IDS = ("test_id", "entry_id", "template_id")


class StructuredJsonFormatter(logging.Formatter):
    """
    Render a record as {timestamp, level, channel, message, context, extra}.

    context always starts with request_id, followed by whichever store ids
    the entry carries; extra holds timings and counts.
    """

    def format(self, record: logging.LogRecord) -> str:
        context = {"request_id": request_id_var.get("")}
        context.update(getattr(record, "context", None) or {})

        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "channel": getattr(record, "channel", record.name.rsplit(".", 1)[-1]),
            "message": record.getMessage(),
            "context": context,
            "extra": getattr(record, "extra_data", None) or {}
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging():
    """
    Route every logger through the JSON formatter on stdout.

    Channel loggers follow LOG_LEVEL. SQLAlchemy's engine logger is held at
    WARNING so SQL echo never floods the store channels.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    level = getattr(logging, LOG_LEVEL, logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logging.getLogger(f"scoretrack.{channel}").setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    return logging.getLogger(f"scoretrack.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None):
    """
    Emit a structured log entry.

    Args:
        logger: Channel logger from get_logger
        level: Level name (DEBUG, INFO, WARNING, ERROR)
        message: Human-readable message
        context: Business context, merged after request_id
        extra_data: Timings and other metadata
    """
    logger.log(
        getattr(logging, level.upper(), logging.INFO),
        message,
        extra={"context": context or {}, "extra_data": extra_data or {},
               "channel": logger.name.rsplit(".", 1)[-1]}
    )


def store_context(**ids) -> dict:
    """
    Build the context for a store entry from test_id / entry_id / template_id.

    Ids are rendered as strings in STORE_IDS order; ids passed as None are
    left out.
    """
    unknown = set(ids) - set(STORE_IDS)
    if unknown:
        raise ValueError("Unknown store context keys: {}".format(sorted(unknown)))
    return {key: str(ids[key]) for key in STORE_IDS if ids.get(key) is not None}


def elapsed_ms(start_time: float) -> float:
    """Milliseconds since a time.time() reading, rounded for the log."""
    return round((time.time() - start_time) * 1000, 2)


def log_store_event(logger: logging.Logger, level: str, message: str,
                    start_time: float = None, extra_data: dict = None, **ids):
    """
    Log a store operation with its ids and, when start_time is given, its
    duration_ms.

    Args:
        logger: Channel logger (scoring or templates)
        level: Level name
        message: Human-readable message
        start_time: time.time() taken when the operation began
        extra_data: Additional metadata (subject counts, percentages)
        **ids: test_id, entry_id and/or template_id
    """
    extra = dict(extra_data or {})
    if start_time is not None:
        extra["duration_ms"] = elapsed_ms(start_time)
    log_with_context(logger, level, message, context=store_context(**ids), extra_data=extra)


def generate_request_id() -> str:
    return str(uuid.uuid4())
