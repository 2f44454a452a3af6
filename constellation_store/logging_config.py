"""
Central logging configuration for the constellation store.

Provides:
- Structured logging (JSON in production, human-readable in development)
- Operation correlation via contextvars (operation_id set per write pass or read)
- Environment-aware log levels

Usage:
    from constellation_store.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Minted version", extra={"record_id": rid, "version": v})
"""

import json
import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

# Context var for the current store operation - set by ConstellationService
operation_id_var: ContextVar[Optional[str]] = ContextVar("operation_id", default=None)


def get_operation_id() -> Optional[str]:
    """Get the current operation ID from context, if set."""
    return operation_id_var.get()


@contextmanager
def operation_scope(prefix: str) -> Iterator[str]:
    """Bind a fresh operation ID for the duration of the block."""
    operation_id = f"{prefix}-{uuid.uuid4().hex[:12]}"
    token = operation_id_var.set(operation_id)
    try:
        yield operation_id
    finally:
        operation_id_var.reset(token)


class OperationIdFilter(logging.Filter):
    """Filter that adds operation_id to log records from context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.operation_id = get_operation_id() or "-"  # type: ignore[attr-defined]
        return True


class JsonFormatter(logging.Formatter):
    """Format log records as JSON for production log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        op_id = getattr(record, "operation_id", None)
        if op_id and op_id != "-":
            log_obj["operation_id"] = op_id

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields (anything passed via extra= in the log call)
        for key, value in record.__dict__.items():
            if key not in (
                "name", "msg", "args", "created", "filename", "funcName",
                "levelname", "levelno", "lineno", "module", "msecs",
                "pathname", "process", "processName", "relativeCreated",
                "stack_info", "exc_info", "exc_text", "thread", "threadName",
                "message", "taskName", "operation_id",
            ) and value is not None:
                try:
                    json.dumps(value)
                    log_obj[key] = value
                except (TypeError, ValueError):
                    log_obj[key] = str(value)

        return json.dumps(log_obj)


def _create_dev_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] op=%(operation_id)s %(message)s",
        datefmt="%H:%M:%S",
    )


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
) -> None:
    """
    Configure store-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        environment: 'development' or 'production'
        debug: If True, use DEBUG level regardless of log_level
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    # Ensure operation_id exists on all records (default before filter runs)
    old_factory = logging.getLogRecordFactory()

    def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
        record = old_factory(*args, **kwargs)
        if not hasattr(record, "operation_id"):
            setattr(record, "operation_id", "-")
        return record

    logging.setLogRecordFactory(record_factory)

    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicates on reconfigure
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(OperationIdFilter())

    if environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(_create_dev_formatter())

    root.addHandler(handler)

    # Reduce noise from third-party loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Logs automatically include operation_id when one is bound.
    Use extra={} for additional structured fields:
        logger.info("Soft delete", extra={"kind": kind.value, "component_id": cid})
    """
    return logging.getLogger(name)
