"""
Structured logging setup for the host qualification service.
Provides JSON-formatted logs with consistent fields for production monitoring.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging with JSON output for production.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_trace_context,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _add_trace_context(logger, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Attach bound request context (request_id, event_type_id) if available."""
    context = structlog.contextvars.get_contextvars()
    for key, value in context.items():
        event_dict.setdefault(key, value)
    return event_dict


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_qualification(
    event_type_id: int,
    qualified_count: int,
    fixed_count: int,
    fallback_count: int | None,
    duration_ms: float,
):
    """Log a completed host qualification with consistent fields."""
    logger = get_logger("host_qualification")

    log_data = {
        "event_type_id": event_type_id,
        "qualified_rr_hosts": qualified_count,
        "fixed_hosts": fixed_count,
        "duration_ms": duration_ms,
        "log_type": "host_qualification",
    }

    if fallback_count is not None:
        log_data["all_fallback_rr_hosts"] = fallback_count

    logger.info("Host qualification completed", **log_data)
