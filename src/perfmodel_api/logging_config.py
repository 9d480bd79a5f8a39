"""Structured logging configuration using structlog."""

import logging
import os
import sys
import time
import uuid
from typing import Any, Dict, Optional

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


def _resolve_level(level: Optional[str]) -> int:
    value = logging.getLevelName((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structured logging with structlog.

    The engine modules log through the standard library; they share the same
    level and stream so prediction diagnostics appear next to request logs.

    Args:
        level: Log level name; defaults to LOG_LEVEL or INFO.
    """
    log_level = _resolve_level(level)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    logging.getLogger("perfmodel").setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (usually module name).

    Returns:
        Configured structlog logger.
    """
    return structlog.get_logger(name)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests with request ID tracking."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        logger = get_logger("api.request")
        started = time.perf_counter()
        logger.info("request_started", query_params=str(request.query_params))

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        response.headers["X-Request-ID"] = request_id
        return response


def log_modeling_event(
    event: str,
    model: str,
    extra: Dict[str, Any] = None,
) -> None:
    """Log modeling-related events.

    Args:
        event: Event name (e.g., "prediction_completed", "benchmark_uploaded").
        model: Model name the event concerns.
        extra: Additional context to log.
    """
    logger = get_logger("api.modeling")

    log_data = {"model": model}
    if extra:
        log_data.update(extra)

    logger.info(event, **log_data)
