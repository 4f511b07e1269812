"""Structured request logging.

Every request gets an X-Request-ID (taken from the inbound header when the
proxy already set one) that is bound into the structlog context and echoed
on the response. Console output in development, JSON when LOG_JSON is on.
"""

import logging
import time
import uuid

import structlog
from flask import g, request

logger = structlog.get_logger(__name__)


def configure_structlog(app) -> None:
    """Configure structlog processors from app config."""
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if app.config.get("LOG_JSON"):
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(structlog.dev.ConsoleRenderer())

    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if app.debug else logging.INFO,
    )

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def request_logging(app):
    @app.before_request
    def bind_request_context():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        g.request_started = time.monotonic()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=g.request_id)

    @app.after_request
    def log_request(response):
        started = g.get("request_started")
        duration_ms = round((time.monotonic() - started) * 1000, 2) if started else None

        response.headers["X-Request-ID"] = g.get("request_id", "")

        log_method = logger.info if response.status_code < 400 else logger.warning
        if response.status_code >= 500:
            log_method = logger.error

        log_method(
            "request_completed",
            method=request.method,
            path=request.path,
            host=request.host,
            status_code=response.status_code,
            duration_ms=duration_ms,
            tenant_id=g.get("site_tenant_id"),
        )
        return response
