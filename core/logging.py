"""
Logging configuration for Aasha Backend.

structlog renders JSON in production and a console format when DEBUG is on.
Standard-library loggers share the root handlers, so ``logging.getLogger``
and ``get_logger`` output end up in the same place. Every HTTP request is
tagged with a ``request_id`` bound through structlog's context variables.
"""

import logging
import os
import sys
import time
import uuid
from datetime import datetime
from typing import Optional

import structlog
from structlog.stdlib import LoggerFactory

from core.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Probes that would flood the request log
QUIET_PATHS = {"/health"}


def _daily_file_handler(prefix: str, level: int) -> logging.FileHandler:
    today = datetime.now().strftime('%Y%m%d')
    handler = logging.FileHandler(os.path.join(settings.LOGS_DIR, f"{prefix}_{today}.log"), encoding='utf-8')
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    return handler


def _init_sentry(logger: structlog.stdlib.BoundLogger) -> None:
    dsn = (settings.SENTRY_DSN or "").strip()
    if not dsn or dsn.startswith('your-sentry'):
        return

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=dsn,
        environment=settings.SENTRY_ENVIRONMENT,
        integrations=[FastApiIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=0.1 if settings.ENV == "production" else 1.0,
        # Phone numbers and names must not leave the service
        send_default_pii=False,
    )
    logger.info("Sentry integration enabled", environment=settings.SENTRY_ENVIRONMENT)


def setup_logging() -> structlog.stdlib.BoundLogger:
    """Configure structlog, the root logger handlers and Sentry."""

    renderer = structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    if settings.ENABLE_FILE_LOGGING:
        os.makedirs(settings.LOGS_DIR, exist_ok=True)
        root_logger.addHandler(_daily_file_handler("app", logging.INFO))
        root_logger.addHandler(_daily_file_handler("error", logging.ERROR))

        if settings.ENABLE_REQUEST_LOGGING:
            request_logger = logging.getLogger("requests")
            request_logger.setLevel(logging.INFO)
            # Request lines only go to their own file
            request_logger.propagate = False
            request_logger.addHandler(_daily_file_handler("requests", logging.INFO))

    # SQLAlchemy echoes every statement at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger = structlog.get_logger()
    _init_sentry(logger)
    return logger


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)


async def log_request_middleware(request, call_next):
    """Log each request with its status and duration under a fresh ``request_id``."""
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)

    if not settings.ENABLE_REQUEST_LOGGING or request.url.path in QUIET_PATHS:
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response

    logger = get_logger("requests")
    start_time = time.time()
    logger.info(
        "Request started",
        method=request.method,
        path=request.url.path,
        client_ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )

    response = await call_next(request)

    logger.info(
        "Request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.time() - start_time) * 1000, 1),
    )
    response.headers["x-request-id"] = request_id
    return response
