"""
Sentry Error Tracking Configuration
Centralized Sentry SDK initialization for the Contact Inbox backend.
"""

import logging
from typing import Any

import sentry_sdk
import structlog
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from backend.core.config import settings

logger = structlog.get_logger(__name__)

SENSITIVE_HEADERS = ("authorization", "cookie", "x-admin-key")
SENSITIVE_QUERY_PARAMS = ("clave",)


def _redact_query_string(query_string: str) -> str:
    parts = []
    for part in query_string.split("&"):
        key, sep, _ = part.partition("=")
        if sep and key in SENSITIVE_QUERY_PARAMS:
            part = f"{key}=[REDACTED]"
        parts.append(part)
    return "&".join(parts)


def before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """
    Process events before sending to Sentry.

    Drops health check noise and strips the admin credential from
    headers and query strings.
    """
    request = event.get("request")
    if not request:
        return event

    if request.get("url", "").endswith(("/health", "/health/ready")):
        return None

    headers = request.get("headers")
    if headers:
        for header in list(headers):
            if header.lower() in SENSITIVE_HEADERS:
                headers[header] = "[REDACTED]"

    query_string = request.get("query_string")
    if isinstance(query_string, str) and query_string:
        request["query_string"] = _redact_query_string(query_string)

    return event


def init_sentry() -> bool:
    """
    Initialize Sentry SDK with FastAPI integration.

    Returns:
        bool: True if Sentry was initialized successfully, False otherwise.
    """
    if not settings.sentry_dsn:
        logger.info("sentry_disabled", reason="no DSN configured")
        return False

    try:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.sentry_environment or settings.environment,
            release=f"contact-inbox@{settings.app_version}",
            traces_sample_rate=settings.sentry_traces_sample_rate,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                StarletteIntegration(transaction_style="endpoint"),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR,
                ),
                SqlalchemyIntegration(),
            ],
            before_send=before_send,
            send_default_pii=False,
            attach_stacktrace=True,
            max_breadcrumbs=50,
        )
        sentry_sdk.set_tag("service", "backend")
        sentry_sdk.set_tag("storage_backend", settings.storage_backend)

        logger.info(
            "sentry_initialized",
            environment=settings.sentry_environment or settings.environment,
            traces_sample_rate=settings.sentry_traces_sample_rate,
        )
        return True

    except Exception as e:
        logger.error("sentry_init_failed", error=str(e))
        return False


def last_event_id() -> str | None:
    """
    ID of the most recent event sent to Sentry from the current scope.

    Errors logged through the logging integration are captured there, so
    this is the reference to hand back after `logger.exception`.
    """
    return sentry_sdk.last_event_id()
