# =============================================================================
# Error reporting for the dashboard API
# =============================================================================
#
# Server errors (500s and ERROR log records) go to Sentry when SENTRY_DSN is
# set in the environment or .env. Client errors (4xx DashboardError) are
# dropped before sending, and bearer tokens never leave the process.
#
# init_sentry() is called from the app lifespan in qadash/api/app.py.
#
# =============================================================================

from __future__ import annotations

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from qadash.config import Settings, get_settings
from qadash.core.errors import DashboardError

logger = logging.getLogger(__name__)


def init_sentry(settings: Settings | None = None) -> bool:
    """Start the SDK if a DSN is configured. Returns whether reporting is on."""
    settings = settings or get_settings()

    if not settings.sentry_dsn:
        logger.info("No SENTRY_DSN configured, error reporting off")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.is_production else 1.0,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        # Emails and tokens stay out of reports
        send_default_pii=False,
        before_send=_filter_events,
        before_send_transaction=_filter_transactions,
    )

    logger.info("Sentry initialized for %s", settings.environment)
    return True


def _filter_events(event: dict, hint: dict) -> dict | None:
    """Drop expected client errors and scrub credentials."""
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]
        if isinstance(exc_value, DashboardError) and exc_value.status_code < 500:
            return None

    request = event.get("request")
    if request and "headers" in request:
        headers = request["headers"]
        for key in list(headers.keys()):
            if key.lower() in ("authorization", "cookie"):
                headers[key] = "[Filtered]"

    return event


def _filter_transactions(event: dict, hint: dict) -> dict | None:
    if event.get("transaction", "") in ("/health", "health"):
        return None
    return event


def set_user(user_id: int, **extra) -> None:
    """Tag error reports with the calling user. No email: PII stays out."""
    if sentry_sdk.get_client().is_active():
        sentry_sdk.set_user({"id": str(user_id), **extra})
