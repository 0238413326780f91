"""
Sentry error tracking for the translation API.

Optional: nothing is reported unless sentry-sdk is installed (the
``sentry`` extra) and SENTRY_DSN is set. init_sentry() runs in the API
lifespan; model failures are reported with report_translation_failure().
"""

import logging

from farmmind.config import get_settings

logger = logging.getLogger(__name__)

# Sentry SDK is optional - gracefully degrade if not installed
try:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration
    SENTRY_AVAILABLE = True
except ImportError:
    SENTRY_AVAILABLE = False
    sentry_sdk = None


# Polled on every page load, never interesting as transactions
QUIET_TRANSACTIONS = frozenset({"/health", "/api/translate/languages"})


def init_sentry() -> bool:
    """Start reporting. Returns False when Sentry is unavailable or unconfigured."""
    if not SENTRY_AVAILABLE:
        logger.info("Sentry SDK not installed - error tracking disabled")
        return False

    settings = get_settings()
    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.is_production else 1.0,
        integrations=[
            FastApiIntegration(transaction_style="url"),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        # Page text may contain whatever users typed
        send_default_pii=False,
        max_request_body_size="never",
        before_send_transaction=_filter_transactions,
    )
    logger.info(f"Sentry initialized for {settings.environment}")
    return True


def _filter_transactions(event: dict, hint: dict) -> dict | None:
    if event.get("transaction", "") in QUIET_TRANSACTIONS:
        return None
    return event


def is_reporting() -> bool:
    return SENTRY_AVAILABLE and sentry_sdk.get_client().is_active()


def report_translation_failure(error: Exception, target_lang: str, count: int) -> str | None:
    """
    Report a failed batch, tagged with the target language.

    Returns the event ID, or None when Sentry is off (the error is then
    only logged).
    """
    if not is_reporting():
        logger.error(f"Translation to '{target_lang}' failed for {count} texts: {error}")
        return None

    with sentry_sdk.new_scope() as scope:
        scope.set_tag("target_lang", target_lang)
        scope.set_extra("text_count", count)
        return sentry_sdk.capture_exception(error)
