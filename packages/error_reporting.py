import logging
import os

try:  # Optional dependency
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration
    from sentry_sdk.integrations.starlette import StarletteIntegration
except ImportError:  # pragma: no cover - optional
    sentry_sdk = None
    FastApiIntegration = None
    LoggingIntegration = None
    StarletteIntegration = None


def _sample_rate(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return min(1.0, max(0.0, float(raw)))
    except ValueError:
        return default


def init_error_reporting(service_name: str, enable_fastapi: bool = False) -> bool:
    """Start Sentry when LIFELOG_SENTRY_DSN is set. Returns whether it is active."""
    dsn = os.getenv("LIFELOG_SENTRY_DSN")
    if not dsn or sentry_sdk is None:
        return False

    integrations = [LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)]
    if enable_fastapi:
        integrations.extend([FastApiIntegration(), StarletteIntegration()])

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("LIFELOG_ENV", os.getenv("LIFELOG_RUN_MODE", "prod")),
        release=os.getenv("LIFELOG_RELEASE"),
        traces_sample_rate=_sample_rate("LIFELOG_SENTRY_TRACES_SAMPLE_RATE", 0.0),
        integrations=integrations,
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service", service_name)
    return True
