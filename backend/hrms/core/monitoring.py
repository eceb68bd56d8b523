import sentry_sdk

from hrms.core.config import settings
from hrms.core.errors import HRMSError


def drop_domain_errors(event: dict, hint: dict) -> dict | None:
    """Business-rule failures are answered with 4xx responses and are not reported."""
    exc_info = hint.get("exc_info")
    if exc_info and isinstance(exc_info[1], HRMSError):
        return None
    return event


def configure_error_monitoring() -> None:
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.env,
            traces_sample_rate=0.2,
            before_send=drop_domain_errors,
        )
