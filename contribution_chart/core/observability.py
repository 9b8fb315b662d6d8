import logging

import sentry_sdk

from contribution_chart.settings import Settings


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route all log records to one stderr handler at the given level."""

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)


def init_sentry(app_settings: Settings) -> None:
    """Initialize Sentry SDK when DSN is configured.

    Events are tagged with the aggregated accounts and the rendering theme.
    """

    if not app_settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=app_settings.sentry_dsn,
        environment=app_settings.environment,
        release=app_settings.release,
        traces_sample_rate=app_settings.sentry_traces_sample_rate,
        send_default_pii=False,
    )
    sentry_sdk.set_tag("accounts", ",".join(app_settings.accounts))
    sentry_sdk.set_tag("theme", app_settings.theme)
