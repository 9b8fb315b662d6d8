import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import sentry_sdk

from contribution_chart.core.observability import configure_logging
from contribution_chart.core.observability import init_sentry
from contribution_chart.services.aggregation_service import aggregate_accounts
from contribution_chart.services.calendar_layout import layout_calendar
from contribution_chart.services.svg_renderer import render_calendar_svg
from contribution_chart.settings import Settings


logger = logging.getLogger(__name__)


def accounts_label(accounts: Sequence[str]) -> str:
    return " and ".join(accounts)


async def generate_calendar_svg(settings: Settings) -> str:
    """Fetch, merge and render the combined calendar for configured accounts."""

    payload = await aggregate_accounts(
        settings.accounts,
        token=settings.github_token,
        graphql_url=settings.github_graphql_url,
        timeout=settings.request_timeout_seconds,
    )
    grid = layout_calendar(payload)
    return render_calendar_svg(grid, accounts_label(settings.accounts), theme=settings.theme)


def run(settings: Settings) -> Path:
    """Render the calendar and write it to the configured output path."""

    svg = asyncio.run(generate_calendar_svg(settings))

    output_path = settings.output_path
    output_path.write_text(svg, encoding="utf-8")
    logger.info("Wrote %s bytes to %s", len(svg.encode("utf-8")), output_path)
    return output_path


def main() -> None:
    try:
        settings = Settings()
        configure_logging(settings.log_level)
        init_sentry(settings)
        output_path = run(settings)
    except Exception as exc:
        sentry_sdk.capture_exception(exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"SVG updated at {output_path}")


if __name__ == "__main__":
    main()
