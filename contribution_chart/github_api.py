import logging
from collections.abc import Mapping
from datetime import UTC
from datetime import date
from datetime import datetime
from datetime import timedelta
from typing import Any

import httpx


logger = logging.getLogger(__name__)

USER_AGENT = "contrib-aggregator"

CONTRIBUTION_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""


def build_calendar_variables(login: str, today: date | None = None) -> dict[str, str]:
    """Build GraphQL variables for the trailing one-year window ending today (UTC)."""

    to_day = today or datetime.now(UTC).date()
    from_day = to_day - timedelta(days=364)
    return {
        "login": login,
        "from": f"{from_day.isoformat()}T00:00:00Z",
        "to": f"{to_day.isoformat()}T23:59:59Z",
    }


def build_headers(token: str | None) -> dict[str, str]:
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"bearer {token}"
    return headers


def parse_contribution_calendar(payload: Any) -> dict[str, int]:
    """Flatten a GraphQL contribution calendar response into date -> count.

    Raises:
        ValueError: If any part of the expected response shape is missing.
    """

    if not isinstance(payload, Mapping):
        raise ValueError("GitHub GraphQL response is invalid")

    if payload.get("errors"):
        raise ValueError("GitHub GraphQL returned errors")

    data = payload.get("data")
    if not isinstance(data, Mapping):
        raise ValueError("GitHub GraphQL data is missing")

    user = data.get("user")
    if not isinstance(user, Mapping):
        raise ValueError("GitHub user not found")

    collection = user.get("contributionsCollection")
    if not isinstance(collection, Mapping):
        raise ValueError("GitHub contributionsCollection is missing")

    calendar = collection.get("contributionCalendar")
    if not isinstance(calendar, Mapping):
        raise ValueError("GitHub contributionCalendar is missing")

    weeks = calendar.get("weeks")
    if not isinstance(weeks, list):
        raise ValueError("GitHub contribution weeks are missing")

    counts: dict[str, int] = {}
    for week in weeks:
        contribution_days = week.get("contributionDays") if isinstance(week, Mapping) else None
        if not isinstance(contribution_days, list):
            raise ValueError("GitHub contribution days are missing")
        for item in contribution_days:
            raw_date = item.get("date") if isinstance(item, Mapping) else None
            raw_count = item.get("contributionCount") if isinstance(item, Mapping) else None
            if not isinstance(raw_date, str) or not isinstance(raw_count, int):
                raise ValueError("GitHub contribution day is malformed")
            if isinstance(raw_count, bool) or raw_count < 0:
                raise ValueError("GitHub contribution count must be a non-negative integer")
            counts[raw_date] = raw_count

    return counts


async def fetch_user_calendar(
    client: httpx.AsyncClient,
    login: str,
    token: str | None,
    graphql_url: str,
    today: date | None = None,
) -> dict[str, int]:
    """Fetch one-year contribution counts for a user from GitHub GraphQL API."""

    logger.info("Fetching contribution calendar for %s", login)
    response = await client.post(
        graphql_url,
        json={
            "query": CONTRIBUTION_QUERY,
            "variables": build_calendar_variables(login, today),
        },
        headers=build_headers(token),
    )
    response.raise_for_status()

    counts = parse_contribution_calendar(response.json())
    logger.info("Fetched %s contribution days for %s", len(counts), login)
    return counts
