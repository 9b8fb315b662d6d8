import asyncio
import logging
from collections.abc import Coroutine
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from datetime import date
from typing import Any
from typing import TypeVar

import httpx

from contribution_chart.github_api import fetch_user_calendar
from contribution_chart.schemas.calendar import AggregatePayload


logger = logging.getLogger(__name__)

T = TypeVar("T")


class InvalidGitHubTokenError(Exception):
    """Raised when GitHub rejects the provided token."""


class GitHubAPIError(Exception):
    """Raised when GitHub requests fail for non-auth reasons."""


def merge_calendars(calendars: Iterable[Mapping[str, int]]) -> dict[str, int]:
    """Sum contribution counts per date across all calendars."""

    merged: dict[str, int] = {}
    for calendar in calendars:
        for day, count in calendar.items():
            merged[day] = merged.get(day, 0) + count
    return merged


def build_payload(merged: Mapping[str, int]) -> AggregatePayload:
    """Reduce merged counts to date bounds, total and a copy of the counts."""

    dates = sorted(merged)
    return AggregatePayload(
        start=dates[0] if dates else None,
        end=dates[-1] if dates else None,
        total=sum(merged.values()),
        counts=dict(merged),
    )


async def fetch_account_calendar(
    client: httpx.AsyncClient,
    login: str,
    token: str | None,
    graphql_url: str,
    today: date | None = None,
) -> dict[str, int]:
    """Fetch one account and translate failures into service errors."""

    try:
        return await fetch_user_calendar(
            client,
            login=login,
            token=token,
            graphql_url=graphql_url,
            today=today,
        )
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code in {401, 403}:
            raise InvalidGitHubTokenError(
                f"GitHub rejected the token while fetching {login}"
            ) from exc
        raise GitHubAPIError(
            f"GitHub request for {login} failed with status {exc.response.status_code}"
        ) from exc
    except Exception as exc:
        raise GitHubAPIError(f"GitHub request for {login} failed: {exc}") from exc


async def gather_all_or_nothing(*coroutines: Coroutine[Any, Any, T]) -> list[T]:
    """Run coroutines concurrently and return their results in input order.

    The first failure cancels every task still running and is re-raised
    on its own rather than wrapped in an exception group.
    """

    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(coroutine) for coroutine in coroutines]
    except ExceptionGroup as errors:
        raise errors.exceptions[0]

    return [task.result() for task in tasks]


async def aggregate_accounts(
    accounts: Sequence[str],
    token: str | None,
    graphql_url: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = 20.0,
    today: date | None = None,
) -> AggregatePayload:
    """Fetch every account concurrently and merge their calendars.

    With no accounts nothing is fetched and the payload is empty.
    """

    async def fetch_all(http_client: httpx.AsyncClient) -> list[dict[str, int]]:
        return await gather_all_or_nothing(
            *(
                fetch_account_calendar(http_client, login, token, graphql_url, today)
                for login in accounts
            )
        )

    if not accounts:
        calendars: list[dict[str, int]] = []
    elif client is None:
        async with httpx.AsyncClient(timeout=timeout) as http_client:
            calendars = await fetch_all(http_client)
    else:
        calendars = await fetch_all(client)

    payload = build_payload(merge_calendars(calendars))
    logger.info(
        "Merged %s accounts: %s contributions between %s and %s",
        len(accounts),
        payload.total,
        payload.start,
        payload.end,
    )
    return payload
