from collections.abc import Callable

import pytest


def calendar_response(counts: dict[str, int]) -> dict[str, object]:
    """Build a GraphQL contribution calendar body holding `counts` in one week."""

    return {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": {
                        "weeks": [
                            {
                                "contributionDays": [
                                    {"date": day, "contributionCount": count}
                                    for day, count in counts.items()
                                ]
                            }
                        ]
                    }
                }
            }
        }
    }


@pytest.fixture
def make_calendar_response() -> Callable[[dict[str, int]], dict[str, object]]:
    return calendar_response


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep a developer `.env` or exported variables out of Settings()."""

    monkeypatch.chdir(tmp_path)
    for name in (
        "GITHUB_TOKEN",
        "ACCOUNTS",
        "OUTPUT_PATH",
        "THEME",
        "SENTRY_DSN",
        "ENVIRONMENT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
