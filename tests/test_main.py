from pathlib import Path

import pytest

from contribution_chart.main import accounts_label
from contribution_chart.main import main
from contribution_chart.main import run
from contribution_chart.services.aggregation_service import GitHubAPIError
from contribution_chart.services.aggregation_service import build_payload
from contribution_chart.settings import PROJECT_ROOT
from contribution_chart.settings import Settings


@pytest.fixture
def fake_aggregate(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    calls: list[dict[str, object]] = []

    async def fake_aggregate_accounts(accounts, **kwargs):
        calls.append({"accounts": list(accounts), **kwargs})
        return build_payload({"2024-01-01": 5, "2024-01-02": 5, "2024-01-03": 1})

    monkeypatch.setattr("contribution_chart.main.aggregate_accounts", fake_aggregate_accounts)
    monkeypatch.setattr("contribution_chart.main.configure_logging", lambda level: None)
    return calls


def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.accounts == ["donken", "donken-lilly"]
    assert settings.output_path == PROJECT_ROOT / "gh-combined-calendar.svg"
    assert settings.output_path.is_absolute()
    assert settings.github_graphql_url == "https://api.github.com/graphql"
    assert settings.github_token is None
    assert settings.theme == "light"


def test_relative_output_path_ignores_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("OUTPUT_PATH", "charts/calendar.svg")
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.output_path == (PROJECT_ROOT / "charts" / "calendar.svg").resolve()
    assert tmp_path not in settings.output_path.parents


def test_settings_reads_accounts_and_token_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("ACCOUNTS", '["alice", "bob"]')
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    monkeypatch.setenv("THEME", "dark")

    settings = Settings()

    assert settings.accounts == ["alice", "bob"]
    assert settings.github_token == "secret"
    assert settings.theme == "dark"


def test_accounts_label_joins_with_and() -> None:
    assert accounts_label(["alice"]) == "alice"
    assert accounts_label(["alice", "bob"]) == "alice and bob"


def test_run_writes_combined_svg(tmp_path: Path, fake_aggregate) -> None:
    settings = Settings(
        accounts=["alice", "bob"],
        github_token="secret",
        output_path=str(tmp_path / "calendar.svg"),
    )

    output_path = run(settings)

    assert output_path == (tmp_path / "calendar.svg").resolve()
    document = output_path.read_text(encoding="utf-8")
    assert 'aria-label="Combined contributions calendar for alice and bob"' in document
    assert document.count("<title>") == 4
    assert "5 contributions on 2024-01-01" in document
    assert fake_aggregate == [
        {
            "accounts": ["alice", "bob"],
            "token": "secret",
            "graphql_url": "https://api.github.com/graphql",
            "timeout": 20.0,
        }
    ]


def test_main_prints_output_location(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys, fake_aggregate
) -> None:
    output_path = (tmp_path / "combined.svg").resolve()
    monkeypatch.setenv("OUTPUT_PATH", str(output_path))

    main()

    assert output_path.exists()
    assert capsys.readouterr().out == f"SVG updated at {output_path}\n"


def test_main_exits_with_error_and_writes_nothing(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    output_path = (tmp_path / "combined.svg").resolve()
    monkeypatch.setenv("OUTPUT_PATH", str(output_path))
    reported: list[BaseException] = []

    async def failing_aggregate_accounts(accounts, **kwargs):
        raise GitHubAPIError("GitHub request for alice failed with status 502")

    monkeypatch.setattr(
        "contribution_chart.main.aggregate_accounts", failing_aggregate_accounts
    )
    monkeypatch.setattr("contribution_chart.main.configure_logging", lambda level: None)
    monkeypatch.setattr("contribution_chart.main.sentry_sdk.capture_exception", reported.append)

    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 1
    assert not output_path.exists()
    assert "Error: GitHub request for alice failed with status 502" in capsys.readouterr().err
    assert len(reported) == 1
    assert isinstance(reported[0], GitHubAPIError)


def test_main_initializes_sentry_with_loaded_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_aggregate
) -> None:
    output_path = (tmp_path / "combined.svg").resolve()
    monkeypatch.setenv("OUTPUT_PATH", str(output_path))
    monkeypatch.setenv("SENTRY_DSN", "https://examplePublicKey@o0.ingest.sentry.io/0")
    monkeypatch.setenv("ENVIRONMENT", "production")
    configured: list[Settings] = []
    monkeypatch.setattr("contribution_chart.main.init_sentry", configured.append)

    main()

    assert len(configured) == 1
    assert configured[0].sentry_dsn == "https://examplePublicKey@o0.ingest.sentry.io/0"
    assert configured[0].environment == "production"
    assert configured[0].output_path == output_path
