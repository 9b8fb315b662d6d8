from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_OUTPUT_FILENAME = "gh-combined-calendar.svg"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    List values such as `ACCOUNTS` are given as JSON, e.g. `["octocat"]`.
    A relative `OUTPUT_PATH` is resolved against the project root, never
    against the current working directory.
    """

    github_token: str | None = None
    github_graphql_url: str = "https://api.github.com/graphql"
    accounts: list[str] = Field(default_factory=lambda: ["donken", "donken-lilly"])
    output_path: Path = PROJECT_ROOT / DEFAULT_OUTPUT_FILENAME
    theme: Literal["light", "dark"] = "light"
    request_timeout_seconds: float = 20.0
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("output_path")
    @classmethod
    def anchor_output_path(cls, value: Path) -> Path:
        return (PROJECT_ROOT / value).resolve()
