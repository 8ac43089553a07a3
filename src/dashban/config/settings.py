"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    project_root: Path = Field(
        default=Path(),
        description="Path to project root containing dashban.yml",
    )

    storage_dir: Path | None = Field(
        default=None,
        description="Directory for persisted board state (default: <project_root>/.dashban)",
    )

    github_token: str | None = Field(
        default=None,
        description="GitHub token; falls back to GITHUB_TOKEN and the gh CLI",
    )

    api_base_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL (override for Enterprise)",
    )

    owner: str | None = Field(
        default=None,
        description="Repository owner, overrides the saved current repository",
    )

    repo: str | None = Field(
        default=None,
        description="Repository name, overrides the saved current repository",
    )

    rate_limit_warning_threshold: int = Field(
        default=10,
        ge=1,
        description="Remaining requests below which a warning is shown",
    )

    rate_limit_probe_interval: float = Field(
        default=300.0,
        gt=0,
        description="Seconds between background rate limit probes",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "DASHBAN_",
    }

    @property
    def resolved_storage_dir(self) -> Path:
        return self.storage_dir or self.project_root / ".dashban"
