from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DiffScopeSettings(BaseSettings):
    """Settings for diff scoping and pull request annotation."""

    # ── Repository ──
    repo_path: str = "."
    origin_remote: str = "origin"
    destination_remote: str = "destination"

    # ── Reporting ──
    severity_threshold: int = Field(default=0, ge=0)
    log_level: str = "INFO"

    # ── GitHub Actions environment ──
    github_token: Optional[SecretStr] = Field(default=None, validation_alias="GITHUB_TOKEN")
    github_repository: str = Field(default="", validation_alias="GITHUB_REPOSITORY")
    github_sha: str = Field(default="", validation_alias="GITHUB_SHA")
    github_api_url: str = Field(default="https://api.github.com", validation_alias="GITHUB_API_URL")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("origin_remote", "destination_remote")
    @classmethod
    def require_remote_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Remote names cannot be empty")
        return value.strip()

    model_config = SettingsConfigDict(
        env_prefix="DIFF_SCOPE_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )
