"""Configuration for git-overlap."""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

# GitHub rejects per_page above this and silently serves 100 instead
MAX_PAGE_SIZE = 100

_TRUTHY = {"1", "true", "yes", "on"}


class OverlapSettings(BaseSettings):
    """Settings with GIT_OVERLAP_ environment variable prefix."""

    # GitHub REST API
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("GIT_OVERLAP_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )
    github_api_url: str = "https://api.github.com"
    page_size: int = MAX_PAGE_SIZE
    request_timeout_seconds: float = 30.0

    # Executables
    gh_command: str = "gh"
    git_command: str = "git"

    default_limit: int = 200

    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("GIT_OVERLAP_DEBUG", "DEBUG"),
    )

    model_config = {"env_prefix": "GIT_OVERLAP_", "env_ignore_empty": True, "populate_by_name": True}

    @field_validator("page_size", mode="before")
    @classmethod
    def _clamp_page_size(cls, value):
        return max(1, min(int(value), MAX_PAGE_SIZE))

    @field_validator("debug", mode="before")
    @classmethod
    def _parse_debug(cls, value) -> bool:
        # DEBUG is shared with other tools (e.g. DEBUG=express:*); anything unrecognised means off
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUTHY


settings = OverlapSettings()
