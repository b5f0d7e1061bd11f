"""Provider gateway interface and access-method selection.

Two implementations exist: ``GitHubApiGateway`` (REST API with a token) and
``GhCliGateway`` (the authenticated ``gh`` CLI). Both are async context
managers exposing the same two operations.
"""

from __future__ import annotations

import logging
import shutil
from typing import Protocol

from git_overlap.config import OverlapSettings, settings as default_settings
from git_overlap.errors import ConfigurationError
from git_overlap.gh_cli import GhCliGateway
from git_overlap.github_client import GitHubApiGateway
from git_overlap.models import AccessMethod, PRSummary

logger = logging.getLogger(__name__)

# Alternative spellings for --method
_METHOD_ALIASES = {"gh": AccessMethod.CLI}


class PullRequestGateway(Protocol):
    method: AccessMethod

    async def __aenter__(self) -> PullRequestGateway: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...

    async def list_open_pull_requests(self, repo_slug: str, limit: int) -> list[PRSummary]:
        """Open, unmerged PRs in provider order, at most ``limit`` of them."""
        ...

    async def get_changed_files(self, repo_slug: str, pr: PRSummary) -> set[str]:
        """Every path changed by ``pr``."""
        ...


def parse_method(value: str | AccessMethod | None) -> AccessMethod | None:
    """Normalize a user-supplied method; ``None``/empty means auto-detect."""
    if value is None or value == "":
        return None
    if isinstance(value, AccessMethod):
        return value
    key = value.strip().lower()
    if key in _METHOD_ALIASES:
        return _METHOD_ALIASES[key]
    try:
        return AccessMethod(key)
    except ValueError:
        allowed = ", ".join(f"'{m.value}'" for m in AccessMethod)
        raise ConfigurationError(
            f"Invalid method '{value}'. Allowed methods are {allowed} (or 'gh' for 'cli')."
        )


def detect_method(settings: OverlapSettings | None = None) -> AccessMethod:
    """Prefer the gh CLI when installed, otherwise fall back to the REST API."""
    settings = settings or default_settings
    if shutil.which(settings.gh_command):
        logger.debug("'%s' CLI found, using it", settings.gh_command)
        return AccessMethod.CLI
    logger.warning("'%s' CLI not found. Falling back to the slower REST API method.", settings.gh_command)
    return AccessMethod.API


def select_gateway(
    method: str | AccessMethod | None = None,
    settings: OverlapSettings | None = None,
) -> PullRequestGateway:
    """Build the gateway for an explicit or auto-detected access method."""
    settings = settings or default_settings
    chosen = parse_method(method) or detect_method(settings)
    logger.debug("Using access method '%s'", chosen.value)

    if chosen is AccessMethod.CLI:
        return GhCliGateway(gh_command=settings.gh_command)
    return GitHubApiGateway(
        token=settings.github_token,
        api_url=settings.github_api_url,
        page_size=settings.page_size,
        timeout=settings.request_timeout_seconds,
    )
