"""Repository reference handling: remote URL -> provider and owner/repo slug."""

from __future__ import annotations

import asyncio
import logging
import re

from git_overlap.config import settings
from git_overlap.errors import ConfigurationError, UnsupportedProviderError

logger = logging.getLogger(__name__)

_HOST_PREFIX = re.compile(r"^(?:git@[^:]+:|https?://[^/]+/)")
_GIT_SUFFIX = re.compile(r"\.git$")
# optional scheme, optional user info, then the host up to the first ":" or "/"
_REMOTE_HOST = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.-]*://)?(?:[^@/]*@)?([^/:]+)")

# Hosts we recognise but cannot query yet
_UNSUPPORTED_HOSTS = {
    "gitlab.com": "gitlab",
    "bitbucket.org": "bitbucket",
}


def resolve_repo_slug(url: str) -> str:
    """Extract the ``owner/repo`` slug from a Git remote URL.

    Handles ``git@host:owner/repo.git`` and ``https://host/owner/repo(.git)``.
    Nested paths keep only the last two components, so
    ``https://gitlab.com/group/subgroup/repo.git`` gives ``subgroup/repo``.

    Returns an empty string when no slug can be determined.
    """
    path = _HOST_PREFIX.sub("", url, count=1)
    path = _GIT_SUFFIX.sub("", path)

    if not path or "/" not in path:
        return ""

    owner, repo = path.split("/")[-2:]
    if not owner or not repo:
        return ""
    slug = f"{owner}/{repo}"

    logger.debug("Parsed repository slug from %s: %s", url, slug)
    return slug


def detect_provider(url: str) -> str:
    """Return the provider name for a remote URL.

    Raises UnsupportedProviderError for any host other than GitHub.
    """
    match = _REMOTE_HOST.match(url)
    host = match.group(1).lower() if match else ""
    if host == "github.com":
        return "github"
    if host in _UNSUPPORTED_HOSTS:
        provider = _UNSUPPORTED_HOSTS[host]
        raise UnsupportedProviderError(
            f"{provider.capitalize()} provider detected, but it is not supported yet."
        )
    raise UnsupportedProviderError(f"This provider is not recognized: '{url}'.")


async def read_default_remote_url(git_command: str = "") -> str:
    """Return the URL of the first remote listed by ``git remote -v``."""
    cmd = git_command or settings.git_command

    try:
        process = await asyncio.create_subprocess_exec(
            cmd, "remote", "-v",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except FileNotFoundError:
        raise ConfigurationError(f"git executable not found at '{cmd}'.")

    if process.returncode != 0:
        raise ConfigurationError(
            f"Could not determine the remote URL using 'git remote -v': {stderr.decode().strip()[:500]}"
        )

    lines = stdout.decode().splitlines()
    fields = lines[0].split() if lines else []
    if len(fields) < 2:
        raise ConfigurationError(
            "Could not determine the remote URL using 'git remote -v'. Pass --url explicitly."
        )
    return fields[1]
