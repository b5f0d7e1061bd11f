"""Gateway backed by the authenticated GitHub CLI (``gh``).

Authentication is whatever ``gh auth login`` set up; no token is read here.
"""

from __future__ import annotations

import asyncio
import json
import logging

from git_overlap.config import settings
from git_overlap.errors import ConfigurationError, MalformedResponseError, TransportError
from git_overlap.models import AccessMethod, PRSummary

logger = logging.getLogger(__name__)

OPEN_UNMERGED_QUERY = "is:open is:unmerged"

# gh requests at most this many files per PR in its GraphQL queries
GH_FILES_CAP = 100


def _file_paths(entry: dict) -> set[str]:
    return {f["path"].strip() for f in entry.get("files") or []}


class GhCliGateway:
    """Shells out to ``gh pr list`` and ``gh api`` and parses their output."""

    method = AccessMethod.CLI

    def __init__(self, gh_command: str = ""):
        self.gh_command = gh_command or settings.gh_command
        # Files delivered with the batched list call, keyed by PR number
        self._files: dict[int, set[str]] = {}

    async def __aenter__(self) -> GhCliGateway:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self._files.clear()

    async def _run_text(self, *args: str) -> str:
        """Run gh with ``args`` and return its stdout."""
        try:
            process = await asyncio.create_subprocess_exec(
                self.gh_command, *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
        except FileNotFoundError:
            raise ConfigurationError(
                f"gh CLI not found at '{self.gh_command}'. Install it or use --method api."
            )

        if process.returncode != 0:
            raise TransportError(
                f"'gh {args[0]} {args[1]}' exited with code {process.returncode}: "
                f"{stderr.decode().strip()[:500]}. Make sure you are logged in (gh auth login)."
            )

        return stdout.decode()

    async def _run(self, *args: str):
        """Run gh with ``args`` and return its decoded JSON output."""
        output = await self._run_text(*args)
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Failed to parse gh output as JSON: {e}") from e

    async def list_open_pull_requests(self, repo_slug: str, limit: int) -> list[PRSummary]:
        data = await self._run(
            "pr", "list",
            "--repo", repo_slug,
            "--limit", str(limit),
            "--json", "number,headRefName,files",
            "--search", OPEN_UNMERGED_QUERY,
        )
        if not isinstance(data, list):
            raise MalformedResponseError(f"Expected a JSON array from gh pr list, got {type(data).__name__}")

        prs: list[PRSummary] = []
        try:
            for entry in data[:limit]:
                pr = PRSummary(number=entry["number"], branch=entry["headRefName"].strip())
                files = _file_paths(entry)
                # a capped list may be incomplete, get_changed_files pages through the REST endpoint
                if len(entry.get("files") or []) < GH_FILES_CAP:
                    self._files[pr.number] = files
                prs.append(pr)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise MalformedResponseError(f"Unexpected gh pr list structure: {e}") from e

        logger.debug("gh returned %d open PR(s) for %s", len(prs), repo_slug)
        return prs

    async def get_changed_files(self, repo_slug: str, pr: PRSummary) -> set[str]:
        if pr.number in self._files:
            return set(self._files[pr.number])

        output = await self._run_text(
            "api", f"repos/{repo_slug}/pulls/{pr.number}/files",
            "--paginate",
            "--jq", ".[].filename",
        )
        return {line.strip() for line in output.splitlines() if line.strip()}
