"""Async GitHub REST API gateway for listing open PRs and their changed files."""

from __future__ import annotations

import logging

import httpx

from git_overlap.config import MAX_PAGE_SIZE, settings
from git_overlap.errors import ConfigurationError, MalformedResponseError, TransportError
from git_overlap.models import AccessMethod, PRSummary
from git_overlap.pagination import fetch_bounded

logger = logging.getLogger(__name__)


class GitHubApiGateway:
    """Async context manager wrapping httpx.AsyncClient for the GitHub REST API.

    A token is mandatory: construction fails with ConfigurationError when none
    is available, so no request is ever sent unauthenticated.
    """

    method = AccessMethod.API

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "",
        page_size: int = 0,
        timeout: float = 0,
    ):
        self.token = settings.github_token if token is None else token
        if not self.token:
            raise ConfigurationError(
                "GITHUB_TOKEN environment variable is required for REST API access. "
                "Set it with: export GITHUB_TOKEN='your_token_here'"
            )
        self.api_url = (api_url or settings.github_api_url).rstrip("/")
        self.page_size = min(page_size or settings.page_size, MAX_PAGE_SIZE)
        self.timeout = timeout or settings.request_timeout_seconds
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GitHubApiGateway:
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "Authorization": f"Bearer {self.token}",
            },
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GitHubApiGateway must be used as async context manager")
        return self._client

    async def _get_json(self, url: str, params: dict | None = None) -> tuple[list, httpx.Response]:
        """GET a JSON array; any non-200 status or non-array body is fatal."""
        try:
            resp = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise TransportError(f"GitHub API request to {url} failed: {e}") from e

        if resp.status_code != 200:
            logger.debug("Response (truncated): %s", resp.text[:1000])
            raise TransportError(
                f"GitHub API returned HTTP status {resp.status_code} for {url}: {resp.text[:500]}"
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"GitHub API returned invalid JSON for {url}: {e}") from e
        if not isinstance(data, list):
            raise MalformedResponseError(f"Expected a JSON array from {url}, got {type(data).__name__}")
        return data, resp

    async def _list_pulls_page(self, repo_slug: str, page: int, per_page: int) -> list[PRSummary]:
        data, _ = await self._get_json(
            f"/repos/{repo_slug}/pulls",
            params={"state": "open", "per_page": str(per_page), "page": str(page)},
        )
        try:
            return [
                PRSummary(number=item["number"], branch=item["head"]["ref"].strip())
                for item in data
            ]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise MalformedResponseError(f"Unexpected pull request structure: {e}") from e

    async def list_open_pull_requests(self, repo_slug: str, limit: int) -> list[PRSummary]:
        """List open pull requests page by page, at most ``limit`` of them."""

        async def fetch_page(page: int, per_page: int) -> list[PRSummary]:
            return await self._list_pulls_page(repo_slug, page, per_page)

        return await fetch_bounded(fetch_page, limit, self.page_size)

    async def get_changed_files(self, repo_slug: str, pr: PRSummary) -> set[str]:
        """Fetch every filename changed in a pull request, following Link pagination."""
        filenames: set[str] = set()
        next_url: str | None = f"/repos/{repo_slug}/pulls/{pr.number}/files"
        params: dict | None = {"per_page": str(self.page_size)}

        while next_url:
            data, resp = await self._get_json(next_url, params=params)
            try:
                filenames.update(item["filename"].strip() for item in data)
            except (KeyError, TypeError, AttributeError) as e:
                raise MalformedResponseError(f"Unexpected file entry for PR #{pr.number}: {e}") from e

            next_url = None
            params = None  # params are embedded in the Link URL
            for part in resp.headers.get("link", "").split(","):
                if 'rel="next"' in part:
                    next_url = part.split(";")[0].strip().strip("<>")
                    break

        return filenames
