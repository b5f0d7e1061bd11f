"""Overlap detection run: resolve the repository, fetch open PRs, aggregate matches.

A run either completes and returns an OverlapReport or raises a
GitOverlapError; there are no partial results. PRs are processed strictly
one after another so match order follows the provider's listing order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Callable

from git_overlap.aggregation import OverlapMapping, accumulate
from git_overlap.config import OverlapSettings, settings as default_settings
from git_overlap.errors import ConfigurationError
from git_overlap.gateway import PullRequestGateway, parse_method, select_gateway
from git_overlap.models import AccessMethod, OverlapReport, PRSummary
from git_overlap.repo_ref import detect_provider, read_default_remote_url, resolve_repo_slug

logger = logging.getLogger(__name__)

# on_progress(index, total, pr), index is 1-based
ProgressCallback = Callable[[int, int, PRSummary], None]


def clean_target_files(values: Iterable[str]) -> list[str]:
    """Split comma-separated values, trim whitespace, and drop empty entries."""
    files: list[str] = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part:
                files.append(part)
    if not files:
        raise ConfigurationError("At least one file is required (--file).")
    return files


def validate_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ConfigurationError(f"--limit must be a positive integer, got '{limit}'")
    return limit


async def detect_overlaps(
    gateway: PullRequestGateway,
    repo_slug: str,
    target_files: list[str],
    limit: int,
    on_progress: ProgressCallback | None = None,
) -> OverlapReport:
    """Check every open PR (up to ``limit``) against ``target_files``.

    ``gateway`` must already be entered as an async context manager.
    """
    prs = await gateway.list_open_pull_requests(repo_slug, limit)
    if not prs:
        logger.info("No open PRs found in %s.", repo_slug)
    logger.debug("Analyzing %d open PR(s) in %s...", len(prs), repo_slug)

    mapping: OverlapMapping = {}
    for index, pr in enumerate(prs, start=1):
        if on_progress:
            on_progress(index, len(prs), pr)
        changed_files = await gateway.get_changed_files(repo_slug, pr)
        accumulate(mapping, pr, changed_files, target_files)

    return OverlapReport(
        repo_slug=repo_slug,
        method=gateway.method,
        target_files=target_files,
        prs_analyzed=len(prs),
        overlaps=mapping,
    )


async def run_detection(
    files: Iterable[str],
    url: str = "",
    method: str | AccessMethod | None = None,
    limit: int | None = None,
    settings: OverlapSettings | None = None,
    on_progress: ProgressCallback | None = None,
) -> OverlapReport:
    """Full run from user input to report.

    All input checks happen before the gateway is built, so a configuration
    error never costs a network call.
    """
    settings = settings or default_settings
    target_files = clean_target_files(files)
    limit = validate_limit(settings.default_limit if limit is None else limit)
    chosen = parse_method(method)

    if not url:
        url = await read_default_remote_url(settings.git_command)

    detect_provider(url)
    repo_slug = resolve_repo_slug(url)
    if not repo_slug:
        raise ConfigurationError(f"Could not determine repository slug from remote URL '{url}'.")

    logger.info("Searching %s for PRs modifying %d file(s)...", repo_slug, len(target_files))

    async with select_gateway(chosen, settings) as gateway:
        return await detect_overlaps(gateway, repo_slug, target_files, limit, on_progress)
