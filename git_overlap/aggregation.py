"""Overlap aggregation: which target files does each open PR touch?"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from git_overlap.models import PRMatch, PRSummary

logger = logging.getLogger(__name__)

OverlapMapping = dict[str, list[PRMatch]]


def accumulate(
    mapping: OverlapMapping,
    pr: PRSummary,
    changed_files: set[str],
    target_files: Iterable[str],
) -> None:
    """Append ``pr`` to ``mapping[target]`` for every target it changes.

    Matching is exact, case-sensitive string equality after trimming the
    target; no glob or path normalization. A target listed twice still gets
    a single match per PR.
    """
    seen: set[str] = set()
    for raw in target_files:
        target = raw.strip()
        if not target or target in seen:
            continue
        seen.add(target)
        if target in changed_files:
            mapping.setdefault(target, []).append(PRMatch(branch=pr.branch, number=pr.number))
            logger.debug("Found target file '%s' in PR #%d (branch: %s)", target, pr.number, pr.branch)

