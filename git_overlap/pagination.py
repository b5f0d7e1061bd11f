"""Bounded page-by-page retrieval of list endpoints."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

# fetch_page(page, per_page) -> items on that page
PageFetcher = Callable[[int, int], Awaitable[list[T]]]


async def fetch_bounded(fetch_page: PageFetcher, limit: int, page_ceiling: int = 100) -> list[T]:
    """Collect at most ``limit`` items, requesting no more than ``page_ceiling`` per page.

    Stops on an empty page, on a short page (end of data), or once ``limit``
    items are collected. Errors raised by ``fetch_page`` propagate unchanged.
    """
    if page_ceiling <= 0:
        raise ValueError("page_ceiling must be positive")

    collected: list[T] = []
    remaining = limit
    page = 1

    while remaining > 0:
        page_size = min(remaining, page_ceiling)
        logger.debug("Fetching page %d (per_page=%d)", page, page_size)
        items = await fetch_page(page, page_size)

        if not items:
            break

        collected.extend(items)

        if len(items) < page_size:
            break

        if len(collected) >= limit:
            collected = collected[:limit]
            break

        remaining = limit - len(collected)
        page += 1

    return collected
