"""Tool handler for browser_cache_status."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagequery.models.tools import CacheStatusOutput

if TYPE_CHECKING:
    from pagequery.state import AppState


async def handle(state: AppState) -> dict:
    """Report the entry count and limits of the DOM query cache.

    ``size`` includes expired entries that no read has touched yet.
    """
    output = CacheStatusOutput(
        size=state.cache.size(),
        max_entries=state.cache.max_entries,
        max_age_seconds=state.cache.max_age.total_seconds(),
    )
    return output.model_dump(mode="json")
