"""Tool handler for browser_clear_cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pagequery.errors import ErrorCode, PageQueryError
from pagequery.models.tools import ClearCacheInput, ClearCacheOutput

if TYPE_CHECKING:
    from pagequery.state import AppState


async def handle(
    state: AppState,
    *,
    url: str | None = None,
    older_than_seconds: float | None = None,
) -> dict:
    """Handle a browser_clear_cache tool call.

    An age threshold wins over a URL; with neither, the whole cache is cleared.
    """
    log = structlog.get_logger().bind(tool="browser_clear_cache")
    log.info("handler_called", url=url, older_than_seconds=older_than_seconds)

    try:
        validated = ClearCacheInput(url=url, older_than_seconds=older_than_seconds)
    except ValueError as exc:
        raise PageQueryError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Pass older_than_seconds >= 0, a URL, or nothing to clear everything.",
            recoverable=False,
        ) from exc

    if validated.older_than_seconds is not None:
        state.cache.invalidate_older_than(validated.older_than_seconds)
        message = f"Cleared cache entries older than {validated.older_than_seconds:g} seconds"
    elif validated.url:
        state.cache.invalidate(validated.url)
        message = f"Cleared cache for URL: {validated.url}"
    else:
        state.cache.invalidate()
        message = "Cleared entire DOM cache"

    output = ClearCacheOutput(message=message, size=state.cache.size())
    return output.model_dump(mode="json")
