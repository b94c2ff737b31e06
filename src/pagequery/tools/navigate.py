"""Tool handler for browser_navigate.

A fresh page load replaces the DOM behind every cached result for the landing
URL, so those entries are dropped before the handler returns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pagequery.errors import ErrorCode, PageQueryError
from pagequery.models.tools import NavigateInput, NavigateOutput

if TYPE_CHECKING:
    from pagequery.state import AppState


async def handle(url: str, state: AppState) -> dict:
    """Handle a browser_navigate tool call."""
    log = structlog.get_logger().bind(tool="browser_navigate", url=url)
    log.info("handler_called")

    try:
        validated = NavigateInput(url=url)
    except ValueError as exc:
        raise PageQueryError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a valid URL (http/https, max 2048 chars).",
            recoverable=False,
        ) from exc

    if state.page is None:
        raise RuntimeError("Browser page not initialized")

    final_url = await state.page.goto(validated.url)
    state.cache.invalidate(final_url)
    title = await state.page.title()
    log.info("navigation_complete", final_url=final_url)

    output = NavigateOutput(url=final_url, title=title)
    return output.model_dump(mode="json")
