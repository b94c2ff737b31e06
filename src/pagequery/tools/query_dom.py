"""Tool handler for browser_query_dom.

Receives AppState, validates the query parameters and hands them to the query
engine together with the shared page and cache. No MCP or FastMCP imports —
server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pagequery.errors import ErrorCode, PageQueryError
from pagequery.models.tools import QueryDomInput
from pagequery.query import query_dom

if TYPE_CHECKING:
    from pagequery.state import AppState


async def handle(
    state: AppState,
    *,
    selector: str | None = None,
    search_text: str | None = None,
    limit: int = 20,
    offset: int = 0,
    include_attributes: bool = True,
    max_text_length: int = 500,
    use_cache: bool = True,
    force_refresh: bool = False,
) -> dict:
    """Handle a browser_query_dom tool call."""
    log = structlog.get_logger().bind(tool="browser_query_dom")
    log.info("handler_called", selector=selector, search_text=search_text)

    try:
        validated = QueryDomInput(
            selector=selector,
            search_text=search_text,
            limit=limit,
            offset=offset,
            include_attributes=include_attributes,
            max_text_length=max_text_length,
            use_cache=use_cache,
            force_refresh=force_refresh,
        )
    except ValueError as exc:
        raise PageQueryError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "Provide a CSS selector or search text, limit >= 1, offset >= 0 "
                "and max_text_length >= 0."
            ),
            recoverable=False,
        ) from exc

    if state.page is None:
        raise RuntimeError("Browser page not initialized")

    return await query_dom(state.page, validated, state.cache)
