"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Start the stdio transport
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import pagequery.tools.cache_status as t_cache_status
import pagequery.tools.clear_cache as t_clear_cache
import pagequery.tools.navigate as t_navigate
import pagequery.tools.query_dom as t_query_dom
from pagequery import __version__
from pagequery.browser import open_browser
from pagequery.cache import QueryCache
from pagequery.config import Settings
from pagequery.errors import PageQueryError
from pagequery.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr — stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info("server_starting", version=__version__)

    cache = QueryCache(
        max_age_seconds=settings.cache.max_age_seconds,
        max_entries=settings.cache.max_entries,
    )

    async with open_browser(settings.browser) as page:
        state = AppState(settings=settings, cache=cache, page=page)
        log.info(
            "server_started",
            version=__version__,
            cache_max_entries=cache.max_entries,
            cache_max_age_seconds=settings.cache.max_age_seconds,
        )
        try:
            yield state
        finally:
            log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("pagequery", lifespan=lifespan)
# FastMCP doesn't expose a version kwarg — set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: PageQueryError) -> CallToolResult:
    """Convert a PageQueryError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


async def _dispatch(tool: str, call: Awaitable[dict]) -> object:
    """Await a handler, mapping expected failures to the tool error envelope."""
    try:
        return await call
    except PageQueryError as exc:
        log.warning(
            "tool_error",
            tool=tool,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool=tool, exc_info=True)
        raise


@mcp.tool()
async def browser_navigate(url: str, ctx: Context) -> object:
    """Navigate the browser page to a URL and drop cached queries for it."""
    state: AppState = ctx.request_context.lifespan_context
    return await _dispatch("browser_navigate", t_navigate.handle(url, state))


@mcp.tool()
async def browser_query_dom(
    ctx: Context,
    selector: str | None = None,
    search_text: str | None = None,
    limit: int = 20,
    offset: int = 0,
    include_attributes: bool = True,
    max_text_length: int = 500,
    use_cache: bool = True,
    force_refresh: bool = False,
) -> object:
    """Query DOM elements by CSS selector or ranked text search, with pagination.

    Give either selector or search_text. limit defaults to 20 and is capped at
    100; offset skips that many results. Identical queries against the same URL
    are served from a short-lived cache unless use_cache is false or
    force_refresh is true; cached responses carry from_cache=true.
    """
    state: AppState = ctx.request_context.lifespan_context
    return await _dispatch(
        "browser_query_dom",
        t_query_dom.handle(
            state,
            selector=selector,
            search_text=search_text,
            limit=limit,
            offset=offset,
            include_attributes=include_attributes,
            max_text_length=max_text_length,
            use_cache=use_cache,
            force_refresh=force_refresh,
        ),
    )


@mcp.tool()
async def browser_clear_cache(
    ctx: Context,
    url: str | None = None,
    older_than_seconds: float | None = None,
) -> object:
    """Clear the DOM query cache, for one URL, by age, or entirely."""
    state: AppState = ctx.request_context.lifespan_context
    return await _dispatch(
        "browser_clear_cache",
        t_clear_cache.handle(state, url=url, older_than_seconds=older_than_seconds),
    )


@mcp.tool()
async def browser_cache_status(ctx: Context) -> object:
    """Get the current size and limits of the DOM query cache."""
    state: AppState = ctx.request_context.lifespan_context
    return await _dispatch("browser_cache_status", t_cache_status.handle(state))


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
