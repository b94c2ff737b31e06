"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan context
manager) and injected into every tool handler via the MCP Context object. It is
the only owner of the query cache; nothing reaches the cache through a global.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagequery.cache import QueryCache
    from pagequery.config import Settings
    from pagequery.protocols import BrowserPageProtocol


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    cache: QueryCache
    page: BrowserPageProtocol | None = None
