"""Protocol interfaces for swappable components.

Tool handlers and the query engine reference these protocols, not the
concrete implementations. This allows:
- Tests to drive the engine with an in-memory fake document
- Other page runtimes (CDP, a remote browser) to be swapped in without
  changing tool code
"""

from __future__ import annotations

from typing import Any, Protocol


class DocumentProtocol(Protocol):
    """A live page the query scripts are evaluated against."""

    @property
    def url(self) -> str: ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any: ...


class BrowserPageProtocol(DocumentProtocol, Protocol):
    """A document that can also be navigated."""

    async def goto(self, url: str) -> str: ...

    async def title(self) -> str: ...
