from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class QueryShape(BaseModel):
    """The parts of a DOM query that address a cache slot."""

    selector: str | None = None
    search_text: str | None = None
    offset: int = 0
    limit: int = 20


class QueryCacheEntry(BaseModel):
    """A computed query result for one page at one point in time."""

    data: dict[str, Any]  # Unannotated QueryResult dump
    created_at: datetime
    page_identity: str  # Page URL the result was computed against
    selector: str | None = None
    search_text: str | None = None
