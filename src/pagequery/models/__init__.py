from __future__ import annotations

from pagequery.models.cache import QueryCacheEntry, QueryShape
from pagequery.models.dom import (
    SearchCandidate,
    SearchSnapshot,
    SelectorElement,
    SelectorSnapshot,
    Viewport,
)
from pagequery.models.tools import (
    CacheStatusOutput,
    ClearCacheInput,
    ClearCacheOutput,
    ElementDescriptor,
    ElementPosition,
    NavigateInput,
    NavigateOutput,
    QueryDomInput,
    QueryResult,
)

__all__ = [
    # cache
    "QueryShape",
    "QueryCacheEntry",
    # page snapshots
    "Viewport",
    "SelectorElement",
    "SelectorSnapshot",
    "SearchCandidate",
    "SearchSnapshot",
    # tools
    "QueryDomInput",
    "QueryResult",
    "ElementDescriptor",
    "ElementPosition",
    "ClearCacheInput",
    "ClearCacheOutput",
    "CacheStatusOutput",
    "NavigateInput",
    "NavigateOutput",
]
