"""DOM query engine.

Runs a selector match or a scored text search against a live document and
returns a paginated result envelope, consulting the query cache before and
after evaluation. Evaluation errors propagate untouched and are never cached.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from pagequery.errors import ErrorCode, PageQueryError
from pagequery.models.cache import QueryShape
from pagequery.models.dom import SearchSnapshot, SelectorSnapshot
from pagequery.models.tools import ElementDescriptor, QueryResult
from pagequery.ranking import is_visible, rank_candidates
from pagequery.scripts import (
    REF_ATTRIBUTE,
    SEARCH_COLLECT_JS,
    SEARCH_TAG_JS,
    SELECTOR_QUERY_JS,
)

if TYPE_CHECKING:
    from pagequery.cache import QueryCache
    from pagequery.models.tools import QueryDomInput
    from pagequery.protocols import DocumentProtocol

_RESULT_ANNOTATIONS = {"from_cache", "cache_timestamp"}


async def query_dom(
    document: DocumentProtocol,
    params: QueryDomInput,
    cache: QueryCache | None,
) -> dict[str, Any]:
    """Answer a DOM query, from the cache when allowed and available."""
    page_identity = document.url
    log = structlog.get_logger().bind(
        url=page_identity, selector=params.selector, search_text=params.search_text
    )
    shape = QueryShape(
        selector=params.selector,
        search_text=params.search_text,
        offset=params.offset,
        limit=params.limit,
    )
    use_cache = params.use_cache and cache is not None

    if use_cache and not params.force_refresh:
        cached = cache.get(page_identity, shape)
        if cached is not None:
            log.info("cache_hit", returned_count=cached.get("returned_count"))
            return {
                **cached,
                "from_cache": True,
                "cache_timestamp": datetime.now(UTC).isoformat(),
            }
        log.info("cache_miss")

    if params.selector:
        result = await _run_selector_query(document, params)
    else:
        result = await _run_text_search(document, params)

    data = result.model_dump(mode="json", exclude_none=True, exclude=_RESULT_ANNOTATIONS)
    if use_cache:
        cache.set(page_identity, shape, data)

    log.info(
        "query_complete",
        total_count=result.total_count,
        returned_count=result.returned_count,
        cached=use_cache,
    )
    return {**data, "from_cache": False}


async def _run_selector_query(document: DocumentProtocol, params: QueryDomInput) -> QueryResult:
    raw = await document.evaluate(
        SELECTOR_QUERY_JS,
        {
            "selector": params.selector,
            "offset": params.offset,
            "limit": params.limit,
            "includeAttributes": params.include_attributes,
            "maxTextLength": params.max_text_length,
            "refAttribute": REF_ATTRIBUTE,
        },
    )
    snapshot = SelectorSnapshot.model_validate(raw)

    elements = [
        ElementDescriptor(
            index=element.index,
            tag_name=element.tag_name,
            text_content=_clip(element.text, params.max_text_length),
            is_visible=is_visible(element.rect, snapshot.viewport),
            position=element.rect,
            attributes=_attribute_map(element.attributes, params.include_attributes),
            ref=element.ref,
        )
        for element in snapshot.elements
    ]
    return _build_result(params, snapshot.total_count, elements)


async def _run_text_search(document: DocumentProtocol, params: QueryDomInput) -> QueryResult:
    search_text = params.search_text or ""
    raw = await document.evaluate(SEARCH_COLLECT_JS, {"searchText": search_text})

    # The tag script releases the parked nodes, so it runs even when the
    # snapshot is unusable or the requested page is empty
    picks: list[list[int]] = []
    try:
        snapshot = SearchSnapshot.model_validate(raw)
        ranked = rank_candidates(snapshot.candidates, search_text)
        page = ranked[params.offset : params.offset + params.limit]
        picks = [[c.candidate, params.offset + i] for i, (_, c) in enumerate(page)]
    finally:
        refs = await document.evaluate(
            SEARCH_TAG_JS,
            {
                "token": raw.get("token") if isinstance(raw, dict) else None,
                "picks": picks,
                "refAttribute": REF_ATTRIBUTE,
            },
        )
    if len(refs) != len(page) or any(ref is None for ref in refs):
        raise PageQueryError(
            code=ErrorCode.EVALUATION_FAILED,
            message="The page changed while search results were being collected.",
            suggestion="Repeat the search once the page has settled.",
            recoverable=True,
        )

    elements = [
        ElementDescriptor(
            index=params.offset + i,
            tag_name=candidate.tag_name,
            text_content=_clip(candidate.direct_text, params.max_text_length),
            relevance_score=score,
            is_visible=is_visible(candidate.rect, snapshot.viewport),
            position=candidate.rect,
            attributes=_attribute_map(candidate.attributes, params.include_attributes),
            ref=ref,
        )
        for i, ((score, candidate), ref) in enumerate(zip(page, refs, strict=True))
    ]
    return _build_result(params, len(ranked), elements, search_text=search_text)


def _build_result(
    params: QueryDomInput,
    total_count: int,
    elements: list[ElementDescriptor],
    *,
    search_text: str | None = None,
) -> QueryResult:
    return QueryResult(
        search_text=search_text,
        total_count=total_count,
        offset=params.offset,
        limit=params.limit,
        returned_count=len(elements),
        has_more=params.offset + params.limit < total_count,
        elements=elements,
    )


def _clip(text: str, max_length: int) -> str:
    return text.strip()[:max_length]


def _attribute_map(
    attributes: list[tuple[str, str]] | None, include: bool
) -> dict[str, str] | None:
    if not include:
        return None
    return dict(attributes or [])
