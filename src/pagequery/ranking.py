"""Relevance scoring for free-text DOM search.

A candidate element earns exactly one text tier (exact, prefix, whole word,
substring) from its direct text, plus independent bonuses for having a
rendered box and for being a heading, button, link or label. Elements that
matched only through an attribute value earn bonuses alone.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pagequery.models.dom import SearchCandidate, Viewport
    from pagequery.models.tools import ElementPosition

EXACT_MATCH_SCORE = 100
PREFIX_MATCH_SCORE = 50
WORD_MATCH_SCORE = 30
SUBSTRING_MATCH_SCORE = 10
RENDERED_BOX_BONUS = 5
SEMANTIC_TAG_BONUS = 10

SEMANTIC_TAGS: frozenset[str] = frozenset(
    {"h1", "h2", "h3", "h4", "h5", "h6", "button", "a", "label"}
)


def is_match(direct_text: str, attribute_values: Iterable[str], search_text: str) -> bool:
    """True if the direct text or any attribute value contains the search text."""
    needle = search_text.lower()
    if needle in direct_text.lower():
        return True
    return any(needle in value.lower() for value in attribute_values)


def text_score(direct_text: str, search_text: str) -> int:
    """Score the single text tier the direct text falls into (0 if none)."""
    haystack = direct_text.lower()
    needle = search_text.lower()

    if haystack == needle:
        return EXACT_MATCH_SCORE
    if haystack.startswith(needle):
        return PREFIX_MATCH_SCORE
    if re.search(rf"\b{re.escape(needle)}\b", haystack):
        return WORD_MATCH_SCORE
    if needle in haystack:
        return SUBSTRING_MATCH_SCORE
    return 0


def has_rendered_box(rect: ElementPosition) -> bool:
    return rect.width > 0 and rect.height > 0


def is_visible(rect: ElementPosition, viewport: Viewport) -> bool:
    """Rendered box that intersects the viewport rectangle."""
    return (
        has_rendered_box(rect)
        and rect.top < viewport.height
        and rect.top + rect.height > 0
        and rect.left < viewport.width
        and rect.left + rect.width > 0
    )


def score_candidate(candidate: SearchCandidate, search_text: str) -> int:
    score = text_score(candidate.direct_text, search_text)
    if has_rendered_box(candidate.rect):
        score += RENDERED_BOX_BONUS
    if candidate.tag_name in SEMANTIC_TAGS:
        score += SEMANTIC_TAG_BONUS
    return score


def rank_candidates(
    candidates: Iterable[SearchCandidate], search_text: str
) -> list[tuple[int, SearchCandidate]]:
    """Return ``(score, candidate)`` pairs, best first.

    Equal scores keep the input (document) order; ``sorted`` is stable.
    """
    scored = [(score_candidate(c, search_text), c) for c in candidates]
    return sorted(scored, key=lambda pair: pair[0], reverse=True)
