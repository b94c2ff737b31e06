"""Raw element data returned by the in-page query scripts."""

from __future__ import annotations

from pydantic import BaseModel

from pagequery.models.tools import ElementPosition


class Viewport(BaseModel):
    width: float
    height: float


class SelectorElement(BaseModel):
    index: int
    tag_name: str
    text: str
    rect: ElementPosition
    attributes: list[tuple[str, str]] | None = None
    ref: str


class SelectorSnapshot(BaseModel):
    total_count: int
    viewport: Viewport
    elements: list[SelectorElement]


class SearchCandidate(BaseModel):
    candidate: int  # Handle into the token's parked node list
    tag_name: str
    direct_text: str
    rect: ElementPosition
    attributes: list[tuple[str, str]] = []


class SearchSnapshot(BaseModel):
    token: str
    viewport: Viewport
    candidates: list[SearchCandidate]
