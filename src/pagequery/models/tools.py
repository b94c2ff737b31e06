from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator, model_validator

MAX_QUERY_LIMIT = 100


class QueryDomInput(BaseModel):
    selector: str | None = None
    search_text: str | None = None
    limit: int = 20
    offset: int = 0
    include_attributes: bool = True
    max_text_length: int = 500
    use_cache: bool = True
    force_refresh: bool = False

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("limit must be >= 1")
        return min(v, MAX_QUERY_LIMIT)

    @field_validator("offset")
    @classmethod
    def validate_offset(cls, v: int) -> int:
        if v < 0:
            raise ValueError("offset must be >= 0")
        return v

    @field_validator("max_text_length")
    @classmethod
    def validate_max_text_length(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_text_length must be >= 0")
        return v

    @model_validator(mode="after")
    def require_selector_or_search_text(self) -> QueryDomInput:
        if not self.selector and not self.search_text:
            raise ValueError("Either selector or search_text must be provided")
        return self


class ElementPosition(BaseModel):
    top: float
    left: float
    width: float
    height: float


class ElementDescriptor(BaseModel):
    index: int  # Position in the full (sorted) match list, not in the page
    tag_name: str
    text_content: str
    is_visible: bool
    position: ElementPosition
    attributes: dict[str, str] | None = None
    relevance_score: int | None = None  # Search path only
    ref: str


class QueryResult(BaseModel):
    search_text: str | None = None  # Echoed on the search path only
    total_count: int
    offset: int
    limit: int
    returned_count: int
    has_more: bool
    elements: list[ElementDescriptor]
    from_cache: bool = False
    cache_timestamp: datetime | None = None


class ClearCacheInput(BaseModel):
    url: str | None = None
    older_than_seconds: float | None = None

    @field_validator("older_than_seconds")
    @classmethod
    def validate_older_than_seconds(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("older_than_seconds must be >= 0")
        return v


class ClearCacheOutput(BaseModel):
    message: str
    size: int


class CacheStatusOutput(BaseModel):
    size: int
    max_entries: int
    max_age_seconds: float


class NavigateInput(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if len(v) > 2048:
            raise ValueError("url must not exceed 2048 characters")
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must use http or https scheme")
        return v


class NavigateOutput(BaseModel):
    url: str
    title: str
