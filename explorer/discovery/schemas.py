"""
Pydantic schema definitions for the discovery engine.

``CatalogItem`` is the narrow view of a remote catalogue volume that the
engine works with. ``ResultCollection`` is the working set built by one
search, and ``FilterCriteria``, ``PageWindow`` and the ``SortMode``
literal describe what the reader has asked to see. ``ExplorerView`` is
the derived state handed to the presentation layer.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator
from typing_extensions import Literal

# Displayed and matched against the shelf when a volume lists no author.
UNKNOWN_AUTHOR = "Auteur inconnu"

SortMode = Literal["relevance", "pages-asc", "pages-desc", "date-desc", "rating-desc"]
OrderBy = Literal["relevance", "newest"]
LengthBucket = Literal["all", "short", "medium", "long"]
PeriodBucket = Literal["all", "recent", "modern", "older"]
ViewStatus = Literal["idle", "no-results", "filtered-out", "results"]


class SearchDirectives(BaseModel):
    """Structured search request derived from one submitted query."""

    text: str
    language_restrict: Optional[str] = Field(default=None, pattern=r"^[a-z]{2}$")
    order_by: Optional[OrderBy] = None

    model_config = {"frozen": True}


class CatalogItem(BaseModel):
    """A single volume returned by the catalogue.

    Only ``id``, ``title`` and ``authors`` are always present. The
    remaining fields are optional because the remote omits them for a
    good share of volumes; the filter and sort stages degrade missing
    values to fixed sentinels instead of failing. Two items are equal
    when their ``id`` is equal.
    """

    id: str
    title: str = ""
    authors: List[str] = Field(default_factory=list)
    page_count: Optional[int] = Field(default=None, ge=0)
    published_date: Optional[str] = None
    average_rating: Optional[float] = None
    thumbnail_url: Optional[str] = None

    subtitle: Optional[str] = None
    publisher: Optional[str] = None
    description: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    ratings_count: int = 0
    preview_link: Optional[str] = None

    @property
    def joined_authors(self) -> str:
        return ", ".join(self.authors) if self.authors else UNKNOWN_AUTHOR

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CatalogItem):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class CatalogRequest(BaseModel):
    """Parameters of one bounded call to the catalogue transport."""

    query: str
    max_results: int = Field(ge=1, le=40)
    start_index: int = Field(default=0, ge=0)
    language_restrict: Optional[str] = None
    order_by: Optional[OrderBy] = None


class CatalogPage(BaseModel):
    """One transport response: the remote's total plus a batch of items."""

    total_items: int = Field(default=0, ge=0)
    items: List[CatalogItem] = Field(default_factory=list)


class ResultCollection(BaseModel):
    """The working set retrieved by one successful search.

    ``reported_total`` is the remote's own count. It is advisory and is
    never used to index into ``items``.
    """

    items: List[CatalogItem] = Field(default_factory=list)
    reported_total: int = Field(default=0, ge=0)
    fetch_cap: int = Field(default=50, gt=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _within_fetch_cap(self) -> "ResultCollection":
        if len(self.items) > self.fetch_cap:
            raise ValueError(f"{len(self.items)} items exceed the fetch cap of {self.fetch_cap}")
        return self


class FilterCriteria(BaseModel):
    length_bucket: LengthBucket = "all"
    period_bucket: PeriodBucket = "all"
    hide_owned: bool = False


class PageWindow(BaseModel):
    page_index: int = Field(default=0, ge=0)
    page_size: int = Field(default=5, gt=0)


class Preset(BaseModel):
    """A named query shortcut, optionally carrying its own sort mode."""

    id: str
    label: str
    directive_query: str
    default_sort_mode: Optional[SortMode] = None


class ExplorerView(BaseModel):
    """Everything the presentation layer needs to render the explorer."""

    query: str
    loading: bool = False
    error_message: Optional[str] = None
    has_searched: bool = False
    status: ViewStatus = "idle"
    results: List[CatalogItem] = Field(default_factory=list)
    page_index: int = 0
    page_size: int
    total_pages: int = 1
    can_go_previous: bool = False
    can_go_next: bool = False
    filtered_count: int = 0
    raw_count: int = 0
    reported_total: int = 0
    criteria: FilterCriteria = Field(default_factory=FilterCriteria)
    sort_mode: SortMode = "relevance"
    pagination_label: str = ""
