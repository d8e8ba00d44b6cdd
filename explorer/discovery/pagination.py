"""
Fixed-size paging over the filtered, ordered result list.

Paging is purely local: it slices the derived list and never triggers a
new catalogue request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

from .schemas import PageWindow, ViewStatus

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page_index: int
    page_size: int
    total_pages: int
    total: int

    @property
    def can_go_previous(self) -> bool:
        return self.page_index > 0

    @property
    def can_go_next(self) -> bool:
        return self.page_index + 1 < self.total_pages


def total_pages(count: int, page_size: int) -> int:
    return max(1, -(-count // page_size))


def clamp(window: PageWindow, count: int) -> PageWindow:
    """Return ``window`` with its index pulled into the valid page range."""
    last = total_pages(count, window.page_size) - 1
    index = min(max(0, window.page_index), last)
    if index == window.page_index:
        return window
    return window.model_copy(update={"page_index": index})


def paginate(items: Sequence[T], window: PageWindow) -> Page[T]:
    window = clamp(window, len(items))
    start = window.page_index * window.page_size
    return Page(
        items=list(items[start:start + window.page_size]),
        page_index=window.page_index,
        page_size=window.page_size,
        total_pages=total_pages(len(items), window.page_size),
        total=len(items),
    )


def next_page(window: PageWindow, count: int) -> PageWindow:
    window = clamp(window, count)
    if window.page_index + 1 < total_pages(count, window.page_size):
        return window.model_copy(update={"page_index": window.page_index + 1})
    return window


def previous_page(window: PageWindow, count: int) -> PageWindow:
    window = clamp(window, count)
    if window.page_index > 0:
        return window.model_copy(update={"page_index": window.page_index - 1})
    return window


def view_status(has_searched: bool, filtered_count: int, raw_count: int) -> ViewStatus:
    if not has_searched:
        return "idle"
    if raw_count == 0:
        return "no-results"
    if filtered_count == 0:
        return "filtered-out"
    return "results"


def pagination_label(page: Page, raw_count: int, has_searched: bool) -> str:
    """Human readable summary of the current page.

    The raw count is only mentioned when filters removed something.
    """
    status = view_status(has_searched, page.total, raw_count)
    if status == "idle":
        return ""
    if status == "no-results":
        return "No results"
    if status == "filtered-out":
        return f"No results match the active filters (of {raw_count} raw results)"
    label = f"Page {page.page_index + 1} of {page.total_pages} · {page.total} results"
    if page.total < raw_count:
        label += f" (of {raw_count} raw results)"
    return label
