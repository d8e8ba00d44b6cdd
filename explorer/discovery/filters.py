"""
Client-side filtering and sorting over a retrieved working set.

Both stages are pure: they take a sequence of ``CatalogItem`` and return
a new list, never touching the ``ResultCollection`` they were derived
from. Items with missing metadata never raise; they fall back to the
sentinel values documented on each helper.
"""

from __future__ import annotations

import math
import re
from typing import Callable, List, Optional, Sequence

from .schemas import CatalogItem, FilterCriteria, SortMode

OwnershipOracle = Callable[[str, str], bool]

_YEAR_RE = re.compile(r"\d{4}")


def never_owned(title: str, authors: str) -> bool:
    return False


def extract_year(published_date: Optional[str]) -> Optional[int]:
    """Return the year from a ``publishedDate`` value.

    The catalogue reports ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``; only
    the first four characters are considered. ``None`` is returned when
    they are not a number.
    """
    if not published_date:
        return None
    m = _YEAR_RE.fullmatch(published_date[:4])
    return int(m.group()) if m else None


def matches_length(item: CatalogItem, bucket: str) -> bool:
    if bucket == "all":
        return True
    pages = item.page_count
    if pages is None:
        return False
    if bucket == "short":
        return 0 < pages < 200
    if bucket == "medium":
        return 200 <= pages <= 400
    if bucket == "long":
        return pages > 400
    return False


def matches_period(item: CatalogItem, bucket: str) -> bool:
    if bucket == "all":
        return True
    year = extract_year(item.published_date)
    if year is None:
        return False
    if bucket == "recent":
        return year >= 2015
    if bucket == "modern":
        return 1980 <= year <= 2014
    if bucket == "older":
        return year < 1980
    return False


def apply_filters(
    items: Sequence[CatalogItem],
    criteria: FilterCriteria,
    is_owned: OwnershipOracle = never_owned,
) -> List[CatalogItem]:
    """Keep the items that satisfy every active predicate."""

    def _keep(item: CatalogItem) -> bool:
        if not matches_length(item, criteria.length_bucket):
            return False
        if not matches_period(item, criteria.period_bucket):
            return False
        if criteria.hide_owned and is_owned(item.title, item.joined_authors):
            return False
        return True

    return [item for item in items if _keep(item)]


def order(items: Sequence[CatalogItem], mode: SortMode) -> List[CatalogItem]:
    """Return ``items`` ordered by ``mode``.

    Every mode is stable. Missing values sort last: page counts count as
    infinity ascending and zero descending, years and ratings as zero.
    ``relevance`` keeps the retrieval order.
    """
    if mode == "pages-asc":
        return sorted(items, key=lambda b: b.page_count if b.page_count is not None else math.inf)
    if mode == "pages-desc":
        return sorted(items, key=lambda b: b.page_count or 0, reverse=True)
    if mode == "date-desc":
        return sorted(items, key=lambda b: extract_year(b.published_date) or 0, reverse=True)
    if mode == "rating-desc":
        return sorted(
            items, key=lambda b: b.average_rating if b.average_rating is not None else 0.0, reverse=True
        )
    return list(items)
