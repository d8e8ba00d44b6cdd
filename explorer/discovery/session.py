"""
Per-reader explorer state.

An ``ExplorerSession`` is the context object the presentation layer
holds for one reader: the active query, the last successful
``ResultCollection``, the filter criteria, the sort mode and the page
window. It owns the only write path to the collection, a
``BatchFetcher`` run, and guards it with a generation counter so that a
slow, superseded search can never overwrite a newer one.

Everything the UI renders comes out of ``view()``, which re-derives the
filtered, ordered and paginated state from scratch on every call.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from typing_extensions import get_args

from ..settings import Settings
from .directives import parse
from .fetcher import BatchFetcher, SearchSuperseded
from .filters import OwnershipOracle, apply_filters, never_owned, order
from .googlebooks_service import CatalogTransport, TransportFailure
from .pagination import clamp, next_page, paginate, pagination_label, previous_page, view_status
from .presets import PresetRegistry
from .schemas import (
    CatalogItem,
    ExplorerView,
    FilterCriteria,
    PageWindow,
    ResultCollection,
    SortMode,
)


logger = logging.getLogger(__name__)


def derive_results(
    collection: ResultCollection,
    criteria: FilterCriteria,
    sort_mode: SortMode,
    is_owned: OwnershipOracle = never_owned,
) -> Sequence[CatalogItem]:
    return order(apply_filters(collection.items, criteria, is_owned), sort_mode)


class ExplorerSession:
    """Search, filter, sort and paginate state for one reader."""

    def __init__(
        self,
        transport: CatalogTransport,
        settings: Settings,
        is_owned: OwnershipOracle = never_owned,
        presets: Optional[PresetRegistry] = None,
    ) -> None:
        self.settings = settings
        self.fetcher = BatchFetcher(transport)
        self.presets = presets or PresetRegistry()
        self.is_owned = is_owned

        self.query = settings.initial_query
        self.collection = ResultCollection(fetch_cap=settings.fetch_cap)
        self.criteria = FilterCriteria()
        self.sort_mode: SortMode = "relevance"
        self.window = PageWindow(page_size=settings.page_size)
        self.loading = False
        self.error_message: Optional[str] = None
        self.has_searched = False
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _reset_page(self) -> None:
        self.window = self.window.model_copy(update={"page_index": 0})

    # ------------------------------------------------------------------
    # Search submission

    async def submit(self, query: Optional[str] = None) -> None:
        """Run a search for ``query`` (or the current query text).

        A transport failure leaves the current results in place and sets
        ``error_message``. A run overtaken by a newer submission ends
        silently.
        """
        if query is not None:
            self.query = query
        self._reset_page()
        await self._fetch()

    async def select_preset(self, preset_id: str) -> None:
        """Load a preset's query and sort mode, then search.

        Raises ``UnknownPreset`` before touching any state when the id is
        not registered.
        """
        query, sort_override = self.presets.select(preset_id)
        self.query = query
        if sort_override is not None:
            self.sort_mode = sort_override
        self._reset_page()
        await self._fetch()

    async def _fetch(self) -> None:
        self._generation += 1
        generation = self._generation

        text, directives = parse(self.query.strip())
        if not text:
            self.collection = ResultCollection(fetch_cap=self.settings.fetch_cap)
            self.has_searched = False
            self.error_message = None
            self.loading = False
            return

        if directives.language_restrict is None and self.settings.default_language:
            directives = directives.model_copy(
                update={"language_restrict": self.settings.default_language.lower()}
            )

        self.loading = True
        self.error_message = None
        self.has_searched = True

        try:
            collection = await self.fetcher.run(
                directives,
                self.settings.fetch_cap,
                is_current=lambda: self._is_current(generation),
            )
        except SearchSuperseded:
            return
        except TransportFailure as exc:
            if not self._is_current(generation):
                return
            logger.warning("Search %r failed: %s", text, exc)
            self.error_message = str(exc)
            self.loading = False
            return

        if not self._is_current(generation):
            return
        self.collection = collection
        self._reset_page()
        self.loading = False

    # ------------------------------------------------------------------
    # Criteria and navigation

    def set_criteria(self, criteria: FilterCriteria) -> None:
        self.criteria = criteria
        self._reset_page()

    def set_sort_mode(self, mode: SortMode) -> None:
        if mode not in get_args(SortMode):
            raise ValueError(f"Unknown sort mode: {mode}")
        self.sort_mode = mode
        self._reset_page()

    def _filtered_count(self) -> int:
        return len(apply_filters(self.collection.items, self.criteria, self.is_owned))

    def go_to_next_page(self) -> None:
        self.window = next_page(self.window, self._filtered_count())

    def go_to_previous_page(self) -> None:
        self.window = previous_page(self.window, self._filtered_count())

    # ------------------------------------------------------------------
    # Derived state

    def view(self) -> ExplorerView:
        results = derive_results(self.collection, self.criteria, self.sort_mode, self.is_owned)
        self.window = clamp(self.window, len(results))
        page = paginate(results, self.window)
        raw_count = len(self.collection.items)
        return ExplorerView(
            query=self.query,
            loading=self.loading,
            error_message=self.error_message,
            has_searched=self.has_searched,
            status=view_status(self.has_searched, page.total, raw_count),
            results=page.items,
            page_index=page.page_index,
            page_size=page.page_size,
            total_pages=page.total_pages,
            can_go_previous=page.can_go_previous,
            can_go_next=page.can_go_next,
            filtered_count=page.total,
            raw_count=raw_count,
            reported_total=self.collection.reported_total,
            criteria=self.criteria,
            sort_mode=self.sort_mode,
            pagination_label=pagination_label(page, raw_count, self.has_searched),
        )
