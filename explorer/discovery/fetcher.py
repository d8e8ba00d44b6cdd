"""
Bounded multi-batch retrieval against the catalogue transport.

The remote caps how many items one call may return, so a search that
wants more than that issues several calls and walks a ``startIndex``
cursor forward. ``BatchFetcher.run()`` stops as soon as one of these
holds, checked in this order after every batch:

1. the batch came back shorter than requested (remote exhausted);
2. the accumulated items reached ``fetch_cap``;
3. the cursor reached the total reported by the remote.

None of them is an error. A transport failure aborts the loop and
propagates as ``TransportFailure``; nothing is returned in that case, so
the caller's current results stay untouched.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .googlebooks_service import CatalogTransport
from .schemas import CatalogItem, CatalogRequest, ResultCollection, SearchDirectives


logger = logging.getLogger(__name__)


class SearchSuperseded(Exception):
    """A newer search was submitted while this one was in flight."""


def _always_current() -> bool:
    return True


class BatchFetcher:
    """Drives a ``CatalogTransport`` to build one ``ResultCollection``."""

    def __init__(self, transport: CatalogTransport) -> None:
        self.transport = transport

    async def run(
        self,
        directives: SearchDirectives,
        fetch_cap: int,
        is_current: Optional[Callable[[], bool]] = None,
    ) -> ResultCollection:
        """Fetch up to ``fetch_cap`` items for ``directives``.

        ``is_current`` is consulted after every transport call; once it
        returns ``False`` the run raises ``SearchSuperseded`` without
        committing the batch it just received.
        """
        if fetch_cap <= 0:
            raise ValueError("fetch_cap must be positive")
        check = is_current or _always_current

        per_call = self.transport.max_results_per_call
        fetched: List[CatalogItem] = []
        start_index = 0
        reported_total = 0

        while True:
            requested = min(per_call, fetch_cap - len(fetched))
            page = await self.transport.search(
                CatalogRequest(
                    query=directives.text,
                    max_results=requested,
                    start_index=start_index,
                    language_restrict=directives.language_restrict,
                    order_by=directives.order_by,
                )
            )
            if not check():
                logger.info("Discarding superseded search for %r", directives.text)
                raise SearchSuperseded(directives.text)

            reported_total = page.total_items
            fetched.extend(page.items)
            start_index += len(page.items)
            logger.debug(
                "Batch at %s returned %s/%s items (total reported %s)",
                start_index - len(page.items), len(page.items), requested, reported_total,
            )

            if len(page.items) < requested:
                reason = "remote exhausted"
                break
            if len(fetched) >= fetch_cap:
                reason = "fetch cap reached"
                break
            if start_index >= reported_total:
                reason = "reported total reached"
                break

        logger.info(
            "Search %r finished after %s items (%s)", directives.text, min(len(fetched), fetch_cap), reason
        )
        return ResultCollection(
            items=fetched[:fetch_cap],
            reported_total=reported_total,
            fetch_cap=fetch_cap,
        )
