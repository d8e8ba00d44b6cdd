import asyncio
from typing import Dict, List, Optional

import pytest

from explorer.discovery.googlebooks_service import TransportFailure
from explorer.discovery.schemas import CatalogItem, CatalogPage, CatalogRequest
from explorer.settings import Settings


def make_items(count: int, prefix: str = "vol", start: int = 0) -> List[CatalogItem]:
    return [
        CatalogItem(id=f"{prefix}-{i}", title=f"{prefix} {i}", authors=[f"Author {i}"])
        for i in range(start, start + count)
    ]


class FakeTransport:
    """Serves pre-built results per query, honouring startIndex/maxResults."""

    max_results_per_call = 40

    def __init__(
        self,
        catalog: Optional[Dict[str, List[CatalogItem]]] = None,
        total_items: Optional[int] = None,
        fail_on_call: Optional[int] = None,
    ) -> None:
        self.catalog = catalog or {}
        self.total_items = total_items
        self.fail_on_call = fail_on_call
        self.requests: List[CatalogRequest] = []

    async def search(self, request: CatalogRequest) -> CatalogPage:
        self.requests.append(request)
        if self.fail_on_call is not None and len(self.requests) == self.fail_on_call:
            raise TransportFailure("Google Books API error (503): unavailable")
        items = self.catalog.get(request.query, [])
        batch = items[request.start_index:request.start_index + request.max_results]
        total = len(items) if self.total_items is None else self.total_items
        return CatalogPage(total_items=total, items=batch)


class FullBatchTransport:
    """Always answers with a full batch, whatever was requested."""

    max_results_per_call = 40

    def __init__(self, total_items: int = 1000) -> None:
        self.total_items = total_items
        self.requests: List[CatalogRequest] = []

    async def search(self, request: CatalogRequest) -> CatalogPage:
        self.requests.append(request)
        return CatalogPage(
            total_items=self.total_items,
            items=make_items(40, start=request.start_index),
        )


class GatedTransport(FakeTransport):
    """Blocks searches for ``gated_query`` until ``release`` is set.

    With ``fail_gated`` the released call raises ``TransportFailure``.
    """

    def __init__(
        self,
        catalog: Dict[str, List[CatalogItem]],
        gated_query: str,
        fail_gated: bool = False,
    ) -> None:
        super().__init__(catalog)
        self.gated_query = gated_query
        self.fail_gated = fail_gated
        self.release = asyncio.Event()

    async def search(self, request: CatalogRequest) -> CatalogPage:
        if request.query == self.gated_query:
            await self.release.wait()
            if self.fail_gated:
                self.requests.append(request)
                raise TransportFailure("Google Books API error (500): stale failure")
        return await super().search(request)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        fetch_cap=50,
        page_size=5,
        default_language="fr",
        initial_query="",
        api_key=None,
    )
