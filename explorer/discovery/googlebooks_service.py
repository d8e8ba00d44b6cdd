"""
Google Books integration for the discovery engine.

``GoogleBooksTransport.search()`` performs one bounded call against the
``volumes`` endpoint and maps the response into a ``CatalogPage``. The
engine never talks HTTP directly: ``BatchFetcher`` only depends on the
``CatalogTransport`` protocol defined here, so tests can substitute an
in-memory transport.

Any network error or non-2xx response is raised as ``TransportFailure``
with no partial payload. Results are not cached; each search goes to
the remote.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from typing_extensions import Protocol

from ..settings import Settings
from .schemas import CatalogItem, CatalogPage, CatalogRequest


logger = logging.getLogger(__name__)

MAX_RESULTS_PER_CALL = 40


class TransportFailure(Exception):
    """The catalogue could not be reached or answered with an error."""


class CatalogTransport(Protocol):
    max_results_per_call: int

    async def search(self, request: CatalogRequest) -> CatalogPage:
        ...


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _volume_to_item(volume: Dict[str, Any]) -> Optional[CatalogItem]:
    """Map a raw Google Books volume into a ``CatalogItem``.

    Volumes without an identifier are dropped. Fields of the wrong type
    are treated as missing rather than rejected.
    """
    volume_id = volume.get("id")
    if not volume_id or not isinstance(volume_id, str):
        return None
    info = volume.get("volumeInfo") or {}

    authors_raw = info.get("authors") or []
    authors = [a for a in authors_raw if isinstance(a, str)]
    categories = [c for c in info.get("categories") or [] if isinstance(c, str)]

    page_count = info.get("pageCount")
    if not isinstance(page_count, int) or isinstance(page_count, bool) or page_count < 0:
        page_count = None

    rating = info.get("averageRating")
    rating = float(rating) if isinstance(rating, (int, float)) and not isinstance(rating, bool) else None

    ratings_count = info.get("ratingsCount")
    if not isinstance(ratings_count, int):
        ratings_count = 0

    images = info.get("imageLinks") or {}
    thumbnail = _optional_str(images.get("thumbnail")) or _optional_str(images.get("smallThumbnail"))

    return CatalogItem(
        id=volume_id,
        title=info.get("title") or "",
        authors=authors,
        page_count=page_count,
        published_date=_optional_str(info.get("publishedDate")),
        average_rating=rating,
        thumbnail_url=thumbnail,
        subtitle=_optional_str(info.get("subtitle")),
        publisher=_optional_str(info.get("publisher")),
        description=_optional_str(info.get("description")),
        categories=categories,
        ratings_count=ratings_count,
        preview_link=_optional_str(info.get("previewLink")),
    )


class GoogleBooksTransport:
    """Catalogue transport backed by the public Google Books API.

    An ``httpx.AsyncClient`` may be supplied to share a connection pool
    (or to mount a mock transport in tests); otherwise a short-lived
    client is opened per call.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> None:
        self.settings = settings
        self.max_results_per_call = min(settings.max_results_per_call, MAX_RESULTS_PER_CALL)
        self._client = client

    def build_params(self, request: CatalogRequest) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "q": request.query,
            "maxResults": min(request.max_results, self.max_results_per_call),
            "startIndex": request.start_index,
        }
        if request.language_restrict:
            params["langRestrict"] = request.language_restrict
        if request.order_by:
            params["orderBy"] = request.order_by
        if self.settings.api_key:
            params["key"] = self.settings.api_key
        return params

    async def _get(self, params: Dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.settings.api_base_url, params=params)
        async with httpx.AsyncClient(timeout=self.settings.request_timeout) as client:
            return await client.get(self.settings.api_base_url, params=params)

    async def search(self, request: CatalogRequest) -> CatalogPage:
        params = self.build_params(request)
        logger.debug(
            "Google Books request q=%r startIndex=%s maxResults=%s",
            params["q"], params["startIndex"], params["maxResults"],
        )
        try:
            response = await self._get(params)
        except httpx.HTTPError as exc:
            logger.error("Error fetching %s: %s", self.settings.api_base_url, exc)
            raise TransportFailure(f"Google Books API unreachable: {exc}") from exc

        if response.is_error:
            body = response.text[:500]
            logger.error("Google Books request returned status %s", response.status_code)
            raise TransportFailure(f"Google Books API error ({response.status_code}): {body}")

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportFailure(f"Google Books API returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise TransportFailure("Google Books API returned an unexpected payload")

        items: List[CatalogItem] = []
        for volume in data.get("items") or []:
            if not isinstance(volume, dict):
                continue
            item = _volume_to_item(volume)
            if item is not None:
                items.append(item)

        total = data.get("totalItems")
        total_items = total if isinstance(total, int) and total >= 0 else 0
        return CatalogPage(total_items=total_items, items=items)
