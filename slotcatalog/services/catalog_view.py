"""
Paged catalog view for search screens.

A search screen refreshes on every (debounced) keystroke and category toggle,
then loads further pages as the user scrolls. The full filtered result is
computed once per refresh and held in memory; pages are sliced from it.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from ..domain.catalog_filter import DEFAULT_PAGE_SIZE, ProductPage, paginate
from ..domain.models import Product
from .catalog_service import CatalogAvailabilityService

logger = logging.getLogger(__name__)


class CatalogView:
    """
    Holds the latest filtered result and serves it page by page.

    Refreshes may overlap. Each one takes a generation number when it starts
    and only the newest generation may replace the held result.
    """

    def __init__(self, service: CatalogAvailabilityService, per_page: int = DEFAULT_PAGE_SIZE):
        if per_page < 1:
            raise ValueError(f"per_page must be 1 or greater, got {per_page}")
        self._service = service
        self.per_page = per_page
        self._generation = 0
        self._results: List[Product] = []
        self._next_page = 1

    @property
    def results(self) -> List[Product]:
        """The full filtered result of the latest completed refresh."""
        return list(self._results)

    @property
    def has_more(self) -> bool:
        return (self._next_page - 1) * self.per_page < len(self._results)

    async def refresh(
        self,
        query: str | None = None,
        category: str | Iterable[str] | None = None,
        now=None,
    ) -> ProductPage | None:
        """
        Recompute the result and return its first page.

        Returns:
            The first page, or None if a newer refresh started meanwhile
            (its result is discarded)
        """
        self._generation += 1
        generation = self._generation

        products = await self._service.get_filtered_products(
            query=query, category=category, now=now
        )

        if generation != self._generation:
            logger.debug("Discarding stale catalog refresh %d", generation)
            return None

        self._results = products
        self._next_page = 1
        return self.next_page()

    def next_page(self) -> ProductPage:
        """Return the next page of the held result without re-querying."""
        page = paginate(self._results, self._next_page, self.per_page)
        self._next_page += 1
        return page

    def clear(self) -> None:
        """Drop the held result, e.g. when the search box is emptied."""
        self._generation += 1
        self._results = []
        self._next_page = 1
