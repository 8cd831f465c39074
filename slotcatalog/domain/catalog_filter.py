"""
Catalog filtering for the storefront product views.

This is the heart of the catalog - the time-slot gate applies before any
search or category choice of the user, so those can only narrow what the
current slot allows.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .models import Product

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class CatalogFilterPipeline:
    """
    Filters a catalog snapshot down to the products to present.

    Stages, in order:
    1. Availability gate: drop products flagged unavailable
    2. Time-slot gate: keep products in at least one allowed category
    3. Search: case-insensitive substring over name, description, tags
       and category names (skipped for a blank query)
    4. Category selection: keep products in at least one selected category
       (skipped for an empty selection)

    Every stage is a stable filter, so the result keeps catalog order.
    """

    def filter(
        self,
        catalog: Iterable[Product],
        allowed_category_ids: Iterable[str],
        search_query: str | None = None,
        category_selection: str | Iterable[str] | None = None
    ) -> List[Product]:
        """
        Run all stages over ``catalog``.

        Args:
            catalog: Product snapshot in presentation order
            allowed_category_ids: Category ids sellable in the current slot
            search_query: Free text typed by the user
            category_selection: One category id or several; blank ids are ignored

        Returns:
            The surviving products, in catalog order
        """
        allowed = frozenset(allowed_category_ids or ())

        candidates = self._availability_gate(catalog)
        candidates = self._time_slot_gate(candidates, allowed)

        query = (search_query or "").strip()
        if query:
            candidates = self._search(candidates, query)

        selection = normalize_selection(category_selection)
        if selection:
            candidates = self._category_selection(candidates, selection)

        logger.debug(
            "Catalog filter: %d product(s) for query=%r selection=%s",
            len(candidates),
            query,
            sorted(selection),
        )
        return candidates

    def _availability_gate(self, catalog: Iterable[Product]) -> List[Product]:
        return [product for product in catalog if product.available is not False]

    def _time_slot_gate(self, products: List[Product], allowed: frozenset) -> List[Product]:
        """
        Keep products with a category in ``allowed``.

        An empty ``allowed`` set means no slot is active and empties the result.
        """
        if not allowed:
            return []

        return [
            product for product in products
            if _category_ids(product) & allowed
        ]

    def _search(self, products: List[Product], query: str) -> List[Product]:
        needle = query.lower()
        return [product for product in products if _matches_text(product, needle)]

    def _category_selection(self, products: List[Product], selection: frozenset) -> List[Product]:
        return [
            product for product in products
            if _category_ids(product) & selection
        ]


def normalize_selection(category_selection: str | Iterable[str] | None) -> frozenset:
    """
    Turn a single id or a collection of ids into a set, dropping blank ids.
    """
    if not category_selection:
        return frozenset()

    if isinstance(category_selection, str):
        category_selection = [category_selection]

    return frozenset(
        category_id.strip()
        for category_id in category_selection
        if category_id and category_id.strip()
    )


def _category_ids(product: Product) -> frozenset:
    return frozenset(category.id for category in (product.categories or ()))


def _matches_text(product: Product, needle: str) -> bool:
    fields = [product.name or "", product.description or ""]
    fields.extend(tag for tag in (product.tags or ()) if tag)
    fields.extend(category.name for category in (product.categories or ()) if category.name)

    return any(needle in value.lower() for value in fields)


@dataclass(frozen=True)
class ProductPage:
    """
    One batch of a filtered result, for incremental (infinite-scroll) display.
    """
    items: List[Product]
    page: int
    per_page: int
    total: int

    @property
    def has_more(self) -> bool:
        """Whether products remain after this page."""
        return self.page * self.per_page < self.total


def paginate(products: Sequence[Product], page: int = 1, per_page: int = DEFAULT_PAGE_SIZE) -> ProductPage:
    """
    Slice page ``page`` (1-based) out of an already filtered result.

    Raises:
        ValueError: If ``page`` or ``per_page`` is smaller than 1
    """
    if page < 1:
        raise ValueError(f"page must be 1 or greater, got {page}")
    if per_page < 1:
        raise ValueError(f"per_page must be 1 or greater, got {per_page}")

    start = (page - 1) * per_page
    items = list(products[start:start + per_page])

    return ProductPage(items=items, page=page, per_page=per_page, total=len(products))
