"""
Application services for the time-slot gated catalog.

The service coordinates fetching the rule and catalog snapshots via adapter
protocols and delegates slot resolution and filtering to the domain layer.
This keeps request handlers and the CLI thin and lets both sources be stubbed
in tests.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Iterable, List, Protocol

import pendulum

from ..domain.catalog_filter import CatalogFilterPipeline
from ..domain.category_resolver import CategoryAvailabilityResolver
from ..domain.models import CategoryReference, Product, TimeSlotRule
from ..domain.slot_resolver import TimeSlotResolver

logger = logging.getLogger(__name__)


class TimeRuleStoreProtocol(Protocol):
    """Protocol describing the time rule source needed by the service."""

    async def get_time_rules(self) -> List[TimeSlotRule] | None:
        """Return the rule snapshot, or None if nothing is configured."""


class ProductRepositoryProtocol(Protocol):
    """Protocol describing the catalog source needed by the service."""

    async def get_available_products(self) -> List[Product]:
        """Return the full catalog snapshot."""


class CatalogAvailabilityService:
    """
    Answers "what can be sold right now" and "which products match".

    Each call reads fresh snapshots and evaluates them against one instant;
    nothing is cached between calls. Source failures propagate unchanged.
    """

    def __init__(
        self,
        rule_store: TimeRuleStoreProtocol,
        product_repository: ProductRepositoryProtocol,
        timezone: str = "UTC",
        slot_resolver: TimeSlotResolver | None = None,
        category_resolver: CategoryAvailabilityResolver | None = None,
        filter_pipeline: CatalogFilterPipeline | None = None,
    ) -> None:
        self._rule_store = rule_store
        self._product_repository = product_repository
        self._timezone = timezone
        self._slot_resolver = slot_resolver or TimeSlotResolver()
        self._category_resolver = category_resolver or CategoryAvailabilityResolver()
        self._filter_pipeline = filter_pipeline or CatalogFilterPipeline()

    def now(self):
        """Current wall-clock time in the storefront timezone."""
        return pendulum.now(self._timezone)

    async def get_time_rules(self) -> List[TimeSlotRule]:
        """Return the configured rules; an absent configuration gives an empty list."""
        return list(await self._rule_store.get_time_rules() or [])

    async def matching_slots(self, now=None) -> List[TimeSlotRule]:
        """
        Return every active rule whose window contains ``now``, first match first.

        More than one rule means the configured windows overlap.
        """
        rules = await self.get_time_rules()
        return self._slot_resolver.matching_rules(rules, self._at(now))

    async def current_slot(self, now=None) -> TimeSlotRule | None:
        """
        Return the rule of the slot active at ``now`` (defaults to the current time).
        """
        rules = await self._rule_store.get_time_rules()
        return self._slot_resolver.resolve_current_rule(rules, self._at(now))

    async def get_available_categories(self, now=None) -> List[CategoryReference]:
        """
        Return the categories sellable at ``now`` (defaults to the current time).
        """
        rules = await self._rule_store.get_time_rules()
        return self._allowed_categories(rules, self._at(now))

    async def get_filtered_products(
        self,
        query: str | None = None,
        category: str | Iterable[str] | None = None,
        now=None,
    ) -> List[Product]:
        """
        Return the products to show for a search and category choice.

        Args:
            query: Free-text search
            category: One selected category id or several
            now: Instant to evaluate the time rules at (defaults to the current time)
        """
        at = self._at(now)

        rules, catalog = await asyncio.gather(
            self._rule_store.get_time_rules(),
            self._product_repository.get_available_products(),
        )

        allowed = self._allowed_categories(rules, at)

        return self.filter_products(
            catalog=catalog,
            allowed_categories=allowed,
            query=query,
            category=category,
        )

    def filter_products(
        self,
        *,
        catalog: Iterable[Product],
        allowed_categories: Iterable[CategoryReference],
        query: str | None,
        category: str | Iterable[str] | None,
    ) -> List[Product]:
        """Run the filter pipeline over an already fetched catalog."""
        allowed_ids = {c.id for c in allowed_categories}
        return self._filter_pipeline.filter(
            catalog,
            allowed_ids,
            search_query=query,
            category_selection=category,
        )

    def _allowed_categories(self, rules, at) -> List[CategoryReference]:
        if not rules:
            logger.info("No time rules configured, nothing is available")
            return []

        rule = self._slot_resolver.resolve_current_rule(rules, at)
        return self._category_resolver.categories_of(rule)

    def _at(self, now):
        """
        Pin the instant to evaluate at.

        Aware datetimes are converted to the storefront timezone so the rule
        windows are compared against local wall-clock time. Naive datetimes
        and plain times of day are taken as local already.
        """
        if now is None:
            return self.now()
        if isinstance(now, datetime) and now.tzinfo is not None:
            return pendulum.instance(now).in_timezone(self._timezone)
        return now
