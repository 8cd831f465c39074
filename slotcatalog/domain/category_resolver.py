"""
Lookup of the categories sellable in a time slot.
"""

import logging
from typing import Iterable, List

from .models import CategoryReference, TimeSlotRule
from .slot_resolver import find_rule

logger = logging.getLogger(__name__)


class CategoryAvailabilityResolver:
    """
    Maps an active slot to its allowed categories.

    Outside any configured window there is nothing to sell, so a missing or
    unknown slot yields an empty list.
    """

    def allowed_categories(
        self,
        rules: Iterable[TimeSlotRule] | None,
        slot_id: str | None
    ) -> List[CategoryReference]:
        """
        Return the allowed categories of ``slot_id`` in configured order.
        """
        rule = find_rule(rules, slot_id)

        if rule is None and slot_id is not None:
            logger.debug("Slot not found: %s", slot_id)

        return self.categories_of(rule)

    def categories_of(self, rule: TimeSlotRule | None) -> List[CategoryReference]:
        """Return the allowed categories of an already matched rule."""
        if rule is None:
            return []

        return list(rule.allowed_categories)

    def allowed_category_ids(
        self,
        rules: Iterable[TimeSlotRule] | None,
        slot_id: str | None
    ) -> frozenset:
        """Return the ids of the allowed categories of ``slot_id``."""
        return frozenset(
            category.id for category in self.allowed_categories(rules, slot_id)
        )
