"""
Resolution of the currently active time slot.

Pure domain logic: the caller supplies both the rule snapshot and the time of
day, nothing here reads the clock or performs I/O.
"""

import logging
from typing import Iterable, List

from .exceptions import MalformedRuleError
from .models import TimeSlotRule, to_time_of_day

logger = logging.getLogger(__name__)


class TimeSlotResolver:
    """
    Determines which single time slot is active at a given time of day.

    Algorithm:
    1. Skip rules that are switched off (``is_active`` is false)
    2. Skip rules whose window cannot be parsed, logging a warning
    3. Test ``now`` against each remaining ``[start, end)`` window,
       wrapping around midnight when start is after end
    4. Return the first match in iteration order
    """

    def resolve_current_slot(self, rules: Iterable[TimeSlotRule] | None, now) -> str | None:
        """
        Find the slot active at ``now``.

        Args:
            rules: Time rule snapshot, in configured order. ``None`` means
                no configuration exists.
            now: Time of day (``time``, ``datetime`` or ``HH:MM`` string)

        Returns:
            The ``slot_id`` of the first matching rule, or None if no slot is active
        """
        rule = self.resolve_current_rule(rules, now)
        return rule.slot_id if rule is not None else None

    def resolve_current_rule(self, rules: Iterable[TimeSlotRule] | None, now) -> TimeSlotRule | None:
        """
        Like ``resolve_current_slot`` but return the matched rule itself.

        Slot ids are not guaranteed unique within a snapshot, so callers that
        need the rule's categories should use this instead of looking the id
        up again.
        """
        for rule in self._iter_matches(rules, now):
            logger.debug("Active time slot: %s (%s)", rule.slot_id, rule.display_name)
            return rule

        logger.debug("No active time slot")
        return None

    def matching_slots(self, rules: Iterable[TimeSlotRule] | None, now) -> List[str]:
        """
        Return every slot whose window contains ``now``, in iteration order.

        More than one entry means the configured windows overlap; the first
        one is what ``resolve_current_slot`` picks.
        """
        return [rule.slot_id for rule in self.matching_rules(rules, now)]

    def matching_rules(self, rules: Iterable[TimeSlotRule] | None, now) -> List[TimeSlotRule]:
        """Return every rule whose window contains ``now``, in iteration order."""
        return list(self._iter_matches(rules, now))

    def _iter_matches(self, rules: Iterable[TimeSlotRule] | None, now):
        if not rules:
            return

        current = to_time_of_day(now)

        for rule in rules:
            if not rule.is_active:
                continue

            try:
                matched = rule.contains(current)
            except MalformedRuleError as e:
                logger.warning("Skipping time rule: %s", e)
                continue

            if matched:
                yield rule


def find_rule(rules: Iterable[TimeSlotRule] | None, slot_id: str | None) -> TimeSlotRule | None:
    """Look up a rule by slot id."""
    if not rules or slot_id is None:
        return None

    for rule in rules:
        if rule.slot_id == slot_id:
            return rule
    return None
