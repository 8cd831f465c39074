"""
Domain models for time-slot rules and catalog products.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Iterable, Tuple

from .exceptions import MalformedRuleError

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_of_day(value: str, *, slot_id: str = "", field_name: str = "time") -> time:
    """
    Parse an ``HH:MM`` string into a minute-granular ``time``.

    Args:
        value: Time-of-day string such as ``"06:00"`` or ``"6:00"``
        slot_id: Slot the value belongs to, used in the error message
        field_name: Field the value belongs to, used in the error message

    Returns:
        ``datetime.time`` with seconds set to zero

    Raises:
        MalformedRuleError: If the value is not a valid time of day
    """
    if not isinstance(value, str):
        raise MalformedRuleError(slot_id, field_name, value)

    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise MalformedRuleError(slot_id, field_name, value)

    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise MalformedRuleError(slot_id, field_name, value)

    return time(hour=hour, minute=minute)


def to_time_of_day(now) -> time:
    """
    Normalize ``now`` into a minute-granular ``time``.

    Accepts a ``time``, a ``datetime`` (pendulum ``DateTime`` included, its
    wall-clock time is used as-is) or an ``HH:MM`` string.
    """
    if isinstance(now, datetime):
        now = now.time()
    elif isinstance(now, str):
        return parse_time_of_day(now, field_name="now")

    if not isinstance(now, time):
        raise TypeError(f"Expected a time, datetime or HH:MM string, got {type(now).__name__}")

    return time(hour=now.hour, minute=now.minute)


@dataclass(frozen=True)
class CategoryReference:
    """
    A category as embedded in rules and products.
    """
    id: str
    name: str = ""


def unique_categories(categories: Iterable[CategoryReference]) -> Tuple[CategoryReference, ...]:
    """Deduplicate categories by id, keeping the first occurrence and its position."""
    seen: set[str] = set()
    unique = []
    for category in categories:
        if category.id in seen:
            continue
        seen.add(category.id)
        unique.append(category)
    return tuple(unique)


@dataclass(frozen=True)
class TimeSlotRule:
    """
    A daily time window during which a set of categories is sellable.

    ``start_time`` and ``end_time`` stay in their configured ``HH:MM`` form;
    they are parsed when the rule is evaluated so that one bad entry only
    disables itself.
    """
    slot_id: str
    display_name: str
    start_time: str
    end_time: str
    is_active: bool = True
    allowed_categories: Tuple[CategoryReference, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "allowed_categories", unique_categories(self.allowed_categories or ())
        )

    def window(self) -> Tuple[time, time]:
        """
        Return the parsed ``(start, end)`` window.

        Raises:
            MalformedRuleError: If either bound is not a valid ``HH:MM`` value
        """
        start = parse_time_of_day(self.start_time, slot_id=self.slot_id, field_name="startTime")
        end = parse_time_of_day(self.end_time, slot_id=self.slot_id, field_name="endTime")
        return start, end

    def contains(self, now: time) -> bool:
        """
        Check whether ``now`` falls inside ``[start, end)``.

        Windows where start is after end wrap around midnight. A zero-width
        window (start equal to end) contains nothing.
        """
        start, end = self.window()

        if start < end:
            return start <= now < end

        if start > end:
            return now >= start or now < end

        return False

    def category_ids(self) -> frozenset:
        """Return the ids of the allowed categories."""
        return frozenset(category.id for category in self.allowed_categories)


@dataclass(frozen=True)
class Product:
    """
    The subset of a catalog product relevant to filtering.

    ``available`` defaults to True, so a product built in code is sellable
    unless stated otherwise. Stored documents without the flag are mapped to
    False when they are loaded (see ``adapters.documents.ProductDocument``).
    """
    id: str
    name: str = ""
    description: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)
    categories: Tuple[CategoryReference, ...] = field(default_factory=tuple)
    available: bool = True

    def category_ids(self) -> frozenset:
        """Return the ids of the categories this product belongs to."""
        return frozenset(category.id for category in self.categories)
