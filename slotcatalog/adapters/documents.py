"""
Normalization of storefront documents into domain models.

Time rules and products are stored as loosely shaped documents (camelCase
keys, optional fields). They are validated here, at the boundary, so the
domain layer only ever sees ``TimeSlotRule`` and ``Product`` instances.
"""

import logging
from typing import Any, Iterable, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.models import CategoryReference, Product, TimeSlotRule

logger = logging.getLogger(__name__)


class CategoryDocument(BaseModel):
    """Category reference as embedded in rule and product documents."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        """Accept numeric ids and reject blank ones."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and not value.strip():
            raise ValueError("category id must not be blank")
        return value

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_domain(self) -> CategoryReference:
        return CategoryReference(id=self.id, name=self.name)


def _categories_from(value: Any) -> List[CategoryDocument]:
    """Validate category entries one by one, dropping those that are not usable references."""
    if not value:
        return []
    if not isinstance(value, (list, tuple)):
        logger.warning("Ignoring malformed category list: %r", value)
        return []

    categories = []
    for entry in value:
        if isinstance(entry, CategoryDocument):
            categories.append(entry)
            continue
        if not isinstance(entry, Mapping):
            logger.warning("Ignoring malformed category reference: %r", entry)
            continue
        try:
            categories.append(CategoryDocument.model_validate(entry))
        except ValidationError as e:
            logger.warning("Ignoring malformed category reference %r: %s", entry, e)
    return categories


class TimeRuleDocument(BaseModel):
    """
    A time rule as stored in the ``settings/timeRules`` document.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    slot_id: str = Field(default="", alias="slotId")
    time_slot_name: str = Field(default="", alias="timeSlotName")
    start_time: str = Field(default="", alias="startTime")
    end_time: str = Field(default="", alias="endTime")
    is_active: bool = Field(default=False, alias="isActive")
    allowed_categories: List[CategoryDocument] = Field(default_factory=list, alias="allowedCategories")

    @field_validator("start_time", "end_time", "time_slot_name", "slot_id", mode="before")
    @classmethod
    def stringify(cls, value: Any) -> Any:
        """Keep time values as text; they are parsed when the rule is evaluated."""
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("is_active", mode="before")
    @classmethod
    def default_inactive(cls, value: Any) -> Any:
        """Rules without an explicit flag are switched off."""
        return False if value is None else value

    @field_validator("allowed_categories", mode="before")
    @classmethod
    def drop_malformed_categories(cls, value: Any) -> Any:
        return _categories_from(value)

    def to_domain(self, slot_id: str) -> TimeSlotRule:
        return TimeSlotRule(
            slot_id=slot_id,
            display_name=self.time_slot_name or slot_id,
            start_time=self.start_time,
            end_time=self.end_time,
            is_active=self.is_active,
            allowed_categories=tuple(c.to_domain() for c in self.allowed_categories),
        )


class ProductDocument(BaseModel):
    """
    A product document, reduced to the fields used for filtering.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    categories: List[CategoryDocument] = Field(default_factory=list)
    available: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("name", "description", mode="before")
    @classmethod
    def default_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def keep_text_tags(cls, value: Any) -> Any:
        if not value:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, (list, tuple, set)):
            return []
        return [tag for tag in value if isinstance(tag, str) and tag]

    @field_validator("categories", mode="before")
    @classmethod
    def drop_malformed_categories(cls, value: Any) -> Any:
        return _categories_from(value)

    @field_validator("available", mode="before")
    @classmethod
    def default_unavailable(cls, value: Any) -> Any:
        return False if value is None else value

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            description=self.description,
            tags=tuple(self.tags),
            categories=tuple(c.to_domain() for c in self.categories),
            available=self.available,
        )


def parse_time_rules(document: Any) -> List[TimeSlotRule] | None:
    """
    Convert a time rules document into rules, in stored order.

    Args:
        document: Either a mapping of slot id to rule (the stored shape) or
            a list of rules carrying their own ``slotId``

    Returns:
        List of rules, or None if there is no configuration at all
    """
    if document is None:
        return None

    if isinstance(document, Mapping):
        entries = list(document.items())
    elif isinstance(document, list):
        entries = [
            (entry.get("slotId", "") if isinstance(entry, Mapping) else "", entry)
            for entry in document
        ]
    else:
        logger.warning("Time rules document has unexpected type %s", type(document).__name__)
        return None

    rules: List[TimeSlotRule] = []
    seen: set[str] = set()

    for slot_id, entry in entries:
        slot_id = str(slot_id).strip() if slot_id is not None else ""

        if not isinstance(entry, Mapping):
            logger.warning("Skipping time rule %r: not a mapping", slot_id)
            continue
        if not slot_id:
            logger.warning("Skipping time rule without slot id: %r", entry)
            continue
        if slot_id in seen:
            logger.warning("Skipping duplicate time rule %r", slot_id)
            continue

        try:
            rule = TimeRuleDocument.model_validate(entry).to_domain(slot_id)
        except ValidationError as e:
            logger.warning("Skipping time rule %r: %s", slot_id, e)
            continue

        seen.add(slot_id)
        rules.append(rule)

    return rules


def parse_products(documents: Any) -> List[Product]:
    """
    Convert product documents into products, skipping unusable ones.

    Args:
        documents: A list of product documents, or a mapping of document id
            to document (the id is taken from the key when the body lacks one)
    """
    if not documents:
        return []

    if isinstance(documents, Mapping):
        entries: Iterable = [
            ({"id": key, **value} if isinstance(value, Mapping) else value)
            for key, value in documents.items()
        ]
    else:
        entries = documents

    products: List[Product] = []

    for entry in entries:
        if not isinstance(entry, Mapping):
            logger.warning("Skipping product document: not a mapping (%r)", entry)
            continue

        try:
            products.append(ProductDocument.model_validate(entry).to_domain())
        except ValidationError as e:
            logger.warning("Skipping product %r: %s", entry.get("id"), e)

    return products
