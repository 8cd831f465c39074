"""
Domain layer - Pure business logic without external dependencies.
"""

from .catalog_filter import CatalogFilterPipeline, ProductPage, paginate
from .category_resolver import CategoryAvailabilityResolver
from .models import CategoryReference, Product, TimeSlotRule, parse_time_of_day
from .slot_resolver import TimeSlotResolver

__all__ = [
    "CatalogFilterPipeline",
    "CategoryAvailabilityResolver",
    "CategoryReference",
    "Product",
    "ProductPage",
    "TimeSlotResolver",
    "TimeSlotRule",
    "paginate",
    "parse_time_of_day",
]
