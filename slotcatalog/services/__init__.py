"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .catalog_service import (
    CatalogAvailabilityService,
    ProductRepositoryProtocol,
    TimeRuleStoreProtocol,
)
from .catalog_view import CatalogView

__all__ = [
    "CatalogAvailabilityService",
    "CatalogView",
    "ProductRepositoryProtocol",
    "TimeRuleStoreProtocol",
]
