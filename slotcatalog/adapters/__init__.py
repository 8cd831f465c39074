"""
Adapters layer - Time rule and catalog sources.
"""

from .documents import parse_products, parse_time_rules
from .file_store import FileProductRepository, FileTimeRuleStore
from .http_store import DocumentApiClient, HttpProductRepository, HttpTimeRuleStore

__all__ = [
    "DocumentApiClient",
    "FileProductRepository",
    "FileTimeRuleStore",
    "HttpProductRepository",
    "HttpTimeRuleStore",
    "parse_products",
    "parse_time_rules",
]
