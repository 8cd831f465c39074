"""
File-backed time rule store and product repository.

Reads the same document shapes the storefront keeps in its document database
from local JSON or YAML exports. Useful for development, demos and tests.
"""

import json
import logging
from pathlib import Path
from typing import Any, List

import yaml

from ..domain.exceptions import RepositoryUnavailableError
from ..domain.models import Product, TimeSlotRule
from .documents import parse_products, parse_time_rules

logger = logging.getLogger(__name__)


def _load_document(path: Path) -> Any:
    """
    Load a JSON or YAML document.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the content is not valid JSON/YAML
    """
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


class FileTimeRuleStore:
    """
    Time rules read from a local file.

    A missing file means no rules are configured, which is a valid state
    (nothing is sellable) rather than an error.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    async def get_time_rules(self) -> List[TimeSlotRule] | None:
        """
        Load the time rules snapshot.

        Returns:
            Rules in stored order, or None if no configuration exists

        Raises:
            RepositoryUnavailableError: If the file exists but cannot be read
        """
        if not self.path.exists():
            logger.info("No time rules found at %s", self.path)
            return None

        try:
            document = _load_document(self.path)
        except (OSError, ValueError) as e:
            logger.error("Failed to read time rules from %s: %s", self.path, e)
            raise RepositoryUnavailableError(f"Failed to read time rules: {e}") from e

        rules = parse_time_rules(document)
        logger.debug("Loaded %d time rule(s) from %s", len(rules or []), self.path)
        return rules


class FileProductRepository:
    """
    Product catalog read from a local file.

    Unlike the rule store, a missing catalog file is a read failure.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    async def get_available_products(self) -> List[Product]:
        """
        Load the catalog snapshot.

        Raises:
            RepositoryUnavailableError: If the file is missing or unreadable
        """
        try:
            document = _load_document(self.path)
        except (OSError, ValueError) as e:
            logger.error("Failed to read catalog from %s: %s", self.path, e)
            raise RepositoryUnavailableError(f"Failed to read product catalog: {e}") from e

        if isinstance(document, dict) and "products" in document:
            document = document["products"]

        products = parse_products(document)
        logger.debug("Loaded %d product(s) from %s", len(products), self.path)
        return products
