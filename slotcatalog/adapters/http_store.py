"""
HTTP client for the storefront's document API.
"""

import asyncio
import logging
from typing import Any, List

import requests

from ..domain.exceptions import RepositoryUnavailableError
from ..domain.models import Product, TimeSlotRule
from .documents import parse_products, parse_time_rules

logger = logging.getLogger(__name__)


class DocumentApiClient:
    """
    Thin wrapper around the document API endpoints.

    Requests are blocking; the async stores below run them in a worker
    thread so callers can await them and apply their own cancellation.
    """

    def __init__(self, base_url: str, timeout: float = 10.0, api_key: str | None = None):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the document API
            timeout: Per-request timeout in seconds
            api_key: Optional key sent as a bearer token
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"

    def get_document(self, path: str, missing_ok: bool = False) -> Any:
        """
        Fetch one JSON document.

        Args:
            path: Path below ``base_url``
            missing_ok: Return None instead of failing on HTTP 404

        Raises:
            RepositoryUnavailableError: If the request fails
        """
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
            if missing_ok and response.status_code == 404:
                logger.info("Document not found: %s", url)
                return None
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            logger.error("Request to %s failed: %s", url, e)
            raise RepositoryUnavailableError(f"Failed to fetch {url}: {e}") from e

        except ValueError as e:
            logger.error("Invalid JSON from %s: %s", url, e)
            raise RepositoryUnavailableError(f"Invalid JSON from {url}: {e}") from e


class HttpTimeRuleStore:
    """Time rules read from ``GET {base_url}/settings/timeRules``."""

    RULES_PATH = "settings/timeRules"

    def __init__(self, client: DocumentApiClient):
        self._client = client

    async def get_time_rules(self) -> List[TimeSlotRule] | None:
        document = await asyncio.to_thread(
            self._client.get_document, self.RULES_PATH, True
        )
        return parse_time_rules(_unwrap(document, "timeRules"))


class HttpProductRepository:
    """Product catalog read from ``GET {base_url}/products``."""

    PRODUCTS_PATH = "products"

    def __init__(self, client: DocumentApiClient):
        self._client = client

    async def get_available_products(self) -> List[Product]:
        document = await asyncio.to_thread(self._client.get_document, self.PRODUCTS_PATH)
        return parse_products(_unwrap(document, "products"))


def _unwrap(document: Any, key: str) -> Any:
    """
    Unwrap ``{"<key>": ...}`` envelopes some API deployments add.
    """
    if isinstance(document, dict) and set(document.keys()) == {key}:
        return document[key]
    return document
