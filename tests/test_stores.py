"""
Tests for the file and HTTP backed rule stores and product repositories.
"""

import asyncio
import json

import pytest
import requests

from slotcatalog.adapters import http_store
from slotcatalog.adapters.file_store import FileProductRepository, FileTimeRuleStore
from slotcatalog.adapters.http_store import DocumentApiClient, HttpProductRepository, HttpTimeRuleStore
from slotcatalog.domain.exceptions import RepositoryUnavailableError

RULES_YAML = """
morning:
  timeSlotName: Morning
  startTime: "06:00"
  endTime: "12:00"
  allowedCategories:
    - {id: veg, name: Vegetables}
"""

PRODUCTS = [
    {"id": "p1", "name": "Tomato", "available": True, "categories": [{"id": "veg", "name": "Vegetables"}]},
    {"id": "p2", "name": "Chips", "available": True, "categories": [{"id": "snacks", "name": "Snacks"}]},
]


class TestFileStores:
    """Tests for the file adapters."""

    def test_reads_yaml_rules(self, tmp_path):
        path = tmp_path / "time_rules.yaml"
        path.write_text(RULES_YAML, encoding="utf-8")

        rules = asyncio.run(FileTimeRuleStore(path).get_time_rules())

        assert [rule.slot_id for rule in rules] == ["morning"]
        assert rules[0].start_time == "06:00"

    def test_missing_rules_file_is_absent_configuration(self, tmp_path):
        rules = asyncio.run(FileTimeRuleStore(tmp_path / "missing.yaml").get_time_rules())

        assert rules is None

    def test_unreadable_rules_file_raises(self, tmp_path):
        path = tmp_path / "time_rules.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(RepositoryUnavailableError):
            asyncio.run(FileTimeRuleStore(path).get_time_rules())

    def test_reads_json_catalog(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps({"products": PRODUCTS}), encoding="utf-8")

        products = asyncio.run(FileProductRepository(path).get_available_products())

        assert [product.id for product in products] == ["p1", "p2"]

    def test_missing_catalog_raises(self, tmp_path):
        with pytest.raises(RepositoryUnavailableError):
            asyncio.run(FileProductRepository(tmp_path / "missing.json").get_available_products())


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


@pytest.fixture
def fake_get(monkeypatch):
    """Route requests.get to canned responses keyed by URL."""
    responses = {}
    calls = []

    def _get(url, headers=None, timeout=None):
        calls.append({"url": url, "headers": headers, "timeout": timeout})
        response = responses.get(url)
        if isinstance(response, Exception):
            raise response
        return response or FakeResponse(404)

    monkeypatch.setattr(http_store.requests, "get", _get)
    return responses, calls


class TestHttpStores:
    """Tests for the HTTP adapters."""

    def test_fetches_rules_and_products(self, fake_get):
        responses, calls = fake_get
        responses["https://api.test/v1/settings/timeRules"] = FakeResponse(
            payload={"morning": {"startTime": "06:00", "endTime": "12:00"}}
        )
        responses["https://api.test/v1/products"] = FakeResponse(payload={"products": PRODUCTS})
        client = DocumentApiClient("https://api.test/v1/", timeout=3, api_key="secret")

        rules = asyncio.run(HttpTimeRuleStore(client).get_time_rules())
        products = asyncio.run(HttpProductRepository(client).get_available_products())

        assert [rule.slot_id for rule in rules] == ["morning"]
        assert [product.id for product in products] == ["p1", "p2"]
        assert calls[0]["timeout"] == 3
        assert calls[0]["headers"]["Authorization"] == "Bearer secret"

    def test_missing_rules_document_is_absent_configuration(self, fake_get):
        client = DocumentApiClient("https://api.test/v1")

        assert asyncio.run(HttpTimeRuleStore(client).get_time_rules()) is None

    def test_server_error_raises(self, fake_get):
        responses, _ = fake_get
        responses["https://api.test/v1/products"] = FakeResponse(500)
        client = DocumentApiClient("https://api.test/v1")

        with pytest.raises(RepositoryUnavailableError):
            asyncio.run(HttpProductRepository(client).get_available_products())

    def test_connection_error_raises(self, fake_get):
        responses, _ = fake_get
        responses["https://api.test/v1/settings/timeRules"] = requests.exceptions.ConnectionError("down")
        client = DocumentApiClient("https://api.test/v1")

        with pytest.raises(RepositoryUnavailableError):
            asyncio.run(HttpTimeRuleStore(client).get_time_rules())
