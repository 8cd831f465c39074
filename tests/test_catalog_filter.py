"""
Tests for the catalog filter pipeline and pagination.
"""

import pytest

from slotcatalog.domain.catalog_filter import CatalogFilterPipeline, normalize_selection, paginate
from slotcatalog.domain.models import CategoryReference, Product

VEG = CategoryReference("veg", "Vegetables")
SNACKS = CategoryReference("snacks", "Snacks")
BAKERY = CategoryReference("bakery", "Bakery")


def _product(product_id, name, categories, available=True, description="", tags=()):
    return Product(
        id=product_id,
        name=name,
        description=description,
        tags=tuple(tags),
        categories=tuple(categories),
        available=available,
    )


@pytest.fixture
def catalog():
    return [
        _product("p1", "Tomato", [VEG], description="Fresh red tomatoes"),
        _product("p2", "Chips", [SNACKS], tags=["crunchy"]),
        _product("p3", "Butter Biscuits", [BAKERY, SNACKS]),
        _product("p4", "Almond Cookies", [BAKERY], tags=["Biscotti"]),
        _product("p5", "Spinach", [VEG], available=False),
        _product("p6", "Carrot", [VEG], description="Crunchy and sweet"),
    ]


def _ids(products):
    return [product.id for product in products]


class TestCatalogFilterPipeline:
    """Tests for CatalogFilterPipeline."""

    def test_time_slot_gate_and_availability(self, catalog):
        """Test that only available products of allowed categories survive."""
        result = CatalogFilterPipeline().filter(catalog, {"veg"})

        assert _ids(result) == ["p1", "p6"]

    @pytest.mark.parametrize("query", [None, "", "tomato"])
    def test_no_allowed_categories_means_no_products(self, catalog, query):
        """Test that an empty allowed set empties the result whatever the search."""
        assert CatalogFilterPipeline().filter(catalog, set(), search_query=query) == []

    def test_keeps_catalog_order(self, catalog):
        result = CatalogFilterPipeline().filter(catalog, {"veg", "snacks", "bakery"})

        assert _ids(result) == ["p1", "p2", "p3", "p4", "p6"]

    def test_search_is_case_insensitive_over_all_fields(self, catalog):
        """Test name, description, tag and category name matches."""
        pipeline = CatalogFilterPipeline()
        allowed = {"veg", "snacks", "bakery"}

        assert _ids(pipeline.filter(catalog, allowed, search_query="bisc")) == ["p3", "p4"]
        assert _ids(pipeline.filter(catalog, allowed, search_query="CRUNCHY")) == ["p2", "p6"]
        assert _ids(pipeline.filter(catalog, allowed, search_query="red tom")) == ["p1"]
        assert _ids(pipeline.filter(catalog, allowed, search_query="bakery")) == ["p3", "p4"]

    def test_blank_search_is_ignored(self, catalog):
        result = CatalogFilterPipeline().filter(catalog, {"veg"}, search_query="   ")

        assert _ids(result) == ["p1", "p6"]

    def test_search_uses_trimmed_query(self, catalog):
        result = CatalogFilterPipeline().filter(catalog, {"veg"}, search_query="  tomato ")

        assert _ids(result) == ["p1"]

    def test_category_selection_narrows(self, catalog):
        result = CatalogFilterPipeline().filter(
            catalog, {"veg", "snacks", "bakery"}, category_selection={"snacks"}
        )

        assert _ids(result) == ["p2", "p3"]

    def test_selection_cannot_exceed_allowed_categories(self, catalog):
        """Test that selecting a category outside the slot yields nothing."""
        result = CatalogFilterPipeline().filter(
            catalog, {"veg"}, search_query="chips", category_selection={"snacks"}
        )

        assert result == []

    def test_single_category_string_and_blank_entries(self, catalog):
        pipeline = CatalogFilterPipeline()
        allowed = {"veg", "snacks", "bakery"}

        assert _ids(pipeline.filter(catalog, allowed, category_selection="bakery")) == ["p3", "p4"]
        assert _ids(pipeline.filter(catalog, allowed, category_selection=["", " "])) == [
            "p1", "p2", "p3", "p4", "p6"
        ]

    def test_idempotent(self, catalog):
        """Test that identical inputs give identical output."""
        pipeline = CatalogFilterPipeline()
        args = (catalog, {"veg", "bakery"}, "o", {"veg", "bakery"})

        assert pipeline.filter(*args) == pipeline.filter(*args)

    def test_malformed_products_do_not_abort(self):
        """Test that products with missing collections are simply excluded."""
        broken = Product(id="x", name=None, description=None, tags=None, categories=None)
        good = _product("p1", "Tomato", [VEG])

        result = CatalogFilterPipeline().filter([broken, good], {"veg"}, search_query="tom")

        assert _ids(result) == ["p1"]

    def test_end_to_end_scenario(self):
        """Test the morning slot example: only the vegetable survives."""
        catalog = [
            _product("p1", "Tomato", [CategoryReference("veg")]),
            _product("p2", "Chips", [CategoryReference("snacks")]),
        ]
        pipeline = CatalogFilterPipeline()

        assert _ids(pipeline.filter(catalog, {"veg"})) == ["p1"]
        assert pipeline.filter(catalog, {"veg"}, search_query="chip") == []


class TestNormalizeSelection:

    def test_values(self):
        assert normalize_selection(None) == frozenset()
        assert normalize_selection("veg") == frozenset({"veg"})
        assert normalize_selection(["veg", " ", "fruit "]) == frozenset({"veg", "fruit"})


class TestPaginate:
    """Tests for paging a filtered result."""

    def test_pages(self):
        products = [_product(f"p{i}", f"Item {i}", [VEG]) for i in range(25)]

        first = paginate(products, 1, 10)
        last = paginate(products, 3, 10)

        assert _ids(first.items) == [f"p{i}" for i in range(10)]
        assert first.has_more
        assert first.total == 25
        assert _ids(last.items) == [f"p{i}" for i in range(20, 25)]
        assert not last.has_more

    def test_page_past_end_is_empty(self):
        page = paginate([_product("p1", "Tomato", [VEG])], 2, 10)

        assert page.items == []
        assert not page.has_more

    @pytest.mark.parametrize("page,per_page", [(0, 10), (1, 0)])
    def test_invalid_arguments(self, page, per_page):
        with pytest.raises(ValueError):
            paginate([], page, per_page)
