"""Unit tests for the query-string -> filter/sort/pagination helpers."""

import pytest

from storefront.domain.schemas import ProductScope
from storefront.services.product_filters import (
    MAX_PAGE,
    build_applied_filters,
    build_pagination,
    build_product_filter,
    build_sort,
    parse_pagination,
    split_csv,
)


class TestBuildProductFilter:
    def test_empty_params_only_scope(self):
        scope = ProductScope(cat_id="electronics")
        f = build_product_filter(scope, {})

        assert f.scope.cat_id == "electronics"
        assert f.min_price is None
        assert f.max_price is None
        assert f.brand is None
        assert f.in_stock is None
        assert f.ram == []

    def test_price_range_swapped_when_inverted(self):
        f = build_product_filter(ProductScope(), {"minPrice": "500", "maxPrice": "100"})

        assert f.min_price == 100
        assert f.max_price == 500

    def test_negative_and_garbage_prices_ignored(self):
        f = build_product_filter(ProductScope(), {"minPrice": "-5", "maxPrice": "abc"})

        assert f.min_price is None
        assert f.max_price is None

    def test_brand_trimmed(self):
        assert build_product_filter(ProductScope(), {"brand": "  Sony "}).brand == "Sony"
        assert build_product_filter(ProductScope(), {"brand": "   "}).brand is None

    @pytest.mark.parametrize("rating, expected", [("4", 4.0), ("0", 0.0), ("5.5", None), ("-1", None)])
    def test_rating_only_in_range(self, rating, expected):
        assert build_product_filter(ProductScope(), {"rating": rating}).min_rating == expected

    @pytest.mark.parametrize("value, expected", [("true", True), ("false", False), ("yes", False)])
    def test_in_stock(self, value, expected):
        assert build_product_filter(ProductScope(), {"inStock": value}).in_stock is expected

    def test_discount_non_negative(self):
        assert build_product_filter(ProductScope(), {"discount": "10"}).min_discount == 10
        assert build_product_filter(ProductScope(), {"discount": "-10"}).min_discount is None

    def test_array_facets_split_trimmed_deduped(self):
        f = build_product_filter(
            ProductScope(),
            {"productRam": " 8GB,16GB,,8GB ", "size": "M", "productWeight": ""},
        )

        assert f.ram == ["8GB", "16GB"]
        assert f.size == ["M"]
        assert f.weight == []

    def test_location_trimmed(self):
        assert build_product_filter(ProductScope(), {"location": " Warsaw "}).location == "Warsaw"


class TestBuildSort:
    def test_default(self):
        assert build_sort() == {"createdAt": -1}

    def test_multiple_fields_keep_order(self):
        sort = build_sort("-price,name")

        assert list(sort.items()) == [("price", -1), ("name", 1)]

    def test_unknown_fields_dropped(self):
        assert build_sort("password,-rating") == {"rating": -1}

    def test_all_unknown_falls_back(self):
        assert build_sort("foo,-bar") == {"createdAt": -1}

    def test_non_string_falls_back(self):
        assert build_sort(["price"]) == {"createdAt": -1}


class TestPagination:
    @pytest.mark.parametrize(
        "page, limit, expected",
        [
            (None, None, (1, 10)),
            ("2", "20", (2, 20)),
            ("0", "0", (1, 10)),
            ("-3", "500", (1, 100)),
            ("abc", "xyz", (1, 10)),
            ("3", "-5", (3, 1)),
            ("2", "2.5", (2, 2)),
            ("12abc", " 7 ", (12, 7)),
        ],
    )
    def test_parse_pagination(self, page, limit, expected):
        assert parse_pagination(page, limit) == expected

    def test_huge_page_is_capped(self):
        assert parse_pagination("99999999999999999999", "10") == (MAX_PAGE, 10)

    def test_custom_default_limit(self):
        assert parse_pagination(None, None, default_limit=20) == (1, 20)

    def test_build_pagination_middle_page(self):
        meta = build_pagination(2, 10, 25)

        assert meta == {
            "currentPage": 2,
            "totalPages": 3,
            "totalProducts": 25,
            "limit": 10,
            "hasNextPage": True,
            "hasPrevPage": True,
            "nextPage": 3,
            "prevPage": 1,
        }

    def test_build_pagination_empty(self):
        meta = build_pagination(1, 10, 0)

        assert meta["totalPages"] == 0
        assert meta["hasNextPage"] is False
        assert meta["nextPage"] is None
        assert meta["prevPage"] is None


def test_split_csv_empty():
    assert split_csv(None) == []
    assert split_csv(",,") == []


def test_applied_filters_echo():
    applied = build_applied_filters({"brand": "Sony", "minPrice": "10"}, catId="phones")

    assert applied["catId"] == "phones"
    assert applied["brand"] == "Sony"
    assert applied["priceRange"] == {"min": "10", "max": None}
    assert applied["rating"] is None
    assert applied["productRam"] is None
