# storefront/services/product_service.py
import uuid
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from storefront.data.models.product import OPTION_RAM, OPTION_SIZE, OPTION_WEIGHT
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import ProductOut, ProductScope
from storefront.repos.product_repo import ProductRepo
from storefront.services.facet_cache import FacetCache
from storefront.services.product_filters import (
    build_applied_filters,
    build_pagination,
    build_product_filter,
    build_sort,
    parse_pagination,
)
from storefront.utils.ids import parse_uuid
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

FEATURED_DEFAULT_LIMIT = 10
FEATURED_MAX_LIMIT = 50

# parametr sciezki -> pole ProductScope
SCOPE_FIELDS = {
    "catId": "cat_id",
    "subCatId": "sub_cat_id",
    "thirdSubCatId": "third_sub_cat_id",
}


def empty_facets() -> dict:
    return {
        "brands": [],
        "priceRange": {"minPrice": 0, "maxPrice": 0},
        "ramOptions": [],
        "sizeOptions": [],
        "weightOptions": [],
    }


class ProductService:
    """
    Zapytania o produkty: filtrowanie, sort, paginacja i facety.
    Facety zawsze na scope (kategoria), nie na zawężeniach usera.
    """

    def __init__(self, db: Session, facet_cache: Optional[FacetCache] = None):
        self.repo = ProductRepo(db)
        self.facet_cache = facet_cache or FacetCache(client=None)

    def get_product(self, product_id: str) -> Dict[str, Any]:
        pid = parse_uuid(product_id, "Invalid product ID format")
        product = self.repo.get_product(pid)
        if not product:
            raise NotFoundError("Product not found")
        return ProductOut.model_validate(product).dump()

    def get_featured(self, limit: Any = None) -> list:
        limit_num = FEATURED_DEFAULT_LIMIT
        if limit is not None:
            try:
                limit_num = int(limit)
            except (TypeError, ValueError):
                limit_num = 0
        if limit_num < 1 or limit_num > FEATURED_MAX_LIMIT:
            raise ValidationError(f"Invalid limit. Must be between 1 and {FEATURED_MAX_LIMIT}")

        return [ProductOut.model_validate(p).dump() for p in self.repo.get_featured(limit_num)]

    def available_filters(self, scope: ProductScope) -> dict:
        return self.facet_cache.get_or_compute(scope, lambda: self._compute_facets(scope))

    def _compute_facets(self, scope: ProductScope) -> dict:
        facets = empty_facets()
        facets["brands"] = self.repo.distinct_brands(scope)
        facets["priceRange"] = self.repo.price_range(scope) or facets["priceRange"]
        facets["ramOptions"] = self.repo.distinct_option_values(OPTION_RAM, scope)
        facets["sizeOptions"] = self.repo.distinct_option_values(OPTION_SIZE, scope)
        facets["weightOptions"] = self.repo.distinct_option_values(OPTION_WEIGHT, scope)
        return facets

    def _query(self, scope: ProductScope, params: Mapping[str, Any]):
        page, limit = parse_pagination(params.get("page"), params.get("limit"))
        product_filter = build_product_filter(scope, params)
        sort = build_sort(params.get("sort", "-createdAt"))

        total = self.repo.count_products(product_filter)
        products = self.repo.find_products(product_filter, sort, (page - 1) * limit, limit)

        return (
            [ProductOut.model_validate(p).dump() for p in products],
            build_pagination(page, limit, total),
        )

    def list_products(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        search = params.get("search") or ""
        category = params.get("category")
        scope = ProductScope(search=search)

        # niepoprawny category id jest ignorowany, nie odrzucany
        if category:
            try:
                scope.category_id = uuid.UUID(category)
            except ValueError:
                logger.info(f"Ignoring malformed category filter: {category}")

        for param, field in SCOPE_FIELDS.items():
            if params.get(param):
                setattr(scope, field, params[param])

        products, pagination = self._query(scope, params)

        applied = {
            "search": search or None,
            "category": category or None,
            "catId": params.get("catId") or None,
            "subCatId": params.get("subCatId") or None,
            "thirdSubCatId": params.get("thirdSubCatId") or None,
        }
        applied.update(build_applied_filters(params))

        return {
            "data": products,
            "pagination": pagination,
            "appliedFilters": applied,
            "availableFilters": self.available_filters(scope),
        }

    def list_by_field(self, field: str, value: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        if field not in SCOPE_FIELDS:
            raise ValueError(f"Unsupported scope field: {field}")
        if not value or not value.strip():
            raise ValidationError("Category ID is required")

        value = value.strip()
        scope = ProductScope(**{SCOPE_FIELDS[field]: value})
        products, pagination = self._query(scope, params)

        if pagination["totalProducts"] == 0 and pagination["currentPage"] == 1:
            raise NotFoundError(f"No products found for {field}: {value}")

        return {
            "data": products,
            "pagination": pagination,
            "appliedFilters": build_applied_filters(params, **{field: value}),
            "availableFilters": self.available_filters(scope),
        }

    def list_by_category(self, category_id: str, params: Mapping[str, Any]) -> Dict[str, Any]:
        cid = parse_uuid(category_id, "Invalid category ID format")
        products, pagination = self._query(ProductScope(category_id=cid), params)
        return {"data": products, "pagination": pagination}
