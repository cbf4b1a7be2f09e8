# storefront/services/product_filters.py
"""
Czyste funkcje: query string (niezaufane stringi) -> ProductFilter,
whitelistowany sort i metadane paginacji. Bez dostepu do bazy.
"""
import math
import re
from typing import Any, Dict, List, Mapping, Optional

from storefront.domain.schemas import ProductFilter, ProductScope
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# offset (page - 1) * limit musi sie zmiescic w BIGINT
MAX_PAGE = 10**9

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")

DEFAULT_SORT = "-createdAt"

# nazwa w API -> kolumna ProductModel
SORT_FIELDS = {
    "name": "name",
    "price": "price",
    "rating": "rating",
    "createdAt": "created_at",
    "discount": "discount",
    "countInStock": "count_in_stock",
    "brand": "brand",
}

FILTER_PARAMS = (
    "brand",
    "rating",
    "inStock",
    "discount",
    "productRam",
    "size",
    "productWeight",
    "location",
)


def _parse_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _parse_int(value: Any) -> Optional[int]:
    """Jak parseInt: wiodace cyfry, reszta ignorowana ('2.5' -> 2, 'abc' -> None)."""
    if value is None:
        return None
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else None


def split_csv(value: Optional[str]) -> List[str]:
    """'8GB, 16GB,,8GB' -> ['8GB', '16GB']"""
    if not value:
        return []
    result = []
    for part in value.split(","):
        part = part.strip()
        if part and part not in result:
            result.append(part)
    return result


def build_product_filter(scope: ProductScope, params: Mapping[str, Any]) -> ProductFilter:
    product_filter = ProductFilter(scope=scope)

    # zakres cen
    min_price = _parse_float(params.get("minPrice"))
    max_price = _parse_float(params.get("maxPrice"))
    if min_price is not None and min_price < 0:
        min_price = None
    if max_price is not None and max_price < 0:
        max_price = None

    if min_price is not None and max_price is not None and min_price > max_price:
        logger.warning(f"minPrice {min_price} > maxPrice {max_price}, swapping")
        min_price, max_price = max_price, min_price

    product_filter.min_price = min_price
    product_filter.max_price = max_price

    brand = params.get("brand")
    if brand and brand.strip():
        product_filter.brand = brand.strip()

    rating = _parse_float(params.get("rating"))
    if rating is not None and 0 <= rating <= 5:
        product_filter.min_rating = rating

    in_stock = params.get("inStock")
    if in_stock is not None:
        product_filter.in_stock = in_stock == "true"

    discount = _parse_float(params.get("discount"))
    if discount is not None and discount >= 0:
        product_filter.min_discount = discount

    product_filter.ram = split_csv(params.get("productRam"))
    product_filter.size = split_csv(params.get("size"))
    product_filter.weight = split_csv(params.get("productWeight"))

    location = params.get("location")
    if location and location.strip():
        product_filter.location = location.strip()

    return product_filter


def build_sort(sort_param: Any = DEFAULT_SORT) -> Dict[str, int]:
    """
    '-price,name' -> {'price': -1, 'name': 1}.
    Pola spoza whitelisty sa pomijane, pusty wynik -> createdAt malejaco.
    """
    if not isinstance(sort_param, str):
        logger.warning("Invalid sort parameter type, using default")
        return {"createdAt": -1}

    sort = {}
    for field in sort_param.split(","):
        field = field.strip()
        if not field:
            continue

        descending = field.startswith("-")
        name = field[1:] if descending else field

        if name not in SORT_FIELDS:
            logger.warning(f"Invalid sort field: {name}")
            continue

        sort[name] = -1 if descending else 1

    if not sort:
        sort["createdAt"] = -1

    return sort


def parse_pagination(page: Any = None, limit: Any = None, default_limit: int = DEFAULT_LIMIT):
    # 0 i smieci traktujemy jak brak parametru
    page_num = _parse_int(page) or DEFAULT_PAGE
    limit_num = _parse_int(limit) or default_limit

    return max(1, min(MAX_PAGE, page_num)), max(1, min(MAX_LIMIT, limit_num))


def build_pagination(page: int, limit: int, total: int) -> dict:
    total_pages = math.ceil(total / limit)

    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalProducts": total,
        "limit": limit,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
        "nextPage": page + 1 if page < total_pages else None,
        "prevPage": page - 1 if page > 1 else None,
    }


def build_applied_filters(params: Mapping[str, Any], **extra) -> dict:
    applied = dict(extra)
    for name in FILTER_PARAMS:
        value = params.get(name)
        applied[name] = value if value not in (None, "") else None

    min_price = params.get("minPrice")
    max_price = params.get("maxPrice")
    applied["priceRange"] = (
        {"min": min_price, "max": max_price} if (min_price or max_price) else None
    )
    return applied
