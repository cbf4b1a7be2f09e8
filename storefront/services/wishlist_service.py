# storefront/services/wishlist_service.py
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.product import ProductModel
from storefront.data.models.wishlist_item import WishlistItemModel
from storefront.domain.errors import DuplicateEntryError, NotFoundError, ValidationError
from storefront.domain.schemas import WishlistItemOut
from storefront.repos.product_repo import ProductRepo
from storefront.repos.wishlist_repo import SORT_FIELDS, WishlistRepo
from storefront.services.product_filters import parse_pagination
from storefront.utils.ids import parse_uuid
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

WISHLIST_DEFAULT_LIMIT = 20

# pola snapshotu porownywane przy sync
SNAPSHOT_FIELDS = ("product_title", "product_image", "price", "old_price", "discount", "rating")


def _money(value) -> Optional[Decimal]:
    return None if value is None else Decimal(str(value))


def product_snapshot(product: ProductModel, fallback_image: str = "") -> Dict[str, Any]:
    """Dane produktu kopiowane do pozycji wishlisty."""
    old_price = _money(product.old_price)
    return {
        "product_title": product.name,
        "product_image": product.first_image_url or fallback_image,
        "price": _money(product.price),
        # 0 traktujemy jak brak starej ceny
        "old_price": old_price if old_price else None,
        "discount": _money(product.discount or 0),
        "rating": _money(product.rating or 0),
    }


def serialize_item(item: WishlistItemModel) -> Dict[str, Any]:
    return WishlistItemOut.model_validate(item).dump()


class WishlistService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = WishlistRepo(db)
        self.products = ProductRepo(db)

    def _product_id(self, product_id: Any) -> UUID:
        if not product_id:
            raise ValidationError("Product ID is required")
        return parse_uuid(product_id, "Invalid product ID format")

    def add(self, user_id: UUID, product_id: Any) -> Dict[str, Any]:
        pid = self._product_id(product_id)

        product = self.products.get_product(pid)
        if not product:
            raise NotFoundError("Product not found")

        existing = self.repo.get_item(user_id, pid)
        if existing:
            raise DuplicateEntryError("Product already in your wishlist", data=serialize_item(existing))

        with transaction(self.db, conflict_message="Product already in your wishlist"):
            item = self.repo.add_item(
                WishlistItemModel(
                    user_id=user_id,
                    product_id=pid,
                    brand=product.brand or "",
                    **product_snapshot(product),
                )
            )

        logger.info(f"Produkt {pid} dodany do wishlisty uzytkownika {user_id}")
        return serialize_item(item)

    def list_items(
        self,
        user_id: UUID,
        page: Any = None,
        limit: Any = None,
        sort_by: str = "createdAt",
        order: str = "desc",
        brand: Optional[str] = None,
    ) -> Dict[str, Any]:
        page_num, limit_num = parse_pagination(page, limit, default_limit=WISHLIST_DEFAULT_LIMIT)
        if sort_by not in SORT_FIELDS:
            logger.warning(f"Invalid wishlist sort field: {sort_by}")
            sort_by = "createdAt"

        items, total = self.repo.get_page(
            user_id,
            sort_by=sort_by,
            descending=order != "asc",
            offset=(page_num - 1) * limit_num,
            limit=limit_num,
            brand=brand or None,
        )

        return {
            "items": [serialize_item(i) for i in items],
            "pagination": {
                "page": page_num,
                "limit": limit_num,
                "total": total,
                "totalPages": -(-total // limit_num),
            },
        }

    def remove(self, user_id: UUID, product_id: Any) -> Dict[str, Any]:
        pid = parse_uuid(product_id, "Invalid product ID format")

        with transaction(self.db):
            item = self.repo.get_item(user_id, pid)
            if not item:
                raise NotFoundError("Product not found in your wishlist")
            data = serialize_item(item)
            self.repo.delete_item(item)

        return data

    def clear(self, user_id: UUID) -> Dict[str, Any]:
        with transaction(self.db):
            deleted = self.repo.delete_all(user_id)
        return {"deletedCount": deleted}

    def check(self, user_id: UUID, product_id: Any) -> Dict[str, Any]:
        pid = parse_uuid(product_id, "Invalid product ID format")
        return {"inWishlist": self.repo.get_item(user_id, pid) is not None}

    def count(self, user_id: UUID) -> Dict[str, Any]:
        return {"count": self.repo.count(user_id)}

    def stats(self, user_id: UUID) -> Dict[str, Any]:
        total_items, total_value, total_savings, avg_price, max_price, min_price, on_sale = (
            self.repo.stats(user_id)
        )

        # pusta wishlista -> same zera, nie blad
        return {
            "totalItems": total_items or 0,
            "totalValue": float(total_value or 0),
            "totalSavings": float(total_savings or 0),
            "avgPrice": float(avg_price or 0),
            "maxPrice": float(max_price or 0),
            "minPrice": float(min_price or 0),
            "itemsOnSale": int(on_sale or 0),
        }

    def sync(self, user_id: UUID) -> Dict[str, Any]:
        """
        Odswieza snapshoty z aktualnych produktow. Zmieniane sa tylko pola,
        ktore sie roznia. Brakujacy produkt to blad w raporcie - pozycja zostaje.
        """
        results = {"success": 0, "failed": 0, "updated": [], "errors": []}

        items = self.repo.get_all(user_id)
        products = self.products.get_products([i.product_id for i in items])

        with transaction(self.db):
            for item in items:
                product = products.get(item.product_id)
                if product is None:
                    results["failed"] += 1
                    results["errors"].append({
                        "productId": str(item.product_id),
                        "productTitle": item.product_title,
                        "error": "Product not found",
                    })
                    continue

                snapshot = product_snapshot(product, fallback_image=item.product_image)
                changed = [
                    field for field in SNAPSHOT_FIELDS
                    if _normalized(getattr(item, field)) != snapshot[field]
                ]

                if changed:
                    for field in changed:
                        setattr(item, field, snapshot[field])
                    results["updated"].append({
                        "productId": str(item.product_id),
                        "productTitle": item.product_title,
                        "fields": [to_camel(field) for field in changed],
                    })

                results["success"] += 1

        if results["updated"] or results["failed"]:
            logger.info(
                f"Sync wishlisty uzytkownika {user_id}: "
                f"{len(results['updated'])} zaktualizowanych, {results['failed']} bledow"
            )
        return results


def _normalized(value):
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return Decimal(str(value))
    return value
