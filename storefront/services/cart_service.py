# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.cart_item import (
    CART_STATUSES,
    STATUS_ACTIVE,
    STATUS_SAVED,
    CartItemModel,
)
from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    InvalidStateError,
    LimitExceededError,
    NotFoundError,
    ValidationError,
)
from storefront.domain.schemas import CartItemOut, CartProductOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.utils.ids import parse_uuid
from storefront.utils.retry import duplicate_retry
from storefront.utils.settings import CART_BATCH_LIMIT, CART_MAX_QUANTITY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INVALID_ITEM_ID = "Invalid Cart Item ID format"
QUANTITY_RANGE = f"Quantity must be an integer between 1 and {CART_MAX_QUANTITY}"


def to_decimal(value) -> Decimal:
    return Decimal(str(value))


def parse_quantity(value: Any, default: Optional[int] = None) -> int:
    if value is None or value == "":
        if default is None:
            raise ValidationError("Quantity is required")
        return default

    if isinstance(value, bool):
        raise ValidationError(QUANTITY_RANGE)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(QUANTITY_RANGE)

    if not number.is_integer() or number < 1 or number > CART_MAX_QUANTITY:
        raise ValidationError(QUANTITY_RANGE)
    return int(number)


def validate_status(status: Optional[str]):
    if status and status not in CART_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(CART_STATUSES)}")


def serialize_item(item: CartItemModel, product: Optional[ProductModel] = None) -> Dict[str, Any]:
    out = CartItemOut.model_validate(item)
    if product is not None:
        out.product = CartProductOut.model_validate(product)
    return out.dump()


class CartService:
    """
    Use case'y koszyka. Kazda komenda poza save/move idzie w jednej
    transakcji: pozycja koszyka + zbior shopping_cart usera razem albo wcale.
    query (get_cart) tylko odczyt, alerty liczone na zywo.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)

    #query - odczyt
    def get_cart(self, user_id: UUID, status: Optional[str] = STATUS_ACTIVE) -> Dict[str, Any]:
        validate_status(status)

        rows = self.repo.get_items_with_products(user_id, status or None)
        #pozycje usunietych produktow pomijamy
        rows = [(item, product) for item, product in rows if product is not None]

        summary = {
            "totalItems": len(rows),
            "totalQuantity": sum(item.quantity for item, _ in rows),
            "subtotal": float(
                sum((to_decimal(i.price_at_add) * i.quantity for i, _ in rows), Decimal("0.00"))
            ),
            "estimatedTotal": float(
                sum(
                    (to_decimal(p.price or i.price_at_add) * i.quantity for i, p in rows),
                    Decimal("0.00"),
                )
            ),
        }

        stock_issues = []
        price_changes = []
        for item, product in rows:
            stock = product.count_in_stock
            if stock == 0 or stock < item.quantity:
                stock_issues.append({
                    "cartItemId": str(item.id),
                    "productId": str(product.id),
                    "productName": product.name,
                    "requestedQuantity": item.quantity,
                    "availableStock": stock,
                    "message": "Out of stock" if stock == 0 else f"Only {stock} available",
                })

            old_price = to_decimal(item.price_at_add)
            new_price = to_decimal(product.price)
            if old_price != new_price:
                difference = new_price - old_price
                price_changes.append({
                    "cartItemId": str(item.id),
                    "productId": str(product.id),
                    "productName": product.name,
                    "oldPrice": float(old_price),
                    "newPrice": float(new_price),
                    "difference": float(difference),
                    "percentChange": f"{difference / old_price * 100:.2f}" if old_price else None,
                })

        return {
            "items": [serialize_item(item, product) for item, product in rows],
            "summary": summary,
            "alerts": {
                "stockIssues": stock_issues or None,
                "priceChanges": price_changes or None,
            },
        }

    #commands
    @duplicate_retry()
    def add_item(
        self,
        user_id: UUID,
        product_id: Any,
        quantity: Any = None,
        variant: Any = None,
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Dodanie produktu. Jesli pozycja istnieje ilosci sie SUMUJA
        (limit 100 i stan magazynu), cena zawsze aktualna z produktu.
        Zwraca (pozycja, czy_utworzona).
        """
        if not product_id:
            raise ValidationError("Product ID is required")
        pid = parse_uuid(product_id, "Invalid Product ID format")
        qty = parse_quantity(quantity, default=1)

        with transaction(self.db, conflict_message="Item already exists in cart"):
            product = self.products.get_product_for_update(pid)
            if not product:
                raise NotFoundError("Product not found")

            stock = product.count_in_stock
            if stock == 0:
                raise LimitExceededError("Product is out of stock", availableStock=0)
            if qty > stock:
                raise LimitExceededError(
                    f"Only {stock} items available in stock",
                    availableStock=stock,
                )

            existing = self.repo.get_item_by_product(user_id, pid)

            if existing:
                new_quantity = existing.quantity + qty

                if new_quantity > CART_MAX_QUANTITY:
                    raise LimitExceededError(
                        f"Total quantity cannot exceed {CART_MAX_QUANTITY}",
                        currentQuantity=existing.quantity,
                    )
                if new_quantity > stock:
                    raise LimitExceededError(
                        f"Only {stock} items available. You already have {existing.quantity} in cart",
                        availableStock=stock,
                        currentQuantity=existing.quantity,
                    )

                logger.info(
                    f"Produkt {pid} juz jest w koszyku uzytkownika {user_id}, zwiekszam ilosc "
                    f"z {existing.quantity} do {new_quantity}"
                )
                existing.quantity = new_quantity
                existing.price_at_add = product.price
                existing.variant = variant
                existing.status = STATUS_ACTIVE
                item, created = existing, False
            else:
                logger.info(f"Dodaje nowy produkt {pid} do koszyka uzytkownika {user_id}")
                item = self.repo.add_item(
                    CartItemModel(
                        user_id=user_id,
                        product_id=pid,
                        quantity=qty,
                        price_at_add=product.price,
                        variant=variant,
                        status=STATUS_ACTIVE,
                    )
                )
                created = True

            # idempotentne - drugi raz ten sam produkt nie dubluje wpisu
            self.users.add_to_cart_set(user_id, pid)

        return serialize_item(item, product), created

    def set_quantity(self, user_id: UUID, item_id: Any, quantity: Any) -> Dict[str, Any]:
        """Ustawia ilosc (SET, nie ADD). changes=None oznacza brak zmiany."""
        iid = parse_uuid(item_id, INVALID_ITEM_ID)
        qty = parse_quantity(quantity)

        with transaction(self.db):
            item = self.repo.get_item(iid, user_id, for_update=True)
            if not item:
                raise NotFoundError("Cart item not found or you do not have permission to update it")

            product = self.products.get_product_for_update(item.product_id)
            if not product:
                raise NotFoundError("Product no longer exists")

            if item.quantity == qty:
                return {"cartItem": serialize_item(item, product), "changes": None}

            stock = product.count_in_stock
            if stock == 0:
                raise LimitExceededError("Product is out of stock", availableStock=0)
            if qty > stock:
                raise LimitExceededError(
                    f"Only {stock} items available in stock",
                    availableStock=stock,
                    requestedQuantity=qty,
                )

            old_quantity = item.quantity
            item.quantity = qty
            item.price_at_add = product.price
            item.status = STATUS_ACTIVE

        price = to_decimal(product.price)
        logger.info(f"Pozycja {iid}: ilosc {old_quantity} -> {qty}")

        return {
            "cartItem": serialize_item(item, product),
            "changes": {
                "oldQuantity": old_quantity,
                "newQuantity": qty,
                "quantityDifference": qty - old_quantity,
                "oldTotal": float(price * old_quantity),
                "newTotal": float(price * qty),
                "totalDifference": float(price * (qty - old_quantity)),
            },
        }

    def increment(self, user_id: UUID, item_id: Any) -> Dict[str, Any]:
        iid = parse_uuid(item_id, INVALID_ITEM_ID)

        with transaction(self.db):
            item = self.repo.get_item(iid, user_id, for_update=True)
            if not item:
                raise NotFoundError("Cart item not found")

            if item.quantity >= CART_MAX_QUANTITY:
                raise LimitExceededError(
                    f"Maximum quantity limit reached ({CART_MAX_QUANTITY})",
                    currentQuantity=item.quantity,
                )

            product = self.products.get_product_for_update(item.product_id)
            if not product:
                raise NotFoundError("Product not found")

            if item.quantity + 1 > product.count_in_stock:
                raise LimitExceededError(
                    f"Maximum available stock reached ({product.count_in_stock})",
                    availableStock=product.count_in_stock,
                    currentQuantity=item.quantity,
                )

            item.quantity += 1

        return serialize_item(item, product)

    def decrement(self, user_id: UUID, item_id: Any) -> Dict[str, Any]:
        iid = parse_uuid(item_id, INVALID_ITEM_ID)

        with transaction(self.db):
            item = self.repo.get_item(iid, user_id, for_update=True)
            if not item:
                raise NotFoundError("Cart item not found")

            # do zera nie schodzimy - od tego jest delete
            if item.quantity <= 1:
                raise LimitExceededError(
                    "Quantity cannot be less than 1. Please remove item instead.",
                    currentQuantity=item.quantity,
                    suggestion="Use DELETE /api/cart/:id to remove this item",
                )

            item.quantity -= 1

        return serialize_item(item, self.products.get_product(item.product_id))

    def delete_item(self, user_id: UUID, item_id: Any) -> Dict[str, Any]:
        iid = parse_uuid(item_id, INVALID_ITEM_ID)

        with transaction(self.db):
            item = self.repo.get_item(iid, user_id, for_update=True)
            if not item:
                raise NotFoundError("Cart item not found or you do not have permission to delete it")

            deleted = {
                "cartItemId": str(item.id),
                "productId": str(item.product_id),
                "quantity": item.quantity,
                "priceAtAdd": float(to_decimal(item.price_at_add)),
                "totalValue": float(to_decimal(item.price_at_add) * item.quantity),
            }
            product_id = item.product_id

            self.repo.delete_items(user_id, [iid])
            self.users.pull_from_cart_set(user_id, [product_id])

        logger.info(f"Usunieto pozycje {iid} (produkt {product_id}) z koszyka uzytkownika {user_id}")
        return {"deleted": deleted}

    def delete_batch(self, user_id: UUID, cart_item_ids: Any) -> Dict[str, Any]:
        if not isinstance(cart_item_ids, list) or not cart_item_ids:
            raise ValidationError("cartItemIds must be a non-empty array")

        invalid_ids = []
        item_ids: List[UUID] = []
        for raw in cart_item_ids:
            try:
                item_ids.append(parse_uuid(raw, INVALID_ITEM_ID))
            except ValidationError:
                invalid_ids.append(raw)
        if invalid_ids:
            raise ValidationError(INVALID_ITEM_ID, invalidIds=invalid_ids)

        if len(cart_item_ids) > CART_BATCH_LIMIT:
            raise ValidationError(f"Cannot delete more than {CART_BATCH_LIMIT} items at once")

        with transaction(self.db):
            items = self.repo.get_items_by_ids(user_id, item_ids)
            if not items:
                raise NotFoundError("No cart items found or you do not have permission to delete them")

            summary = {
                "requestedCount": len(cart_item_ids),
                "foundCount": len(items),
                "notFoundCount": len(cart_item_ids) - len(items),
                "totalQuantity": sum(i.quantity for i in items),
                "totalValue": float(
                    sum((to_decimal(i.price_at_add) * i.quantity for i in items), Decimal("0.00"))
                ),
            }
            product_ids = [i.product_id for i in items]

            deleted_count = self.repo.delete_items(user_id, [i.id for i in items])
            self.users.pull_from_cart_set(user_id, product_ids)

        logger.info(f"Batch delete: {deleted_count} pozycji usunietych dla uzytkownika {user_id}")
        return {"summary": summary, "deletedCount": deleted_count}

    def clear(self, user_id: UUID, status: Optional[str] = None) -> Dict[str, Any]:
        validate_status(status)

        with transaction(self.db):
            items = self.repo.get_items(user_id, status or None)
            if not items:
                raise NotFoundError("No cart items found to clear")

            summary = {
                "itemsDeleted": len(items),
                "totalQuantity": sum(i.quantity for i in items),
                "totalValue": float(
                    sum((to_decimal(i.price_at_add) * i.quantity for i in items), Decimal("0.00"))
                ),
            }

            deleted_count = self.repo.delete_items(user_id, [i.id for i in items])

            #bez statusu czyscimy caly zbior, ze statusem tylko usuniete produkty
            if not status:
                self.users.clear_cart_set(user_id)
            else:
                self.users.pull_from_cart_set(user_id, [i.product_id for i in items])

        logger.info(f"Wyczyszczono koszyk uzytkownika {user_id} (status={status or 'all'}): {deleted_count}")
        return {"summary": summary, "deletedCount": deleted_count}

    def save_for_later(self, user_id: UUID, item_id: Any) -> Dict[str, Any]:
        iid = parse_uuid(item_id, INVALID_ITEM_ID)

        item = self.repo.get_item(iid, user_id)
        if not item:
            raise NotFoundError("Cart item not found")

        if item.status == STATUS_SAVED:
            raise InvalidStateError("Item is already saved for later")

        item.status = STATUS_SAVED
        self.repo.commit()

        return serialize_item(item, self.products.get_product(item.product_id))

    def move_to_cart(self, user_id: UUID, item_id: Any) -> Dict[str, Any]:
        iid = parse_uuid(item_id, INVALID_ITEM_ID)

        item = self.repo.get_item(iid, user_id)
        if not item:
            raise NotFoundError("Cart item not found")

        if item.status == STATUS_ACTIVE:
            raise InvalidStateError("Item is already in active cart")

        #powrot do koszyka - stan magazynu sprawdzamy od nowa
        product = self.products.get_product(item.product_id)
        if not product:
            raise NotFoundError("Product no longer exists")

        stock = product.count_in_stock
        if stock == 0:
            raise LimitExceededError("Product is out of stock", availableStock=0)
        if item.quantity > stock:
            raise LimitExceededError(
                f"Only {stock} items available. Please update quantity first.",
                availableStock=stock,
                currentQuantity=item.quantity,
            )

        item.status = STATUS_ACTIVE
        item.price_at_add = product.price
        self.repo.commit()

        return serialize_item(item, product)

    def reconcile_mirror(self, user_id: UUID) -> Dict[str, Any]:
        """
        Przebudowa zbioru shopping_cart z faktycznych pozycji koszyka.
        Akcja kompensujaca na dryf, wywolywana jawnie.
        """
        with transaction(self.db):
            expected = {item.product_id for item in self.repo.get_items(user_id)}
            current = self.users.get_cart_set(user_id)

            missing = expected - current
            stale = current - expected

            for product_id in missing:
                self.users.add_to_cart_set(user_id, product_id)
            self.users.pull_from_cart_set(user_id, stale)

        if missing or stale:
            logger.warning(
                f"Shopping cart set uzytkownika {user_id} rozjechany: "
                f"+{len(missing)} / -{len(stale)}"
            )

        return {
            "added": sorted(str(p) for p in missing),
            "removed": sorted(str(p) for p in stale),
            "total": len(expected),
        }
