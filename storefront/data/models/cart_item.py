import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)

from storefront.data.database import Base

STATUS_ACTIVE = "active"
STATUS_SAVED = "saved_for_later"
STATUS_OUT_OF_STOCK = "out_of_stock"
CART_STATUSES = (STATUS_ACTIVE, STATUS_SAVED, STATUS_OUT_OF_STOCK)


def _now():
    return datetime.now(timezone.utc)


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # bez FK - produkt moze zniknac, odczyt koszyka takie pozycje pomija
    product_id = Column(Uuid, nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    price_at_add = Column(Numeric(10, 2), nullable=False)
    variant = Column(JSON, nullable=True)
    status = Column(String(20), nullable=False, default=STATUS_ACTIVE, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="u_cart_user_product"),
        CheckConstraint("quantity >= 1 AND quantity <= 100", name="cartitem_qty_range"),
        CheckConstraint("price_at_add >= 0", name="cartitem_price_gte_0"),
    )
