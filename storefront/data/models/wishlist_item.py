import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, UniqueConstraint, Uuid

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class WishlistItemModel(Base):
    __tablename__ = "wishlist_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid, nullable=False)

    # snapshot danych produktu z chwili dodania, odswiezany tylko przez sync
    product_title = Column(String(500), nullable=False)
    product_image = Column(String(500), nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    old_price = Column(Numeric(10, 2), nullable=True)
    brand = Column(String(100), nullable=False, default="")
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    discount = Column(Numeric(5, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    __table_args__ = (UniqueConstraint("user_id", "product_id", name="u_wishlist_user_product"),)
