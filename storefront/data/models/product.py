import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from storefront.data.database import Base

OPTION_RAM = "ram"
OPTION_SIZE = "size"
OPTION_WEIGHT = "weight"


def _now():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    brand = Column(String(100), nullable=False, default="", index=True)

    price = Column(Numeric(10, 2), nullable=False, default=0)
    old_price = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(5, 2), nullable=False, default=0)
    count_in_stock = Column(Integer, nullable=False, default=0)
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)

    category_id = Column(Uuid, nullable=True, index=True)
    cat_id = Column(String(100), nullable=False, default="", index=True)
    sub_cat_id = Column(String(100), nullable=False, default="", index=True)
    third_sub_cat_id = Column(String(100), nullable=False, default="", index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    options = relationship(
        "ProductOptionModel",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    locations = relationship(
        "ProductLocationModel",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    images = relationship(
        "ProductImageModel",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ProductImageModel.position",
    )

    __table_args__ = (
        CheckConstraint("count_in_stock >= 0", name="product_stock_gte_0"),
        CheckConstraint("price >= 0", name="product_price_gte_0"),
        CheckConstraint("discount >= 0 AND discount <= 100", name="product_discount_range"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="product_rating_range"),
        Index("ix_products_cat_path_price", "cat_id", "sub_cat_id", "price"),
    )

    def _option_values(self, kind: str) -> list[str]:
        return [o.value for o in self.options if o.kind == kind]

    @property
    def product_ram(self) -> list[str]:
        return self._option_values(OPTION_RAM)

    @property
    def size(self) -> list[str]:
        return self._option_values(OPTION_SIZE)

    @property
    def product_weight(self) -> list[str]:
        return self._option_values(OPTION_WEIGHT)

    @property
    def location(self) -> list[dict]:
        return [{"value": loc.value, "label": loc.label} for loc in self.locations]

    @property
    def first_image_url(self) -> str:
        return self.images[0].url if self.images else ""


class ProductOptionModel(Base):
    __tablename__ = "product_options"

    id = Column(Integer, primary_key=True)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = Column(String(20), nullable=False)
    value = Column(String(100), nullable=False)

    product = relationship("ProductModel", back_populates="options")

    __table_args__ = (Index("ix_product_options_kind_value", "kind", "value"),)


class ProductLocationModel(Base):
    __tablename__ = "product_locations"

    id = Column(Integer, primary_key=True)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    value = Column(String(200), nullable=False)
    label = Column(String(200), nullable=False)

    product = relationship("ProductModel", back_populates="locations")


class ProductImageModel(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(500), nullable=False)
    public_id = Column(String(200), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    product = relationship("ProductModel", back_populates="images")
