# storefront/domain/schemas.py
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Baza dla schematow API - pola snake_case, JSON camelCase."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def dump(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# =====================================================
# FILTROWANIE PRODUKTOW
# =====================================================
class ProductScope(BaseModel):
    """Bazowy filtr budowany przez wywolujacego (kategoria, wyszukiwanie)."""

    search: str = ""
    category_id: Optional[UUID] = None
    cat_id: Optional[str] = None
    sub_cat_id: Optional[str] = None
    third_sub_cat_id: Optional[str] = None


class ProductFilter(BaseModel):
    """Scope + zawężenia z query stringa, juz zwalidowane."""

    scope: ProductScope = Field(default_factory=ProductScope)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    brand: Optional[str] = None
    min_rating: Optional[float] = None
    in_stock: Optional[bool] = None
    min_discount: Optional[float] = None
    ram: List[str] = Field(default_factory=list)
    size: List[str] = Field(default_factory=list)
    weight: List[str] = Field(default_factory=list)
    location: Optional[str] = None


# =====================================================
# REQUEST
# =====================================================
class CartItemIn(CamelModel):
    """Dodanie produktu do koszyka. Reguly biznesowe sprawdza serwis."""

    product_id: Optional[str] = None
    quantity: Any = None
    variant: Any = None


class QuantityIn(CamelModel):
    quantity: Any = None


class BatchDeleteIn(CamelModel):
    cart_item_ids: Any = None


class WishlistItemIn(CamelModel):
    product_id: Optional[str] = None


# =====================================================
# RESPONSE
# =====================================================
class ImageOut(CamelModel):
    url: str
    public_id: str


class LocationOut(CamelModel):
    value: str
    label: str


class ProductOut(CamelModel):
    id: UUID
    name: str
    description: str
    brand: str
    price: float
    old_price: float
    discount: float
    count_in_stock: int
    rating: float
    is_featured: bool
    category_id: Optional[UUID] = None
    cat_id: str
    sub_cat_id: str
    third_sub_cat_id: str
    product_ram: List[str] = []
    size: List[str] = []
    product_weight: List[str] = []
    location: List[LocationOut] = []
    images: List[ImageOut] = []
    created_at: datetime
    updated_at: datetime


class CartProductOut(CamelModel):
    """Skrocony widok produktu doklejany do pozycji koszyka."""

    id: UUID
    name: str
    price: float
    old_price: float
    brand: str
    count_in_stock: int
    discount: float
    rating: float
    is_featured: bool
    images: List[ImageOut] = []


class CartItemOut(CamelModel):
    id: UUID
    user_id: UUID
    product_id: UUID
    quantity: int
    price_at_add: float
    variant: Any = None
    status: str
    created_at: datetime
    updated_at: datetime
    product: Optional[CartProductOut] = None


class WishlistItemOut(CamelModel):
    id: UUID
    user_id: UUID
    product_id: UUID
    product_title: str
    product_image: str
    price: float
    old_price: Optional[float] = None
    brand: str
    rating: float
    discount: float
    created_at: datetime
    updated_at: datetime
