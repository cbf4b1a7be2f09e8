# storefront/repos/product_repo.py
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from storefront.data.models.product import (
    OPTION_RAM,
    OPTION_SIZE,
    OPTION_WEIGHT,
    ProductLocationModel,
    ProductModel,
    ProductOptionModel,
)
from storefront.domain.schemas import ProductFilter, ProductScope
from storefront.services.product_filters import SORT_FIELDS


def contains_pattern(value: str) -> str:
    """Podciag do ILIKE - % _ i \\ z inputu maja byc literalami."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def scope_clauses(scope: ProductScope) -> list:
    clauses = []

    search = scope.search.strip()
    if search:
        pattern = contains_pattern(search)
        clauses.append(
            or_(
                ProductModel.name.ilike(pattern, escape="\\"),
                ProductModel.description.ilike(pattern, escape="\\"),
                ProductModel.brand.ilike(pattern, escape="\\"),
            )
        )

    if scope.category_id is not None:
        clauses.append(ProductModel.category_id == scope.category_id)
    if scope.cat_id:
        clauses.append(ProductModel.cat_id == scope.cat_id)
    if scope.sub_cat_id:
        clauses.append(ProductModel.sub_cat_id == scope.sub_cat_id)
    if scope.third_sub_cat_id:
        clauses.append(ProductModel.third_sub_cat_id == scope.third_sub_cat_id)

    return clauses


def _has_option(kind: str, values: List[str]):
    return ProductModel.options.any(
        and_(ProductOptionModel.kind == kind, ProductOptionModel.value.in_(values))
    )


def filter_clauses(product_filter: ProductFilter) -> list:
    clauses = scope_clauses(product_filter.scope)
    f = product_filter

    if f.min_price is not None:
        clauses.append(ProductModel.price >= f.min_price)
    if f.max_price is not None:
        clauses.append(ProductModel.price <= f.max_price)
    if f.brand:
        clauses.append(ProductModel.brand.ilike(contains_pattern(f.brand), escape="\\"))
    if f.min_rating is not None:
        clauses.append(ProductModel.rating >= f.min_rating)
    if f.in_stock is True:
        clauses.append(ProductModel.count_in_stock > 0)
    elif f.in_stock is False:
        clauses.append(ProductModel.count_in_stock == 0)
    if f.min_discount is not None:
        clauses.append(ProductModel.discount >= f.min_discount)
    if f.ram:
        clauses.append(_has_option(OPTION_RAM, f.ram))
    if f.size:
        clauses.append(_has_option(OPTION_SIZE, f.size))
    if f.weight:
        clauses.append(_has_option(OPTION_WEIGHT, f.weight))
    if f.location:
        location = ProductLocationModel.value.ilike(contains_pattern(f.location), escape="\\")
        clauses.append(ProductModel.locations.any(location))

    return clauses


def order_by_clauses(sort: Dict[str, int]) -> list:
    order = []
    for name, direction in sort.items():
        column = getattr(ProductModel, SORT_FIELDS[name])
        order.append(column.desc() if direction < 0 else column.asc())
    # stabilna kolejnosc przy remisach, inaczej strony moga sie nakladac
    order.append(ProductModel.id.asc())
    return order


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: UUID) -> Optional[ProductModel]:
        return self.db.get(ProductModel, product_id)

    def get_product_for_update(self, product_id: UUID) -> Optional[ProductModel]:
        # blokada wiersza na czas transakcji koszyka (stan magazynu)
        return self.db.execute(
            select(ProductModel).where(ProductModel.id == product_id).with_for_update()
        ).scalar_one_or_none()

    def get_products(self, product_ids: List[UUID]) -> Dict[UUID, ProductModel]:
        if not product_ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(product_ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def find_products(
        self,
        product_filter: ProductFilter,
        sort: Dict[str, int],
        offset: int,
        limit: int,
    ) -> List[ProductModel]:
        stmt = (
            select(ProductModel)
            .where(*filter_clauses(product_filter))
            .order_by(*order_by_clauses(sort))
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def count_products(self, product_filter: ProductFilter) -> int:
        stmt = select(func.count(ProductModel.id)).where(*filter_clauses(product_filter))
        return self.db.execute(stmt).scalar_one()

    def get_featured(self, limit: int) -> List[ProductModel]:
        stmt = (
            select(ProductModel)
            .where(ProductModel.is_featured.is_(True))
            .order_by(ProductModel.created_at.desc(), ProductModel.id.asc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    # =====================================================
    # FACETY - zawsze liczone na samym scope
    # =====================================================
    def distinct_brands(self, scope: ProductScope) -> List[str]:
        stmt = (
            select(ProductModel.brand)
            .where(*scope_clauses(scope), ProductModel.brand != "")
            .distinct()
            .order_by(ProductModel.brand)
        )
        return [b for b in self.db.execute(stmt).scalars().all() if b]

    def price_range(self, scope: ProductScope) -> Optional[dict]:
        stmt = select(
            func.min(ProductModel.price),
            func.max(ProductModel.price),
        ).where(*scope_clauses(scope))
        min_price, max_price = self.db.execute(stmt).one()
        if min_price is None:
            return None
        return {"minPrice": float(min_price), "maxPrice": float(max_price)}

    def distinct_option_values(self, kind: str, scope: ProductScope) -> List[str]:
        stmt = (
            select(ProductOptionModel.value)
            .join(ProductModel, ProductModel.id == ProductOptionModel.product_id)
            .where(*scope_clauses(scope), ProductOptionModel.kind == kind)
            .distinct()
            .order_by(ProductOptionModel.value)
        )
        return [v for v in self.db.execute(stmt).scalars().all() if v]
