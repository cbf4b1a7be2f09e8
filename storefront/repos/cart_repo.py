# storefront/repos/cart_repo.py
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, item_id: UUID, user_id: UUID, for_update: bool = False) -> Optional[CartItemModel]:
        # wlasnosc sprawdzana w samym zapytaniu - cudza pozycja wyglada jak brak
        stmt = select(CartItemModel).where(
            CartItemModel.id == item_id,
            CartItemModel.user_id == user_id,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_item_by_product(self, user_id: UUID, product_id: UUID) -> Optional[CartItemModel]:
        return self.db.execute(
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id, CartItemModel.product_id == product_id)
            .with_for_update()
        ).scalar_one_or_none()

    def get_items(self, user_id: UUID, status: Optional[str] = None) -> List[CartItemModel]:
        stmt = select(CartItemModel).where(CartItemModel.user_id == user_id)
        if status:
            stmt = stmt.where(CartItemModel.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def get_items_by_ids(self, user_id: UUID, item_ids: List[UUID]) -> List[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel).where(
                    CartItemModel.id.in_(item_ids),
                    CartItemModel.user_id == user_id,
                )
            ).scalars().all()
        )

    def get_items_with_products(
        self, user_id: UUID, status: Optional[str] = None
    ) -> List[Tuple[CartItemModel, Optional[ProductModel]]]:
        stmt = (
            select(CartItemModel, ProductModel)
            .outerjoin(ProductModel, ProductModel.id == CartItemModel.product_id)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.created_at.desc(), CartItemModel.id.asc())
        )
        if status:
            stmt = stmt.where(CartItemModel.status == status)
        return [(row[0], row[1]) for row in self.db.execute(stmt).all()]

    def add_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        # flush zeby naruszenie unikalnosci wyszlo jeszcze w tej transakcji
        self.db.flush()
        return item

    def delete_items(self, user_id: UUID, item_ids: List[UUID]) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.id.in_(item_ids),
                CartItemModel.user_id == user_id,
            )
        )
        return result.rowcount

    def commit(self):
        self.db.commit()
