from typing import Iterable, Optional, Set
from uuid import UUID

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel, user_shopping_cart


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: UUID) -> Optional[UserModel]:
        return self.db.get(UserModel, user_id)

    # =====================================================
    # SHOPPING CART SET - zapisy bez commit, commit robi transakcja serwisu
    # =====================================================
    def get_cart_set(self, user_id: UUID) -> Set[UUID]:
        rows = self.db.execute(
            select(user_shopping_cart.c.product_id).where(user_shopping_cart.c.user_id == user_id)
        ).scalars().all()
        return set(rows)

    def add_to_cart_set(self, user_id: UUID, product_id: UUID) -> bool:
        exists = self.db.execute(
            select(user_shopping_cart.c.product_id).where(
                user_shopping_cart.c.user_id == user_id,
                user_shopping_cart.c.product_id == product_id,
            )
        ).first()
        if exists:
            return False
        self.db.execute(insert(user_shopping_cart).values(user_id=user_id, product_id=product_id))
        return True

    def pull_from_cart_set(self, user_id: UUID, product_ids: Iterable[UUID]) -> int:
        product_ids = list(product_ids)
        if not product_ids:
            return 0
        result = self.db.execute(
            delete(user_shopping_cart).where(
                user_shopping_cart.c.user_id == user_id,
                user_shopping_cart.c.product_id.in_(product_ids),
            )
        )
        return result.rowcount

    def clear_cart_set(self, user_id: UUID) -> int:
        result = self.db.execute(
            delete(user_shopping_cart).where(user_shopping_cart.c.user_id == user_id)
        )
        return result.rowcount
