# storefront/repos/wishlist_repo.py
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import case, delete, func, select
from sqlalchemy.orm import Session

from storefront.data.models.wishlist_item import WishlistItemModel

SORT_FIELDS = {
    "createdAt": WishlistItemModel.created_at,
    "price": WishlistItemModel.price,
    "productTitle": WishlistItemModel.product_title,
    "rating": WishlistItemModel.rating,
    "discount": WishlistItemModel.discount,
    "brand": WishlistItemModel.brand,
}


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, user_id: UUID, product_id: UUID) -> Optional[WishlistItemModel]:
        return self.db.execute(
            select(WishlistItemModel).where(
                WishlistItemModel.user_id == user_id,
                WishlistItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_all(self, user_id: UUID) -> List[WishlistItemModel]:
        return list(
            self.db.execute(
                select(WishlistItemModel).where(WishlistItemModel.user_id == user_id)
            ).scalars().all()
        )

    def get_page(
        self,
        user_id: UUID,
        sort_by: str,
        descending: bool,
        offset: int,
        limit: int,
        brand: Optional[str] = None,
    ) -> Tuple[List[WishlistItemModel], int]:
        conditions = [WishlistItemModel.user_id == user_id]
        if brand:
            conditions.append(WishlistItemModel.brand == brand)

        column = SORT_FIELDS[sort_by]
        stmt = (
            select(WishlistItemModel)
            .where(*conditions)
            .order_by(column.desc() if descending else column.asc(), WishlistItemModel.id.asc())
            .offset(offset)
            .limit(limit)
        )
        total = self.db.execute(
            select(func.count(WishlistItemModel.id)).where(*conditions)
        ).scalar_one()
        return list(self.db.execute(stmt).scalars().all()), total

    def count(self, user_id: UUID) -> int:
        return self.db.execute(
            select(func.count(WishlistItemModel.id)).where(WishlistItemModel.user_id == user_id)
        ).scalar_one()

    def add_item(self, item: WishlistItemModel) -> WishlistItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, item: WishlistItemModel):
        self.db.delete(item)

    def delete_all(self, user_id: UUID) -> int:
        result = self.db.execute(
            delete(WishlistItemModel).where(WishlistItemModel.user_id == user_id)
        )
        return result.rowcount

    def stats(self, user_id: UUID):
        savings = case(
            (
                (WishlistItemModel.old_price.is_not(None))
                & (WishlistItemModel.old_price > WishlistItemModel.price),
                WishlistItemModel.old_price - WishlistItemModel.price,
            ),
            else_=0,
        )
        on_sale = case((WishlistItemModel.discount > 0, 1), else_=0)

        stmt = select(
            func.count(WishlistItemModel.id),
            func.sum(WishlistItemModel.price),
            func.sum(savings),
            func.avg(WishlistItemModel.price),
            func.max(WishlistItemModel.price),
            func.min(WishlistItemModel.price),
            func.sum(on_sale),
        ).where(WishlistItemModel.user_id == user_id)
        return self.db.execute(stmt).one()
