import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Table, Uuid

from storefront.data.database import Base

USER_ACTIVE = "Active"

# zdenormalizowany zbior product_id z koszyka, PK (user_id, product_id) daje semantyke zbioru
user_shopping_cart = Table(
    "user_shopping_cart",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Uuid, primary_key=True),
)


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    email = Column(String(320), nullable=False, unique=True)
    status = Column(String(20), nullable=False, default=USER_ACTIVE)
    role = Column(String(20), nullable=False, default="User")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
