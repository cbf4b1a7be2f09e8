"""
Shared pytest fixtures.

Baza to SQLite w pamieci (StaticPool, jedno polaczenie), Redis jest
mockowany albo wylaczony. Zmienne srodowiskowe musza byc ustawione
zanim zaimportujemy storefront, bo settings czyta je przy imporcie.
"""

import os
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FACET_CACHE_ENABLED"] = "false"
os.environ["SECRET_KEY_ACCESS_TOKEN"] = "test-secret"

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.dependencies import get_db, get_facet_cache
from storefront.data.database import Base
from storefront.data.models import (
    CartItemModel,
    ProductImageModel,
    ProductLocationModel,
    ProductModel,
    ProductOptionModel,
    UserModel,
)
from storefront.main import create_app
from storefront.services.facet_cache import FacetCache

SECRET = "test-secret"


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Fresh session per test, shared with the app through dependency override."""
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# APP FIXTURES
# ============================================================================


@pytest.fixture
def app(db_session):
    app = create_app()

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_facet_cache] = lambda: FacetCache(client=None)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


# ============================================================================
# TEST DATA FACTORIES
# ============================================================================


def make_token(user_id, expires_in: timedelta = timedelta(hours=1), secret: str = SECRET) -> str:
    payload = {"id": str(user_id), "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def user_factory(db_session):
    def _create(status: str = "Active", email: str = None) -> UserModel:
        user = UserModel(
            id=uuid.uuid4(),
            name="Jan Kowalski",
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            status=status,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _create


@pytest.fixture
def user(user_factory) -> UserModel:
    return user_factory()


@pytest.fixture
def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {make_token(user.id)}"}


_clock = {"t": datetime(2024, 1, 1, tzinfo=timezone.utc)}


def _tick() -> datetime:
    # kolejne produkty dostaja rosnace created_at, sort po dacie jest deterministyczny
    _clock["t"] += timedelta(minutes=1)
    return _clock["t"]


@pytest.fixture
def product_factory(db_session):
    def _create(
        name: str = "Laptop",
        price="100.00",
        stock: int = 10,
        brand: str = "Acme",
        old_price="0",
        discount="0",
        rating="0",
        cat_id: str = "",
        sub_cat_id: str = "",
        third_sub_cat_id: str = "",
        category_id=None,
        is_featured: bool = False,
        description: str = "",
        ram=(),
        size=(),
        weight=(),
        locations=(),
        images=(),
    ) -> ProductModel:
        created = _tick()
        product = ProductModel(
            id=uuid.uuid4(),
            name=name,
            description=description,
            brand=brand,
            price=Decimal(str(price)),
            old_price=Decimal(str(old_price)),
            discount=Decimal(str(discount)),
            rating=Decimal(str(rating)),
            count_in_stock=stock,
            is_featured=is_featured,
            category_id=category_id,
            cat_id=cat_id,
            sub_cat_id=sub_cat_id,
            third_sub_cat_id=third_sub_cat_id,
            created_at=created,
            updated_at=created,
        )
        for kind, values in (("ram", ram), ("size", size), ("weight", weight)):
            product.options.extend(ProductOptionModel(kind=kind, value=v) for v in values)
        product.locations.extend(ProductLocationModel(value=v, label=v) for v in locations)
        product.images.extend(
            ProductImageModel(url=url, public_id=f"img-{i}", position=i)
            for i, url in enumerate(images)
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _create


@pytest.fixture
def cart_item_factory(db_session):
    def _create(user, product, quantity: int = 1, status: str = "active", price=None) -> CartItemModel:
        item = CartItemModel(
            user_id=user.id,
            product_id=product.id,
            quantity=quantity,
            price_at_add=Decimal(str(price if price is not None else product.price)),
            status=status,
            created_at=_tick(),
        )
        db_session.add(item)
        db_session.commit()
        return item

    return _create
