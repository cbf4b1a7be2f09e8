# storefront/api/dependencies.py
from functools import lru_cache
from typing import Optional
from uuid import UUID

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import USER_ACTIVE
from storefront.domain.errors import AuthenticationError, ForbiddenError
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_service import CartService
from storefront.services.facet_cache import FacetCache
from storefront.services.product_service import ProductService
from storefront.services.wishlist_service import WishlistService
from storefront.utils.settings import JWT_ALGORITHM, SECRET_KEY_ACCESS_TOKEN

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_facet_cache() -> FacetCache:
    return FacetCache.from_settings()


def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UUID:
    """
    Token z naglowka Authorization albo cookie accessToken.
    Tokenow nie wystawiamy - tylko weryfikacja i status konta.
    """
    token = credentials.credentials if credentials else request.cookies.get("accessToken")
    if not token:
        raise AuthenticationError("Access token is missing")

    try:
        payload = jwt.decode(token, SECRET_KEY_ACCESS_TOKEN, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Access token has expired")
    except jwt.InvalidTokenError:
        raise ForbiddenError("Invalid access token")

    try:
        user_id = UUID(str(payload.get("id")))
    except ValueError:
        raise ForbiddenError("Invalid access token")

    user = UserRepo(db).get_user(user_id)
    if not user:
        raise AuthenticationError("User not authenticated")
    if user.status != USER_ACTIVE:
        raise ForbiddenError(f"Account is {user.status.lower()}")

    return user.id


def get_product_service(
    db: Session = Depends(get_db),
    facet_cache: FacetCache = Depends(get_facet_cache),
) -> ProductService:
    return ProductService(db=db, facet_cache=facet_cache)


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db=db)


def get_wishlist_service(db: Session = Depends(get_db)) -> WishlistService:
    return WishlistService(db=db)
