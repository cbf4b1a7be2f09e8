#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.user import UserModel, user_shopping_cart
from storefront.data.models.product import (
    ProductModel,
    ProductOptionModel,
    ProductLocationModel,
    ProductImageModel,
)
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.wishlist_item import WishlistItemModel

__all__ = [
    "UserModel",
    "user_shopping_cart",
    "ProductModel",
    "ProductOptionModel",
    "ProductLocationModel",
    "ProductImageModel",
    "CartItemModel",
    "WishlistItemModel",
]
