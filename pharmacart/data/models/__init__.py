#import all models so SQLAlchemy registers them in Base.metadata

from pharmacart.data.models.cart import CartModel
from pharmacart.data.models.cart_item import CartItemModel
from pharmacart.data.models.wishlist import WishlistModel, WishlistItemModel
from pharmacart.data.models.exchange_rate import ExchangeRateModel
from pharmacart.data.models.delivery_charge import DeliveryChargeModel
from pharmacart.data.models.order import OrderModel

__all__ = [
    "CartModel",
    "CartItemModel",
    "WishlistModel",
    "WishlistItemModel",
    "ExchangeRateModel",
    "DeliveryChargeModel",
    "OrderModel",
]
