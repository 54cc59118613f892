# pharmacart/services/cart_service.py
from typing import List, Tuple

from sqlalchemy.orm import Session

from pharmacart.data.models.cart import CartModel, CartStatus
from pharmacart.data.models.cart_item import CartItemModel
from pharmacart.domain.errors import (
    CartNotFound,
    DuplicateItem,
    ItemNotFound,
    ItemUnavailable,
    ProductNotFound,
    QuantityOutOfRange,
    VariantNotFound,
    WishlistItemNotFound,
    WishlistNotFound,
)
from pharmacart.domain.schemas import CatalogProduct, CatalogVariant
from pharmacart.repos.cart_repo import CartRepo
from pharmacart.repos.wishlist_repo import WishlistRepo
from pharmacart.services.cart_pricing import CartPricingService, PricedCart
from pharmacart.services.pricing import PricingContext
from pharmacart.services.product_client import ProductClient
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


def check_quantity(variant: CatalogVariant, quantity: int) -> None:
    if quantity < variant.min_order_quantity or quantity > variant.max_order_quantity:
        raise QuantityOutOfRange(variant.min_order_quantity, variant.max_order_quantity)


def check_available(product: CatalogProduct, variant: CatalogVariant) -> None:
    if not variant.is_stock_available or variant.price == 0 or not product.is_visible:
        raise ItemUnavailable(
            "Product is currently unavailable",
            details={"product_id": product.id, "variant_id": variant.id},
        )


class CartService:
    """
    Cart use cases for one user, split CQRS-style:
    commands (add, set quantity, remove, clear, import) change state,
    the query (get) only reads.

    Every command resolves the exchange rate before touching the cart, so an
    unsupported currency never leaves a half-applied change behind, and ends
    by returning the freshly priced cart.
    """

    def __init__(
        self,
        db: Session,
        product_client: ProductClient,
        pricing: CartPricingService,
    ):
        self.repo = CartRepo(db)
        self.wishlists = WishlistRepo(db)
        self.product_client = product_client
        self.pricing = pricing

    #query
    def get_cart(self, user_id: int, context: PricingContext) -> PricedCart:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise CartNotFound()

        return self.pricing.price_cart(cart, context)

    #commands
    def add_or_update_item(
        self,
        user_id: int,
        product_id: int,
        variant_id: int,
        quantity: int,
        context: PricingContext,
    ) -> PricedCart:
        quote = self.pricing.quote(context)

        product, variant = self.load_catalog_item(product_id, variant_id)
        check_available(product, variant)
        check_quantity(variant, quantity)

        try:
            cart = self._get_or_create_cart(user_id)
            existing_item = self.repo.get_cart_item(cart.id, product_id, variant_id)

            if existing_item:
                logger.info(
                    f"Product {product_id}/{variant_id} already in cart {cart.id}, "
                    f"quantity {existing_item.quantity} -> {quantity}"
                )
                #overwrite, not additive
                existing_item.quantity = quantity
                existing_item.product_snapshot = product.snapshot()
                existing_item.variant_snapshot = variant.model_dump(mode="json")
            else:
                logger.info(f"Adding product {product_id}/{variant_id} to cart {cart.id}")
                self.repo.add_cart_item(self._new_line(cart, product, variant, quantity))

            self.repo.commit()

        except Exception as e:
            logger.error(f"Failed to add product {product_id}/{variant_id} for user {user_id}: {e}")
            self.repo.rollback()
            raise

        return self.pricing.price_cart(self.repo.refresh(cart), context, quote)

    def set_quantity(
        self,
        user_id: int,
        line_item_id: int,
        quantity: int,
        context: PricingContext,
    ) -> PricedCart:
        quote = self.pricing.quote(context)
        cart, item = self._get_line(user_id, line_item_id)

        check_quantity(CatalogVariant.model_validate(item.variant_snapshot), quantity)

        try:
            item.quantity = quantity
            self.repo.commit()
        except Exception as e:
            logger.error(f"Failed to set quantity of line {line_item_id} in cart {cart.id}: {e}")
            self.repo.rollback()
            raise

        logger.info(f"Cart {cart.id} line {line_item_id} quantity set to {quantity}")
        return self.pricing.price_cart(self.repo.refresh(cart), context, quote)

    def remove_item(self, user_id: int, line_item_id: int, context: PricingContext) -> PricedCart:
        quote = self.pricing.quote(context)
        cart, item = self._get_line(user_id, line_item_id)

        try:
            self.repo.delete_cart_item(item)
            self.repo.commit()
        except Exception as e:
            logger.error(f"Failed to remove line {line_item_id} from cart {cart.id}: {e}")
            self.repo.rollback()
            raise

        logger.info(f"Line {line_item_id} removed from cart {cart.id}")
        return self.pricing.price_cart(self.repo.refresh(cart), context, quote)

    def clear(self, user_id: int) -> None:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise CartNotFound()

        self.repo.delete_cart(cart)
        self.repo.commit()
        logger.info(f"Cart {cart.id} of user {user_id} deleted")

    def import_from_wishlist(
        self,
        user_id: int,
        product_id: int,
        variant_id: int,
        quantity: int | None,
        context: PricingContext,
    ) -> PricedCart:
        quote = self.pricing.quote(context)

        wishlist = self.wishlists.get_wishlist_by_user(user_id)
        if not wishlist:
            raise WishlistNotFound()

        wish = self.wishlists.get_item(wishlist.id, product_id, variant_id)
        if not wish:
            raise WishlistItemNotFound("Product variant not found in wishlist")

        product, variant = self.load_catalog_item(product_id, variant_id)

        cart = self.repo.get_cart_by_user(user_id)
        if cart and self.repo.get_cart_item(cart.id, product_id, variant_id):
            raise DuplicateItem("Product variant already in cart")

        check_available(product, variant)
        if quantity is None:
            quantity = max(variant.min_order_quantity, 1)
        check_quantity(variant, quantity)

        try:
            cart = cart or self._get_or_create_cart(user_id)
            if cart.status != CartStatus.ACTIVE:
                cart.status = CartStatus.ACTIVE

            self.repo.add_cart_item(self._new_line(cart, product, variant, quantity))
            self.wishlists.delete_item(wish)
            self.repo.commit()
            self.wishlists.refresh(wishlist)

        except Exception as e:
            logger.error(f"Failed to move wishlist item {product_id}/{variant_id} for user {user_id}: {e}")
            self.repo.rollback()
            raise

        logger.info(f"Wishlist item {product_id}/{variant_id} moved to cart {cart.id}")
        return self.pricing.price_cart(self.repo.refresh(cart), context, quote)

    def close_after_payment(self, user_id: int, paid_items: List[dict] | None = None) -> None:
        """
        Drop the paid lines from the user's cart; ``paid_items`` are the
        order's ``products`` rows, None drops every line. A cart left empty is
        marked CHECKED_OUT and the next add reopens it. Lines added after the
        order was created stay in the cart.

        Only flushes; the caller commits together with the order update.
        """
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return

        if paid_items is None:
            self.repo.clear_items(cart)
        else:
            paid = {(p["product_id"], p["variant_id"]) for p in paid_items}
            self.repo.remove_items(
                cart, [i for i in cart.items if (i.product_id, i.variant_id) in paid]
            )

        if not cart.items:
            cart.status = CartStatus.CHECKED_OUT
        logger.info(f"Cart {cart.id} closed after payment, {len(cart.items)} lines left")

    # ------------------------------------------------------------------

    def load_catalog_item(self, product_id: int, variant_id: int) -> Tuple[CatalogProduct, CatalogVariant]:
        logger.info(f"Fetching product {product_id} from catalog")
        product = self.product_client.fetch_product(product_id)
        if not product:
            raise ProductNotFound(product_id)

        variant = product.find_variant(variant_id)
        if not variant:
            raise VariantNotFound(variant_id)

        return product, variant

    def _get_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            if cart.status != CartStatus.ACTIVE:
                logger.info(f"Reopening cart {cart.id} for user {user_id}")
                cart.status = CartStatus.ACTIVE
            return cart

        cart = self.repo.create_cart(CartModel(user_id=user_id, status=CartStatus.ACTIVE))
        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart

    def _get_line(self, user_id: int, line_item_id: int) -> Tuple[CartModel, CartItemModel]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise CartNotFound()

        item = self.repo.get_cart_item_by_id(cart.id, line_item_id)
        if not item:
            raise ItemNotFound("Cart item not found", details={"line_item_id": line_item_id})
        return cart, item

    @staticmethod
    def _new_line(cart: CartModel, product: CatalogProduct, variant: CatalogVariant, quantity: int) -> CartItemModel:
        return CartItemModel(
            cart_id=cart.id,
            product_id=product.id,
            variant_id=variant.id,
            quantity=quantity,
            product_snapshot=product.snapshot(),
            variant_snapshot=variant.model_dump(mode="json"),
        )
