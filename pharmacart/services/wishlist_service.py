# pharmacart/services/wishlist_service.py
from sqlalchemy.orm import Session

from pharmacart.data.models.wishlist import WishlistModel, WishlistItemModel
from pharmacart.domain.errors import (
    DuplicateItem,
    ProductNotFound,
    VariantNotFound,
    WishlistItemNotFound,
    WishlistNotFound,
)
from pharmacart.repos.wishlist_repo import WishlistRepo
from pharmacart.services.product_client import ProductClient
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


def _as_dict(wishlist: WishlistModel) -> dict:
    return {
        "wishlist_id": wishlist.id,
        "user_id": wishlist.user_id,
        "items": [
            {"product_id": i.product_id, "variant_id": i.variant_id}
            for i in wishlist.items
        ],
    }


class WishlistService:
    def __init__(self, db: Session, product_client: ProductClient):
        self.repo = WishlistRepo(db)
        self.product_client = product_client

    def get(self, user_id: int) -> dict:
        wishlist = self.repo.get_wishlist_by_user(user_id)
        if not wishlist:
            raise WishlistNotFound()
        return _as_dict(wishlist)

    def add(self, user_id: int, product_id: int, variant_id: int) -> dict:
        product = self.product_client.fetch_product(product_id)
        if not product:
            raise ProductNotFound(product_id)
        if not product.find_variant(variant_id):
            raise VariantNotFound(variant_id)

        wishlist = self.repo.get_wishlist_by_user(user_id)
        if wishlist and self.repo.get_item(wishlist.id, product_id, variant_id):
            raise DuplicateItem("Product variant already in wishlist")

        if not wishlist:
            wishlist = self.repo.create_wishlist(WishlistModel(user_id=user_id))

        self.repo.add_item(
            WishlistItemModel(wishlist_id=wishlist.id, product_id=product_id, variant_id=variant_id)
        )
        self.repo.commit()

        logger.info(f"Product variant {product_id}/{variant_id} added to wishlist of user {user_id}")
        return _as_dict(self.repo.refresh(wishlist))

    def remove(self, user_id: int, product_id: int, variant_id: int) -> dict:
        wishlist = self.repo.get_wishlist_by_user(user_id)
        if not wishlist:
            raise WishlistNotFound()

        item = self.repo.get_item(wishlist.id, product_id, variant_id)
        if not item:
            raise WishlistItemNotFound("Product variant not found in wishlist")

        self.repo.delete_item(item)
        self.repo.commit()

        logger.info(f"Product variant {product_id}/{variant_id} removed from wishlist of user {user_id}")
        return _as_dict(self.repo.refresh(wishlist))
