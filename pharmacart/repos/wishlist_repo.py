# pharmacart/repos/wishlist_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from pharmacart.data.models.wishlist import WishlistModel, WishlistItemModel


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_wishlist_by_user(self, user_id: int) -> WishlistModel | None:
        return self.db.execute(
            select(WishlistModel).where(WishlistModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_wishlist(self, wishlist: WishlistModel) -> WishlistModel:
        self.db.add(wishlist)
        self.db.flush()
        return wishlist

    def get_item(self, wishlist_id: int, product_id: int, variant_id: int) -> WishlistItemModel | None:
        return self.db.execute(
            select(WishlistItemModel).where(
                WishlistItemModel.wishlist_id == wishlist_id,
                WishlistItemModel.product_id == product_id,
                WishlistItemModel.variant_id == variant_id,
            )
        ).scalar_one_or_none()

    def add_item(self, item: WishlistItemModel) -> WishlistItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, item: WishlistItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def refresh(self, wishlist: WishlistModel) -> WishlistModel:
        self.db.refresh(wishlist)
        return wishlist

    def commit(self) -> None:
        self.db.commit()
