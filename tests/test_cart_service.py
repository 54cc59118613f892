from decimal import Decimal

import pytest

from pharmacart.data.models.cart import CartStatus
from pharmacart.domain.errors import (
    CartNotFound,
    DuplicateItem,
    ItemNotFound,
    ItemUnavailable,
    ProductNotFound,
    QuantityOutOfRange,
    UnsupportedCurrency,
    VariantNotFound,
    WishlistItemNotFound,
    WishlistNotFound,
)
from pharmacart.repos.cart_repo import CartRepo
from pharmacart.services.pricing import PricingContext

INR = PricingContext("INDIA", "INR")
USD = PricingContext("USA", "USD")


def test_domestic_cart_totals(cart_service):
    cart = cart_service.add_or_update_item(1, 1, 11, 2, INR).to_dict()

    assert cart["currency"] == "INR"
    assert cart["currency_symbol"] == "₹"
    assert cart["total_price"] == "2000.00"
    assert cart["delivery_charge"] == "0.00"
    assert cart["total_cart_price"] == "2000.00"
    assert cart["items"][0]["unit_price"] == "1000.00"
    assert cart["items"][0]["line_total"] == "2000.00"


def test_international_cart_totals(cart_service):
    cart = cart_service.add_or_update_item(1, 1, 11, 2, USD)

    assert cart.subtotal_inr == Decimal("2200.00")
    assert cart.delivery_charge_inr == Decimal("4178.62")

    body = cart.to_dict()
    assert body["total_price"] == "26.40"
    assert body["delivery_charge"] == "50.14"
    assert body["total_cart_price"] == "76.54"
    assert body["currency_symbol"] == "$"


def test_small_domestic_order_pays_delivery(cart_service):
    cart = cart_service.add_or_update_item(1, 1, 12, 2, INR).to_dict()

    # sale price 200 x 2
    assert cart["total_price"] == "400.00"
    assert cart["delivery_charge"] == "99.00"
    assert cart["total_cart_price"] == "499.00"


def test_same_cart_priced_in_any_currency(cart_service):
    cart_service.add_or_update_item(1, 1, 11, 2, INR)

    assert cart_service.get_cart(1, INR).to_dict()["total_cart_price"] == "2000.00"
    assert cart_service.get_cart(1, USD).to_dict()["total_cart_price"] == "76.54"


def test_re_adding_pair_overwrites_quantity(cart_service):
    cart_service.add_or_update_item(1, 1, 11, 2, INR)
    cart = cart_service.add_or_update_item(1, 1, 11, 5, INR)

    assert len(cart.lines) == 1
    assert cart.lines[0].quantity == 5
    assert cart.to_dict()["total_price"] == "5000.00"


def test_lines_priced_from_snapshot(cart_service, catalog):
    cart_service.add_or_update_item(1, 1, 11, 2, INR)
    catalog.products[1]["variants"][0]["price"] = "5000.00"

    assert cart_service.get_cart(1, INR).to_dict()["total_price"] == "2000.00"


@pytest.mark.parametrize("quantity", [11, 50])
def test_quantity_above_max_rejected(cart_service, db_session, quantity):
    with pytest.raises(QuantityOutOfRange) as exc:
        cart_service.add_or_update_item(1, 1, 11, quantity, INR)

    assert exc.value.details == {"min_order_quantity": 1, "max_order_quantity": 10}
    assert CartRepo(db_session).get_cart_by_user(1) is None


def test_quantity_below_min_rejected(cart_service):
    with pytest.raises(QuantityOutOfRange):
        cart_service.add_or_update_item(1, 1, 12, 1, INR)


def test_out_of_stock_variant_rejected(cart_service):
    with pytest.raises(ItemUnavailable):
        cart_service.add_or_update_item(1, 3, 31, 1, INR)


def test_hidden_product_rejected(cart_service):
    with pytest.raises(ItemUnavailable):
        cart_service.add_or_update_item(1, 4, 41, 1, INR)


def test_unknown_product_and_variant(cart_service):
    with pytest.raises(ProductNotFound):
        cart_service.add_or_update_item(1, 99, 11, 1, INR)
    with pytest.raises(VariantNotFound):
        cart_service.add_or_update_item(1, 1, 99, 1, INR)


def test_unsupported_currency_leaves_cart_untouched(cart_service, db_session):
    with pytest.raises(UnsupportedCurrency) as exc:
        cart_service.add_or_update_item(1, 1, 11, 2, PricingContext("JAPAN", "JPY"))

    assert exc.value.message == "Currency not supported"
    assert CartRepo(db_session).get_cart_by_user(1) is None


def test_get_missing_cart(cart_service):
    with pytest.raises(CartNotFound):
        cart_service.get_cart(42, INR)


def test_set_quantity_checks_snapshot_bounds(cart_service):
    cart = cart_service.add_or_update_item(1, 1, 12, 2, INR)
    line_id = cart.lines[0].line_item_id

    updated = cart_service.set_quantity(1, line_id, 4, INR)
    assert updated.lines[0].quantity == 4

    with pytest.raises(QuantityOutOfRange):
        cart_service.set_quantity(1, line_id, 6, INR)


def test_remove_item(cart_service):
    cart_service.add_or_update_item(1, 1, 11, 1, INR)
    cart = cart_service.add_or_update_item(1, 1, 12, 2, INR)
    first = cart.lines[0].line_item_id

    cart = cart_service.remove_item(1, first, INR)
    assert [line.variant_id for line in cart.lines] == [12]


def test_line_of_another_users_cart_not_found(cart_service):
    other = cart_service.add_or_update_item(2, 1, 11, 1, INR)
    cart_service.add_or_update_item(1, 1, 11, 1, INR)

    with pytest.raises(ItemNotFound):
        cart_service.remove_item(1, other.lines[0].line_item_id, INR)


def test_clear_deletes_cart(cart_service):
    cart_service.add_or_update_item(1, 1, 11, 1, INR)
    cart_service.clear(1)

    with pytest.raises(CartNotFound):
        cart_service.get_cart(1, INR)
    with pytest.raises(CartNotFound):
        cart_service.clear(1)


def test_import_from_wishlist_moves_item(cart_service, wishlist_service):
    wishlist_service.add(1, 1, 12)

    cart = cart_service.import_from_wishlist(1, 1, 12, None, INR)

    # defaults to the variant's minimum order quantity
    assert cart.lines[0].quantity == 2
    assert wishlist_service.get(1)["items"] == []


def test_import_rejects_pair_already_in_cart(cart_service, wishlist_service):
    wishlist_service.add(1, 1, 11)
    cart_service.add_or_update_item(1, 1, 11, 1, INR)

    with pytest.raises(DuplicateItem):
        cart_service.import_from_wishlist(1, 1, 11, 2, INR)

    # wishlist keeps the entry
    assert wishlist_service.get(1)["items"] == [{"product_id": 1, "variant_id": 11}]


def test_import_without_wishlist(cart_service, wishlist_service):
    with pytest.raises(WishlistNotFound):
        cart_service.import_from_wishlist(1, 1, 11, 1, INR)

    wishlist_service.add(1, 2, 21)
    with pytest.raises(WishlistItemNotFound):
        cart_service.import_from_wishlist(1, 1, 11, 1, INR)


def test_close_after_payment_and_reopen(cart_service):
    cart_service.add_or_update_item(1, 1, 11, 1, INR)
    cart_service.close_after_payment(1)
    cart_service.repo.commit()

    closed = cart_service.get_cart(1, INR)
    assert closed.status == CartStatus.CHECKED_OUT
    assert closed.lines == []

    reopened = cart_service.add_or_update_item(1, 1, 12, 2, INR)
    assert reopened.status == CartStatus.ACTIVE
    assert len(reopened.lines) == 1


def test_failed_quantity_update_rolls_back(cart_service, monkeypatch):
    cart = cart_service.add_or_update_item(1, 1, 11, 2, INR)
    line_id = cart.lines[0].line_item_id

    def broken_commit():
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(cart_service.repo, "commit", broken_commit)
    with pytest.raises(RuntimeError):
        cart_service.set_quantity(1, line_id, 5, INR)
    with pytest.raises(RuntimeError):
        cart_service.remove_item(1, line_id, INR)
    monkeypatch.undo()

    cart = cart_service.get_cart(1, INR)
    assert [(line.line_item_id, line.quantity) for line in cart.lines] == [(line_id, 2)]
