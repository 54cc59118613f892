# pharmacart/services/order_service.py
import uuid
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from pharmacart.data.models.order import OrderModel, OrderStatus
from pharmacart.domain.errors import (
    CartNotFound,
    EmptyCart,
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderNotFound,
    PassportRequired,
    PrescriptionRequired,
)
from pharmacart.domain.schemas import ShippingInfo
from pharmacart.repos.cart_repo import CartRepo
from pharmacart.repos.order_repo import OrderRepo
from pharmacart.services.cart_pricing import CartPricingService, PricedCart
from pharmacart.services.cart_service import CartService, check_available, check_quantity
from pharmacart.services.notification_service import NotificationService
from pharmacart.services.payment_gateway import PaymentGatewayClient
from pharmacart.services.payment_verifier import PaymentVerifier
from pharmacart.services.pricing import PricingContext, fmt
from pharmacart.services.product_client import ProductClient
from pharmacart.services.storage import StorageService
from pharmacart.utils.uploads import UploadedFile, validate_image
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value(rounding=ROUND_HALF_UP))


def order_as_dict(order: OrderModel) -> dict:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "name": order.name,
        "country": order.country,
        "city": order.city,
        "status": order.status,
        "currency": order.currency,
        "currency_symbol": order.currency_symbol,
        "products": order.products,
        "total_price": fmt(order.total_price),
        "delivery_charge": fmt(order.delivery_charge),
        "total_cart_price": fmt(order.total_cart_price),
        "payment": {
            "order_id": order.payment_order_id,
            "payment_id": order.payment_id,
            "signature": order.payment_signature,
        },
        "tracking_link": order.tracking_link,
        "passport_url": order.passport_url,
        "prescription_url": order.prescription_url,
        "created_at": order.created_at,
    }


class CheckoutService:
    """
    Checkout state machine: NotStarted -> Pending -> Completed | Failed.

    ``create_order`` turns the priced cart into a gateway order plus a
    Pending order row; ``confirm_payment`` moves it to Completed once the
    gateway signature checks out. Every validation runs before the first
    upload, gateway call or write.
    """

    def __init__(
        self,
        db: Session,
        pricing: CartPricingService,
        product_client: ProductClient,
        gateway: PaymentGatewayClient,
        storage: StorageService,
        verifier: PaymentVerifier,
        notifier: NotificationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.cart_service = CartService(db, product_client, pricing)
        self.pricing = pricing
        self.product_client = product_client
        self.gateway = gateway
        self.storage = storage
        self.verifier = verifier
        self.notifier = notifier or NotificationService()

    def create_order(
        self,
        user_id: int,
        shipping: ShippingInfo,
        context: PricingContext,
        prescription: UploadedFile | None = None,
        passport: UploadedFile | None = None,
    ) -> dict:
        """
        1. Prices the cart (CartNotFound / EmptyCart / UnsupportedCurrency)
        2. Re-validates every line against the live catalog
        3. Prescription gate and passport check
        4. Uploads images, creates the gateway order, persists a Pending order
        """
        quote = self.pricing.quote(context)

        cart = self.carts.get_cart_by_user(user_id)
        if not cart:
            raise CartNotFound()
        if not cart.items:
            raise EmptyCart("Cart is empty")

        priced = self.pricing.price_cart(cart, context, quote)
        self._revalidate(priced)

        if priced.requires_prescription and prescription is None:
            raise PrescriptionRequired("A prescription image is required for this order")
        if prescription is not None:
            validate_image(prescription, "prescriptionImage")

        if passport is None:
            raise PassportRequired("A passport image is required")
        validate_image(passport, "passportImage")

        passport_url = self._upload(passport, "passports")
        prescription_url = self._upload(prescription, "prescriptions") if prescription else None

        amount_minor = to_minor_units(priced.total_cart_price)
        gateway_order = self.gateway.create_order(
            amount_minor,
            quote.currency,
            receipt=f"cart-{cart.id}-{uuid.uuid4().hex[:12]}",
        )

        order = OrderModel(
            user_id=user_id,
            name=shipping.name,
            company_name=shipping.company_name,
            country=context.country,
            street_address=shipping.street_address,
            city=shipping.city,
            state=shipping.state,
            pincode=shipping.pincode,
            mobile=shipping.mobile,
            email=shipping.email,
            age=shipping.age,
            blood_pressure=shipping.blood_pressure,
            weight=shipping.weight,
            weight_unit=shipping.weight_unit,
            order_notes=shipping.order_notes,
            passport_url=passport_url,
            prescription_url=prescription_url,
            products=[
                {
                    "product_id": line.product_id,
                    "variant_id": line.variant_id,
                    "title": line.title,
                    "pack_size": line.pack_size,
                    "quantity": line.quantity,
                    "unit_price": fmt(line.unit_price),
                }
                for line in priced.lines
            ],
            currency=quote.currency,
            currency_symbol=quote.display_symbol,
            total_price=priced.total_price,
            delivery_charge=priced.delivery_charge,
            total_cart_price=priced.total_cart_price,
            status=OrderStatus.PENDING,
            payment_order_id=gateway_order["id"],
        )
        created = self.repo.create_order(order)

        logger.info(
            f"Order {created.id} created for user {user_id} from cart {cart.id}, "
            f"gateway order {gateway_order['id']}, {fmt(priced.total_cart_price)} {quote.currency}"
        )

        return {
            "order_id": gateway_order["id"],
            "currency": quote.currency,
            "amount": amount_minor,
            "key_id": self.gateway.key_id,
        }

    def confirm_payment(self, gateway_order_id: str, payment_id: str, signature: str) -> dict:
        """Idempotent: a redelivered callback for a Completed order changes nothing."""
        self.verifier.verify(gateway_order_id, payment_id, signature)

        order = self.repo.get_by_payment_order_id(gateway_order_id)
        if not order:
            # signature was valid, so the gateway knows an order we never stored
            logger.error(f"Verified payment {payment_id} for unknown gateway order {gateway_order_id}")
            return {"msg": "Payment Successful", "order_found": False, "order_status": None}

        if order.status == OrderStatus.COMPLETED:
            if order.payment_id != payment_id:
                logger.warning(
                    f"Order {order.id} already completed with payment {order.payment_id}, "
                    f"ignoring payment {payment_id}"
                )
            return {"msg": "Payment Successful", "order_found": True, "order_status": order.status}

        if order.status == OrderStatus.FAILED:
            logger.warning(f"Verified payment {payment_id} for failed order {order.id}, status left unchanged")
            return {"msg": "Order already failed", "order_found": True, "order_status": order.status}

        try:
            order.payment_id = payment_id
            order.payment_signature = signature
            order.status = OrderStatus.COMPLETED
            # one commit for the order and its cart, a redelivered callback retries both
            self.cart_service.close_after_payment(order.user_id, order.products)
            self.repo.save(order)
        except Exception as e:
            logger.error(f"Failed to complete order {order.id} with payment {payment_id}: {e}")
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} completed with payment {payment_id}")

        try:
            self.notifier.send_order_notification(order.user_id, order.id)
        except Exception as e:
            logger.error(f"Order {order.id} completed but its notification was not queued: {e}")

        return {"msg": "Payment Successful", "order_found": True, "order_status": order.status}

    def update_order(self, order_id: int, status: str, tracking_link: str | None = None) -> OrderModel:
        if status not in OrderStatus.ALL:
            raise InvalidOrderStatus(
                f"Status must be one of {', '.join(OrderStatus.ALL)}",
                details={"status": status},
            )

        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound("Order not found", details={"order_id": order_id})

        previous = order.status
        order.status = status
        if tracking_link is not None:
            order.tracking_link = tracking_link
        saved = self.repo.save(order)

        logger.info(f"Order {order_id} status {previous} -> {status}")
        return saved

    def get_order(self, order_id: int, user_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound("Order not found", details={"order_id": order_id})
        if order.user_id != user_id:
            raise OrderAccessDenied("Access to this order is denied")
        return order

    def payment_history(self, user_id: int, status_filter: str | None = None) -> list[OrderModel]:
        return self.repo.list_for_user(user_id, status_filter)

    # ------------------------------------------------------------------

    def _revalidate(self, priced: PricedCart) -> None:
        for line in priced.lines:
            product, variant = self.cart_service.load_catalog_item(line.product_id, line.variant_id)
            check_available(product, variant)
            check_quantity(variant, line.quantity)

    def _upload(self, upload: UploadedFile, folder: str) -> str:
        key = self.storage.generate_key(folder, upload.filename, upload.content)
        return self.storage.upload(upload.content, key, upload.content_type)
