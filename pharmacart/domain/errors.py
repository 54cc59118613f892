# pharmacart/domain/errors.py
"""
Domain exceptions for the cart pricing and checkout service.

    PharmacartError
    ├── ValidationError (400)
    │   ├── QuantityOutOfRange
    │   ├── ItemUnavailable
    │   ├── UnsupportedCurrency
    │   ├── EmptyCart
    │   ├── PrescriptionRequired
    │   ├── PassportRequired
    │   ├── InvalidFileType
    │   ├── FileTooLarge
    │   └── InvalidOrderStatus
    ├── NotFoundError (404)
    │   ├── ProductNotFound, VariantNotFound
    │   ├── CartNotFound, ItemNotFound
    │   ├── WishlistNotFound, WishlistItemNotFound
    │   └── OrderNotFound, ExchangeRateNotFound, DeliveryChargeNotFound
    ├── ConflictError (400)
    │   └── DuplicateItem
    ├── AuthorizationError (403)
    │   ├── OrderAccessDenied
    │   └── AdminRequired
    ├── ExternalServiceError (500)
    │   ├── CatalogUnavailable
    │   ├── PaymentGatewayError
    │   ├── StorageError
    │   └── RateFeedError
    └── SignatureVerificationError (400)
        └── SignatureMismatch

Routers never build HTTP errors for these by hand; the handler registered in
``pharmacart.api.create_app`` turns them into ``{"detail": ..., "code": ...}``.
"""
from typing import Any, Dict, Optional


class PharmacartError(Exception):
    status_code: int = 500
    default_code: str = "PHARMACART_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# FAMILIES
# =============================================================================

class ValidationError(PharmacartError):
    status_code = 400
    default_code = "VALIDATION_ERROR"


class NotFoundError(PharmacartError):
    status_code = 404
    default_code = "NOT_FOUND"


class ConflictError(PharmacartError):
    status_code = 400
    default_code = "CONFLICT"


class AuthorizationError(PharmacartError):
    status_code = 403
    default_code = "FORBIDDEN"


class ExternalServiceError(PharmacartError):
    status_code = 500
    default_code = "EXTERNAL_SERVICE_ERROR"


class SignatureVerificationError(PharmacartError):
    status_code = 400
    default_code = "SIGNATURE_VERIFICATION_FAILED"


# =============================================================================
# VALIDATION
# =============================================================================

class QuantityOutOfRange(ValidationError):
    default_code = "QUANTITY_OUT_OF_RANGE"

    def __init__(self, minimum: int, maximum: int):
        super().__init__(
            f"Quantity must be between {minimum} and {maximum}",
            details={"min_order_quantity": minimum, "max_order_quantity": maximum},
        )


class ItemUnavailable(ValidationError):
    default_code = "ITEM_UNAVAILABLE"


class UnsupportedCurrency(ValidationError):
    default_code = "CURRENCY_NOT_SUPPORTED"

    def __init__(self, currency: str):
        super().__init__("Currency not supported", details={"currency": currency})


class EmptyCart(ValidationError):
    default_code = "EMPTY_CART"


class PrescriptionRequired(ValidationError):
    default_code = "PRESCRIPTION_REQUIRED"


class PassportRequired(ValidationError):
    default_code = "PASSPORT_REQUIRED"


class InvalidFileType(ValidationError):
    default_code = "INVALID_FILE_TYPE"


class FileTooLarge(ValidationError):
    default_code = "FILE_TOO_LARGE"


class InvalidOrderStatus(ValidationError):
    default_code = "INVALID_ORDER_STATUS"


# =============================================================================
# NOT FOUND
# =============================================================================

class ProductNotFound(NotFoundError):
    default_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: int):
        super().__init__("Product not found", details={"product_id": product_id})


class VariantNotFound(NotFoundError):
    default_code = "VARIANT_NOT_FOUND"

    def __init__(self, variant_id: int):
        super().__init__("Variant not found", details={"variant_id": variant_id})


class CartNotFound(NotFoundError):
    default_code = "CART_NOT_FOUND"

    def __init__(self, message: str = "Cart not found"):
        super().__init__(message)


class ItemNotFound(NotFoundError):
    default_code = "CART_ITEM_NOT_FOUND"


class WishlistNotFound(NotFoundError):
    default_code = "WISHLIST_NOT_FOUND"

    def __init__(self, message: str = "Wishlist not found"):
        super().__init__(message)


class WishlistItemNotFound(NotFoundError):
    default_code = "WISHLIST_ITEM_NOT_FOUND"


class OrderNotFound(NotFoundError):
    default_code = "ORDER_NOT_FOUND"


class ExchangeRateNotFound(NotFoundError):
    default_code = "EXCHANGE_RATE_NOT_FOUND"


class DeliveryChargeNotFound(NotFoundError):
    default_code = "DELIVERY_CHARGE_NOT_FOUND"


# =============================================================================
# CONFLICT / AUTHORIZATION
# =============================================================================

class DuplicateItem(ConflictError):
    default_code = "DUPLICATE_ITEM"


class OrderAccessDenied(AuthorizationError):
    default_code = "ORDER_ACCESS_DENIED"


class AdminRequired(AuthorizationError):
    default_code = "ADMIN_REQUIRED"


# =============================================================================
# EXTERNAL SERVICES
# =============================================================================

class CatalogUnavailable(ExternalServiceError):
    default_code = "CATALOG_UNAVAILABLE"


class PaymentGatewayError(ExternalServiceError):
    default_code = "PAYMENT_GATEWAY_ERROR"


class StorageError(ExternalServiceError):
    default_code = "STORAGE_ERROR"


class RateFeedError(ExternalServiceError):
    default_code = "RATE_FEED_ERROR"


class SignatureMismatch(SignatureVerificationError):
    default_code = "SIGNATURE_MISMATCH"

    def __init__(self):
        super().__init__("Invalid Signature")
