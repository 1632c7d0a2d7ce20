"""
Error types and shared user-facing messages.

Services raise the exceptions below; routers translate them into
HTTPExceptions so that no backend failure reaches the client unhandled.
"""

# User-facing messages
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_PRODUCT_OUT_OF_STOCK = "Product is out of stock"
ERROR_INVALID_CREDENTIALS = "Invalid credentials"
ERROR_ACCESS_DENIED = "Access denied"
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_CART_LOCKED = "Checkout in progress, cart cannot be modified"
ERROR_CART_UNAVAILABLE = "Cart service unavailable"
ERROR_CART_EMPTY = "Your cart is empty"
ERROR_CHECKOUT_FAILED = "There was an error processing your order. Please try again."
ERROR_BACKEND_UNAVAILABLE = "Service temporarily unavailable. Please try again."


class ElectroMartError(Exception):
    """Base class for storefront errors."""

    default_message = "ElectroMart error"
    code = "ERROR"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ProductNotFoundError(ElectroMartError):
    """Product id is unknown to the backend."""

    default_message = ERROR_PRODUCT_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        super().__init__(f"{ERROR_PRODUCT_NOT_FOUND}: {product_id}")
        self.product_id = product_id


class OutOfStockError(ElectroMartError):
    """Live stock is zero for a single-unit purchase or add-to-cart."""

    default_message = ERROR_PRODUCT_OUT_OF_STOCK
    code = "OUT_OF_STOCK"


class InvalidCredentialsError(ElectroMartError):
    default_message = ERROR_INVALID_CREDENTIALS
    code = "INVALID_CREDENTIALS"


class RegistrationError(ElectroMartError):
    """Sign-up rejected (duplicate email, weak password, missing fields)."""

    default_message = "Registration failed"
    code = "VALIDATION_ERROR"


class ConfigurationError(ElectroMartError):
    default_message = "Server configuration error"
    code = "CONFIGURATION_ERROR"


class BackendUnavailableError(ElectroMartError):
    """Supabase call failed at the transport or API level."""

    default_message = ERROR_BACKEND_UNAVAILABLE
    code = "BACKEND_UNAVAILABLE"


class CartLockedError(ElectroMartError):
    """Cart mutation attempted while checkout settlement holds the cart."""

    default_message = ERROR_CART_LOCKED
    code = "CART_LOCKED"


class CartStorageError(ElectroMartError):
    """Cart snapshot could not be written."""

    default_message = ERROR_CART_UNAVAILABLE
    code = "CART_STORAGE"
