"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Checkout / Catalog
  3xxx: Order
  4xxx: Payment
  5xxx: Settlement
  9xxx: System

Every error carries a human-readable ``category`` ("stock insufficient",
"already shipped or delivered", ...) so clients never interpret raw codes.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        category: str = "internal error",
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.category = category
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401, "authentication required")


class ForbiddenError(AppError):
    def __init__(self, detail: str = "Not allowed") -> None:
        super().__init__(1002, detail, 403, "permission denied")


# --- 2xxx: Checkout / Catalog ---

class ValidationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2001, detail, 422, "invalid request")


class BelowMinimumOrderError(ValidationError):
    def __init__(self, product_id: str, requested: int, moq: int) -> None:
        super().__init__(
            f"Minimum order quantity for {product_id} is {moq}, requested {requested}"
        )
        self.category = "below minimum order quantity"
        self.moq = moq


class NotFoundError(AppError):
    def __init__(self, entity: str, ref: str, code: int = 2002) -> None:
        super().__init__(code, f"{entity} not found: {ref}", 404, "not found")


class ProductNotFoundError(NotFoundError):
    def __init__(self, ref: str) -> None:
        super().__init__("Product", ref)


class InactiveProductError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(2003, f"Product is not on sale: {product_id}", 422, "product unavailable")


class InsufficientStockError(AppError):
    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            2004,
            f"Insufficient stock for {product_id}: requested {requested}, available {available}",
            409,
            "stock insufficient",
        )


class AmountMismatchError(AppError):
    def __init__(self, claimed: int, server_total: int) -> None:
        super().__init__(
            2005,
            f"Amount mismatch: claimed {claimed}, server total {server_total}",
            422,
            "amount mismatch",
        )


# --- 3xxx: Order ---

class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__("Order", order_id, code=3001)


class IllegalTransitionError(AppError):
    def __init__(self, current: str, requested: str, category: str) -> None:
        super().__init__(
            3002,
            f"Order in status {current} cannot move to {requested}",
            409,
            category,
        )
        self.current = current
        self.requested = requested


# --- 4xxx: Payment ---

class PaymentGatewayError(AppError):
    """Gateway confirmation failed; gateway code/message are kept verbatim."""

    def __init__(self, gateway_code: str, gateway_message: str, status: int | None = None) -> None:
        super().__init__(4001, gateway_message, 402, "payment failed")
        self.gateway_code = gateway_code
        self.gateway_message = gateway_message
        self.gateway_status = status


# --- 5xxx: Settlement ---

class SettlementNotFoundError(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__("Settlement for order", order_id, code=5001)


# --- 9xxx: System ---

class ConfigurationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9001, detail, 500, "configuration error")


class PersistenceError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9002, detail, 500, "storage error")


class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9003, "Rate limit exceeded", 429, "too many requests")


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9099, detail, 500)
