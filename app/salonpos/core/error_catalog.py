from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    PERMISSION_DENIED = ErrorDefinition(
        "PERMISSION_DENIED",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
    )
    TENANT_SCOPE_REQUIRED = ErrorDefinition(
        "TENANT_SCOPE_REQUIRED",
        "Tenant scope is required",
        status.HTTP_403_FORBIDDEN,
    )
    SESSION_NOT_FOUND = ErrorDefinition(
        "SESSION_NOT_FOUND",
        "Checkout session not found or expired",
        status.HTTP_404_NOT_FOUND,
    )
    ITEM_NOT_FOUND = ErrorDefinition(
        "ITEM_NOT_FOUND",
        "Item not found in checkout",
        status.HTTP_404_NOT_FOUND,
    )
    DISCOUNT_NOT_FOUND = ErrorDefinition(
        "DISCOUNT_NOT_FOUND",
        "Discount not found",
        status.HTTP_404_NOT_FOUND,
    )
    APPOINTMENT_NOT_FOUND = ErrorDefinition(
        "APPOINTMENT_NOT_FOUND",
        "Appointment not found",
        status.HTTP_404_NOT_FOUND,
    )
    CUSTOMER_NOT_FOUND = ErrorDefinition(
        "CUSTOMER_NOT_FOUND",
        "Customer not found",
        status.HTTP_404_NOT_FOUND,
    )
    SERVICE_NOT_FOUND = ErrorDefinition(
        "SERVICE_NOT_FOUND",
        "Service not found",
        status.HTTP_404_NOT_FOUND,
    )
    PRODUCT_NOT_FOUND = ErrorDefinition(
        "PRODUCT_NOT_FOUND",
        "Product not found",
        status.HTTP_404_NOT_FOUND,
    )
    UNSUPPORTED_ITEM_TYPE = ErrorDefinition(
        "UNSUPPORTED_ITEM_TYPE",
        "Unsupported item type",
        status.HTTP_400_BAD_REQUEST,
    )
    PAYMENT_INCOMPLETE = ErrorDefinition(
        "PAYMENT_INCOMPLETE",
        "Payment incomplete",
        status.HTTP_400_BAD_REQUEST,
    )
    NO_ITEMS = ErrorDefinition(
        "NO_ITEMS",
        "No items in checkout",
        status.HTTP_400_BAD_REQUEST,
    )
    CHECKOUT_SESSION_CONFLICT = ErrorDefinition(
        "CHECKOUT_SESSION_CONFLICT",
        "Checkout session was modified concurrently",
        status.HTTP_409_CONFLICT,
    )
    CHECKOUT_SESSION_CLOSED = ErrorDefinition(
        "CHECKOUT_SESSION_CLOSED",
        "Checkout session is no longer active",
        status.HTTP_409_CONFLICT,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        422,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)

    @property
    def code(self) -> str:
        return self.error.code
