"""
Domain Exceptions for Domain-Driven Design

These exceptions represent business rule violations and domain-specific errors.
Each one carries the HTTP status it maps to; the API layer translates them
into the `{success: false, message}` envelope.
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    Provides a standardized way to communicate business rule violations.
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "INSUFFICIENT_STOCK")
            details: Additional context about the error
            status_code: Overrides the class-level HTTP status
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "success": False,
            "message": self.message,
        }


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Use for invalid entity states, value object creation failures, etc.
    """

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class EntityNotFoundException(DomainException):
    """
    Raised when an entity is not found.
    """

    status_code = 404

    def __init__(
        self,
        entity_type: str,
        entity_id: Any = None,
        message: str | None = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        msg = message or f"{entity_type} not found"
        super().__init__(
            msg,
            "ENTITY_NOT_FOUND",
            {"entity_type": entity_type, "entity_id": str(entity_id) if entity_id is not None else None},
        )


class BusinessRuleViolationException(DomainException):
    """
    Raised when a business rule is violated.

    Use for invariant violations, precondition failures, etc.
    """

    def __init__(self, rule: str, message: str | None = None, details: dict[str, Any] | None = None):
        self.rule = rule
        msg = message or f"Business rule violated: {rule}"
        details = details or {}
        details["rule"] = rule
        super().__init__(msg, "BUSINESS_RULE_VIOLATION", details)


class InsufficientStockException(DomainException):
    """Raised when there's not enough stock for an operation."""

    def __init__(self, product_id: Any, requested: int, available: int, message: str | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            message or f"Only {available} items available in stock",
            "INSUFFICIENT_STOCK",
            {
                "product_id": str(product_id),
                "requested": requested,
                "available": available,
            },
        )


class InvalidOperationException(DomainException):
    """Raised when an operation is not valid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None):
        self.operation = operation
        self.current_state = current_state
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(
            msg,
            "INVALID_OPERATION",
            {"operation": operation, "current_state": current_state},
        )


class AuthenticationException(DomainException):
    """Raised when credentials or tokens are missing, invalid or expired."""

    status_code = 401

    def __init__(self, message: str = "You are not logged in. Please login to continue."):
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(DomainException):
    """Raised when a user is not authorized to perform an operation."""

    status_code = 403

    def __init__(
        self,
        message: str = "You do not have permission to perform this action.",
        operation: str | None = None,
        user_id: str | None = None,
    ):
        self.operation = operation
        self.user_id = user_id
        super().__init__(message, "AUTHORIZATION_ERROR", {"operation": operation})


class DuplicateEntityException(DomainException):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: Any, message: str | None = None):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(
            message or f"{entity_type} with this {field} already exists",
            "DUPLICATE_ENTITY",
            {
                "entity_type": entity_type,
                "field": field,
                "value": str(value),
            },
        )


class PaymentException(DomainException):
    """Raised when a payment operation fails."""

    def __init__(self, message: str, payment_id: str | None = None, reason: str | None = None):
        self.payment_id = payment_id
        self.reason = reason
        details: dict[str, Any] = {}
        if payment_id:
            details["payment_id"] = payment_id
        if reason:
            details["reason"] = reason
        super().__init__(message, "PAYMENT_ERROR", details)


class IntegrationException(DomainException):
    """Raised when an external integration fails."""

    status_code = 502

    def __init__(self, service: str, message: str, original_error: Exception | None = None):
        self.service = service
        self.original_error = original_error
        details: dict[str, Any] = {"service": service}
        if original_error:
            details["original_error"] = str(original_error)
        super().__init__(message, "INTEGRATION_ERROR", details)


class PayloadTooLargeException(DomainException):
    """Raised when a request body exceeds the configured limit."""

    status_code = 413

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__("Request entity too large", "PAYLOAD_TOO_LARGE", {"limit": limit})
