"""
Order-related exceptions.
"""

from .base import EMenuException


class OrderException(EMenuException):
    """Base exception for order-related errors."""
    pass


class OrderPersistenceException(OrderException):
    """Raised when a validated order cannot be written (database error, order number clash)."""

    def __init__(self, organization_id: str, reason: str):
        super().__init__(
            f"Order for organization {organization_id} not saved: {reason}",
            details={'organization_id': organization_id, 'reason': reason}
        )
        self.organization_id = organization_id
        self.reason = reason


class OrderValidationException(OrderException):
    """Raised when a submitted order payload violates the order constraints."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid order data ({field}): {reason}",
            details={'field': field, 'reason': reason}
        )
        self.field = field
        self.reason = reason
