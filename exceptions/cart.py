"""
Cart-related exceptions.

The cart engine itself never raises for valid input. These are raised by the
snapshot stores and caught at the engine boundary, where a failed save only
degrades the cart to a session-only cart.
"""

from .base import EMenuException


class CartException(EMenuException):
    """Base exception for cart-related errors."""
    pass


class CartPersistenceException(CartException):
    """Raised when a cart snapshot cannot be written to or read from its store."""

    def __init__(self, store_key: str, reason: str):
        super().__init__(
            f"Cart store '{store_key}' unavailable: {reason}",
            details={'store_key': store_key, 'reason': reason}
        )
        self.store_key = store_key
        self.reason = reason


class CartSnapshotCorruptedException(CartPersistenceException):
    """Raised when a stored cart snapshot cannot be decoded."""

    def __init__(self, store_key: str, reason: str):
        super().__init__(store_key, f"corrupted snapshot ({reason})")
