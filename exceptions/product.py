"""
Product and price-ledger exceptions.
"""

from .base import EMenuException


class ProductException(EMenuException):
    """Base exception for product-related errors."""
    pass


class ProductNotFoundException(ProductException):
    """Raised when product is not found in database."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product {product_id} not found",
            details={'product_id': product_id}
        )
        self.product_id = product_id


class InvalidPriceException(ProductException):
    """Raised when a price change would write a negative or out-of-range price."""

    def __init__(self, product_id: str, price):
        super().__init__(
            f"Invalid price {price} for product {product_id}",
            details={'product_id': product_id, 'price': str(price)}
        )
        self.product_id = product_id
        self.price = price
