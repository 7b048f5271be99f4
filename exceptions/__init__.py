"""
Custom exceptions for the e-menu ordering core.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the application.

Exception Hierarchy:
--------------------
EMenuException (base)
├── CartException
│   └── CartPersistenceException
│       └── CartSnapshotCorruptedException
├── OrderException
│   ├── OrderPersistenceException
│   └── OrderValidationException
└── ProductException
    ├── ProductNotFoundException
    └── InvalidPriceException

Usage:
------
Services raise specific exceptions:
    raise ProductNotFoundException(product_id="...")

The checkout flow catches the base class and reports a failed result:
    try:
        order = await order_creator(prepared)
    except EMenuException as e:
        return CheckoutResultDTO(success=False, reason="order_failed", ...)
"""

from .base import EMenuException
from .cart import CartException, CartPersistenceException, CartSnapshotCorruptedException
from .order import OrderException, OrderPersistenceException, OrderValidationException
from .product import ProductException, ProductNotFoundException, InvalidPriceException

__all__ = [
    # Base
    'EMenuException',

    # Cart
    'CartException',
    'CartPersistenceException',
    'CartSnapshotCorruptedException',

    # Order
    'OrderException',
    'OrderPersistenceException',
    'OrderValidationException',

    # Product
    'ProductException',
    'ProductNotFoundException',
    'InvalidPriceException',
]
