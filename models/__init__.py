"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
which is required for relationships to work correctly.
"""

from models.base import Base
from models.product import Product
from models.price_ledger import PriceLedger
from models.modifier import ProductModifier, ModifierOption
from models.order import Order
from models.orderItem import OrderItem

__all__ = [
    'Base',
    'Product',
    'PriceLedger',
    'ProductModifier',
    'ModifierOption',
    'Order',
    'OrderItem',
]
