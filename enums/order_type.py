from enum import Enum


class OrderType(str, Enum):
    DINE_IN = "dine_in"      # Table present in cart context
    TAKEAWAY = "takeaway"    # No table (counter / QR at the entrance)
    DELIVERY = "delivery"    # Accepted by the order table, never inferred by the cart
