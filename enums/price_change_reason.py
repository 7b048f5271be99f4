from enum import Enum


class PriceChangeReason(str, Enum):
    INITIAL = "initial"                  # First price when the product is created
    PRICE_INCREASE = "price_increase"
    PRICE_DECREASE = "price_decrease"
    PROMOTION = "promotion"
    CORRECTION = "correction"            # Corrects a previous entry (explain in notes)
    SEASONAL = "seasonal"
    COST_ADJUSTMENT = "cost_adjustment"  # Ingredient cost changes
    TAX_CHANGE = "tax_change"
    OTHER = "other"
