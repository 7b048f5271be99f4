from pydantic import BaseModel, Field, field_validator

from models.cart import CartValidationErrorDTO
from models.order import OrderCreatedDTO, CUSTOMER_NAME_MAX, CUSTOMER_PHONE_MAX, CUSTOMER_NOTES_MAX


class CheckoutFormDTO(BaseModel):
    """Customer fields as typed in the checkout form. All optional, trimmed."""
    customer_name: str = Field(default="", max_length=CUSTOMER_NAME_MAX)
    customer_phone: str = Field(default="", max_length=CUSTOMER_PHONE_MAX)
    customer_notes: str = Field(default="", max_length=CUSTOMER_NOTES_MAX)

    @field_validator("customer_name", "customer_phone", "customer_notes", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value


class CheckoutResultDTO(BaseModel):
    success: bool
    # invalid_cart | invalid_customer_info | empty_cart | order_failed
    reason: str | None = None
    message: str | None = None
    order: OrderCreatedDTO | None = None
    errors: list[CartValidationErrorDTO] = []
