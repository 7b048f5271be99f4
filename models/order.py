import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field
from sqlalchemy import Column, String, Text, Numeric, DateTime, func, CheckConstraint, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from enums.order_status import OrderStatus, PaymentStatus
from enums.order_type import OrderType
from models.base import Base
from models.cart import SelectedModifierDTO

# Limits shared by the order table and the checkout form
CUSTOMER_NAME_MAX = 100
CUSTOMER_PHONE_MAX = 20
CUSTOMER_EMAIL_MAX = 255
CUSTOMER_NOTES_MAX = 500
ITEM_QUANTITY_MIN = 1
ITEM_QUANTITY_MAX = 99
SPECIAL_INSTRUCTIONS_MAX = 300
PRICE_MAX = Decimal("1000000")


class Order(Base):
    __tablename__ = 'orders'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    organization_id = Column(String(36), nullable=False, index=True)
    # Human-readable, unique per organization: ORD-YYYYMMDD-NNNN
    order_number = Column(String(32), nullable=False)
    table_id = Column(String(36), nullable=True)
    table_name = Column(String(100), nullable=True)
    customer_name = Column(String(CUSTOMER_NAME_MAX), nullable=True)
    customer_phone = Column(String(CUSTOMER_PHONE_MAX), nullable=True)
    customer_email = Column(String(CUSTOMER_EMAIL_MAX), nullable=True)
    customer_notes = Column(Text, nullable=True)
    order_type = Column(SQLEnum(OrderType), nullable=False, default=OrderType.DINE_IN)
    status = Column(SQLEnum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    payment_status = Column(SQLEnum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
    subtotal = Column(Numeric(10, 2), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="TRY")
    source = Column(String(32), nullable=False, default="qr_menu")
    created_at = Column(DateTime, default=datetime.now)

    items = relationship('OrderItem', back_populates='order', cascade='all, delete-orphan')

    __table_args__ = (
        UniqueConstraint('organization_id', 'order_number', name='unique_order_number_per_org'),
        CheckConstraint('subtotal >= 0', name='check_order_subtotal_non_negative'),
        CheckConstraint('total_amount >= 0', name='check_order_total_non_negative'),
    )


class OrderDTO(BaseModel):
    id: str | None = None
    organization_id: str
    order_number: str | None = None
    table_id: str | None = None
    table_name: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    customer_notes: str | None = None
    order_type: OrderType = OrderType.DINE_IN
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    subtotal: Decimal
    total_amount: Decimal
    currency: str = "TRY"
    source: str = "qr_menu"
    created_at: datetime | None = None


class OrderCreatedDTO(BaseModel):
    """What the order-creation collaborator returns to the checkout flow."""
    order_id: str
    order_number: str
    status: OrderStatus = OrderStatus.PENDING


class CreateOrderItemRequestDTO(BaseModel):
    product_id: str = Field(min_length=1)
    product_name: str = Field(min_length=1)
    product_description: str | None = None
    product_image_url: str | None = None
    quantity: int = Field(ge=ITEM_QUANTITY_MIN, le=ITEM_QUANTITY_MAX)
    unit_price: Decimal = Field(ge=0, le=PRICE_MAX)
    # Signed: an option can lower the price ("no cheese -5")
    modifier_total: Decimal = Decimal("0")
    item_total: Decimal = Field(ge=0)
    currency: str = Field(default="TRY", min_length=3, max_length=3)
    price_ledger_id: str | None = None
    selected_modifiers: list[SelectedModifierDTO] = []
    special_instructions: str | None = Field(default=None, max_length=SPECIAL_INSTRUCTIONS_MAX)


class CreateOrderRequestDTO(BaseModel):
    """Server-side validation of a PreparedCartDTO before it becomes an order."""
    organization_id: str = Field(min_length=1)
    table_id: str | None = None
    table_name: str | None = None
    customer_name: str | None = Field(default=None, max_length=CUSTOMER_NAME_MAX)
    customer_phone: str | None = Field(default=None, max_length=CUSTOMER_PHONE_MAX)
    customer_email: str | None = Field(default=None, max_length=CUSTOMER_EMAIL_MAX)
    customer_notes: str | None = Field(default=None, max_length=CUSTOMER_NOTES_MAX)
    order_type: OrderType = OrderType.DINE_IN
    subtotal: Decimal = Field(ge=0, le=PRICE_MAX)
    total_amount: Decimal = Field(ge=0, le=PRICE_MAX)
    currency: str = Field(default="TRY", min_length=3, max_length=3)
    items: list[CreateOrderItemRequestDTO] = Field(min_length=1)
