import uuid
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, String, Text, Numeric, Integer, ForeignKey, CheckConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from enums.order_status import OrderStatus
from models.base import Base


class OrderItem(Base):
    __tablename__ = 'order_items'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String(36), ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(String(36), nullable=False)
    # Product data is copied, the menu may change after the order is placed
    product_name = Column(String(255), nullable=False)
    product_description = Column(Text, nullable=True)
    product_image_url = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    modifier_total = Column(Numeric(10, 2), nullable=False, default=0)
    item_total = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="TRY")
    price_ledger_id = Column(String(36), ForeignKey('price_ledger.id'), nullable=True)

    # Selected Modifiers (JSON)
    # Full SelectedModifier list including the group rules at selection time
    # Format: [{"modifier_id": "...", "modifier_name": "Size", "is_required": true,
    #           "min_selections": 1, "max_selections": 1,
    #           "selected_options": [{"option_id": "...", "option_name": "Large", "price_adjustment": "10.00"}]}]
    selected_modifiers = Column(Text, nullable=False, default="[]")
    special_instructions = Column(Text, nullable=True)
    status = Column(SQLEnum(OrderStatus), nullable=False, default=OrderStatus.PENDING)

    order = relationship('Order', back_populates='items')

    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_order_item_quantity_positive'),
    )


class OrderItemDTO(BaseModel):
    id: str | None = None
    order_id: str | None = None
    product_id: str
    product_name: str
    product_description: str | None = None
    product_image_url: str | None = None
    quantity: int
    unit_price: Decimal
    modifier_total: Decimal = Decimal("0")
    item_total: Decimal
    currency: str = "TRY"
    price_ledger_id: str | None = None
    selected_modifiers: str = "[]"
    special_instructions: str | None = None
    status: OrderStatus = OrderStatus.PENDING
