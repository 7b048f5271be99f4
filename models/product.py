import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, String, Text, Numeric, Boolean, DateTime, func, CheckConstraint
from sqlalchemy.orm import relationship

from models.base import Base


class Product(Base):
    """
    Menu product.

    `price` is the current base price shown on the menu. Every change of it is
    mirrored by an insert into price_ledger (see PricingService.change_price),
    which is the source the cart locks its prices against.
    """
    __tablename__ = 'products'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    organization_id = Column(String(36), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="TRY")
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=func.now())

    price_entries = relationship('PriceLedger', back_populates='product')
    modifiers = relationship('ProductModifier', back_populates='product', cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_product_price_non_negative'),
    )


class ProductDTO(BaseModel):
    id: str | None = None
    organization_id: str
    name: str
    description: str | None = None
    image_url: str | None = None
    price: Decimal
    currency: str = "TRY"
    is_available: bool = True
    created_at: datetime | None = None
