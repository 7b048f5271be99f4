import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, String, Text, Numeric, DateTime, ForeignKey, CheckConstraint, Enum as SQLEnum, func, Index
from sqlalchemy.orm import relationship

from enums.price_change_reason import PriceChangeReason
from models.base import Base


class PriceLedger(Base):
    """
    Immutable audit trail of product prices.

    INSERT-ONLY: a price change is a new row, never an update. Cart lines keep
    the id of the row that was current when they were added (price_ledger_id),
    and the order items copy it, so every sold price can be traced back.
    """
    __tablename__ = 'price_ledger'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    organization_id = Column(String(36), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey('products.id', ondelete='RESTRICT'), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="TRY")
    previous_price = Column(Numeric(10, 2), nullable=True)
    reason = Column(SQLEnum(PriceChangeReason), nullable=False, default=PriceChangeReason.INITIAL)
    notes = Column(Text, nullable=True)
    effective_from = Column(DateTime, nullable=False, default=datetime.now)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=func.now())

    product = relationship('Product', back_populates='price_entries')

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_ledger_price_non_negative'),
        CheckConstraint('previous_price IS NULL OR previous_price >= 0', name='check_ledger_previous_price_non_negative'),
        Index('idx_price_ledger_product_effective', 'product_id', 'effective_from'),
    )


class PriceLedgerDTO(BaseModel):
    id: str | None = None
    organization_id: str
    product_id: str
    price: Decimal
    currency: str = "TRY"
    previous_price: Decimal | None = None
    reason: PriceChangeReason = PriceChangeReason.INITIAL
    notes: str | None = None
    effective_from: datetime | None = None
    created_by: str | None = None
    created_at: datetime | None = None


class PriceQuoteDTO(BaseModel):
    """Price handed to the cart at add time. price_ledger_id None = base price fallback."""
    product_id: str
    price: Decimal
    currency: str
    price_ledger_id: str | None = None
