import uuid
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, String, Text, Numeric, Integer, Boolean, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from models.base import Base


class ProductModifier(Base):
    """
    Modifier group of a product (e.g. "Size", "Extras", "Sauce").

    max_selections: 1 = radio, >1 = checkboxes, 0 = unbounded.
    """
    __tablename__ = 'product_modifiers'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    organization_id = Column(String(36), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_required = Column(Boolean, nullable=False, default=False)
    min_selections = Column(Integer, nullable=False, default=0)
    max_selections = Column(Integer, nullable=False, default=1)
    sort_order = Column(Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)

    product = relationship('Product', back_populates='modifiers')
    options = relationship('ModifierOption', back_populates='modifier', cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint('min_selections >= 0', name='check_modifier_min_non_negative'),
        CheckConstraint('max_selections >= 0', name='check_modifier_max_non_negative'),
    )


class ModifierOption(Base):
    __tablename__ = 'modifier_options'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    organization_id = Column(String(36), nullable=False, index=True)
    modifier_id = Column(String(36), ForeignKey('product_modifiers.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price_adjustment = Column(Numeric(10, 2), nullable=False, default=0)
    sort_order = Column(Integer, nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)
    is_visible = Column(Boolean, nullable=False, default=True)
    is_available = Column(Boolean, nullable=False, default=True)

    modifier = relationship('ProductModifier', back_populates='options')


class ModifierOptionDTO(BaseModel):
    id: str | None = None
    modifier_id: str
    name: str
    price_adjustment: Decimal = Decimal("0")
    sort_order: int = 0
    is_default: bool = False
    is_visible: bool = True
    is_available: bool = True


class ProductModifierDTO(BaseModel):
    id: str | None = None
    product_id: str
    name: str
    is_required: bool = False
    min_selections: int = 0
    max_selections: int = 1
    sort_order: int = 0
    is_visible: bool = True
    options: list[ModifierOptionDTO] = []
