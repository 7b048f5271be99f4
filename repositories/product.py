from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.product import Product, ProductDTO


class ProductRepository:

    @staticmethod
    async def get_by_id(product_id: str, session: Session | AsyncSession) -> ProductDTO | None:
        stmt = select(Product).where(Product.id == product_id)
        product = await session_execute(stmt, session)
        product = product.scalar()
        if product is not None:
            return ProductDTO.model_validate(product, from_attributes=True)
        return None

    @staticmethod
    async def create(product_dto: ProductDTO, session: Session | AsyncSession) -> str:
        product = Product(**product_dto.model_dump(exclude_none=True))
        session.add(product)
        await session_flush(session)
        return product.id

    @staticmethod
    async def update_price(product_id: str, price: Decimal, session: Session | AsyncSession) -> None:
        stmt = update(Product).where(Product.id == product_id).values(price=price)
        await session_execute(stmt, session)
