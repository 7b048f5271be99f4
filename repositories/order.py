from datetime import datetime
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.order import Order, OrderDTO
from models.orderItem import OrderItem, OrderItemDTO

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "ORD"


class OrderRepository:

    @staticmethod
    async def create(order_dto: OrderDTO, item_dtos: list[OrderItemDTO], session: Session | AsyncSession) -> str:
        """
        Insert an order together with its items (flush only, caller commits).

        Returns:
            Id of the new order
        """
        order = Order(**order_dto.model_dump(exclude_none=True))
        session.add(order)
        await session_flush(session)

        for item_dto in item_dtos:
            item_data = item_dto.model_dump(exclude_none=True)
            item_data['order_id'] = order.id
            session.add(OrderItem(**item_data))
        await session_flush(session)
        return order.id

    @staticmethod
    async def next_order_number(
        organization_id: str,
        session: Session | AsyncSession,
        now: datetime | None = None
    ) -> str:
        """
        Next human-readable order number of an organization for the day.

        Format: ORD-YYYYMMDD-NNNN, counter restarts every day.

        Examples:
            ORD-20260315-0001
            ORD-20260315-0002
        """
        now = now or datetime.now()
        prefix = f"{ORDER_NUMBER_PREFIX}-{now.strftime('%Y%m%d')}-"
        stmt = (select(func.max(Order.order_number))
                .where(Order.organization_id == organization_id,
                       Order.order_number.like(f"{prefix}%")))
        last_number = await session_execute(stmt, session)
        last_number = last_number.scalar()
        sequence = int(last_number.rsplit("-", 1)[1]) + 1 if last_number else 1
        return f"{prefix}{sequence:04d}"

    @staticmethod
    async def get_by_id(order_id: str, session: Session | AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.id == order_id)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        return None

    @staticmethod
    async def get_items(order_id: str, session: Session | AsyncSession) -> list[OrderItemDTO]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id)
        items = await session_execute(stmt, session)
        return [OrderItemDTO.model_validate(item, from_attributes=True) for item in items.scalars().all()]
