from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.price_ledger import PriceLedger, PriceLedgerDTO


class PriceLedgerRepository:
    """
    Access to the price_ledger table.

    There is deliberately no update or delete method: the ledger is insert-only.
    """

    @staticmethod
    async def record_price_change(entry_dto: PriceLedgerDTO, session: Session | AsyncSession) -> str:
        """
        Insert a new ledger entry.

        Returns:
            Id of the new entry
        """
        entry = PriceLedger(**entry_dto.model_dump(exclude_none=True))
        session.add(entry)
        await session_flush(session)
        return entry.id

    @staticmethod
    async def get_current_price(product_id: str, session: Session | AsyncSession) -> PriceLedgerDTO | None:
        """Latest entry already in effect (effective_from <= now)."""
        return await PriceLedgerRepository.get_price_at_time(product_id, datetime.now(), session)

    @staticmethod
    async def get_price_at_time(
        product_id: str,
        at: datetime,
        session: Session | AsyncSession
    ) -> PriceLedgerDTO | None:
        stmt = (select(PriceLedger)
                .where(PriceLedger.product_id == product_id,
                       PriceLedger.effective_from <= at)
                .order_by(PriceLedger.effective_from.desc(), PriceLedger.created_at.desc())
                .limit(1))
        entry = await session_execute(stmt, session)
        entry = entry.scalar()
        if entry is not None:
            return PriceLedgerDTO.model_validate(entry, from_attributes=True)
        return None

    @staticmethod
    async def get_price_history(
        product_id: str,
        session: Session | AsyncSession,
        limit: int = 50,
        offset: int = 0
    ) -> list[PriceLedgerDTO]:
        """Entries of a product, newest first."""
        stmt = (select(PriceLedger)
                .where(PriceLedger.product_id == product_id)
                .order_by(PriceLedger.effective_from.desc(), PriceLedger.created_at.desc())
                .limit(limit)
                .offset(offset))
        entries = await session_execute(stmt, session)
        return [PriceLedgerDTO.model_validate(entry, from_attributes=True) for entry in entries.scalars().all()]

    @staticmethod
    async def get_by_id(ledger_id: str, session: Session | AsyncSession) -> PriceLedgerDTO | None:
        stmt = select(PriceLedger).where(PriceLedger.id == ledger_id)
        entry = await session_execute(stmt, session)
        entry = entry.scalar()
        if entry is not None:
            return PriceLedgerDTO.model_validate(entry, from_attributes=True)
        return None
