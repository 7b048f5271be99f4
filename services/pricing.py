import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from enums.price_change_reason import PriceChangeReason
from exceptions.product import InvalidPriceException, ProductNotFoundException
from models.cart import AddItemInputDTO, SelectedModifierDTO
from models.price_ledger import PriceLedgerDTO, PriceQuoteDTO
from repositories.price_ledger import PriceLedgerRepository
from repositories.product import ProductRepository


class PricingService:
    """Price source of the cart: current prices from the price ledger."""

    @staticmethod
    async def get_price_quote(product_id: str, session: Session | AsyncSession) -> PriceQuoteDTO:
        """
        Current price of a product, as the cart will lock it.

        Algorithm:
        1. Latest price_ledger entry with effective_from <= now
        2. No entry yet (product created before the ledger existed) →
           product's base price with price_ledger_id None

        Args:
            product_id: Product UUID
            session: Database session

        Returns:
            PriceQuoteDTO with price, currency and the ledger entry id

        Raises:
            ProductNotFoundException: If the product does not exist
        """
        product = await ProductRepository.get_by_id(product_id, session)
        if product is None:
            raise ProductNotFoundException(product_id)

        entry = await PriceLedgerRepository.get_current_price(product_id, session)
        if entry is None:
            logging.warning(f"No price ledger entry for product {product_id}, using base price {product.price}")
            return PriceQuoteDTO(
                product_id=product_id,
                price=product.price,
                currency=product.currency,
                price_ledger_id=None
            )

        return PriceQuoteDTO(
            product_id=product_id,
            price=entry.price,
            currency=entry.currency,
            price_ledger_id=entry.id
        )

    @staticmethod
    async def change_price(
        product_id: str,
        new_price: Decimal,
        reason: PriceChangeReason,
        session: Session | AsyncSession,
        notes: str | None = None,
        created_by: str | None = None,
        effective_from: datetime | None = None
    ) -> str:
        """
        Record a price change in the ledger and update the product's base price.

        Carts are not touched: lines already in a cart keep the price they
        were added with.

        Returns:
            Id of the new ledger entry

        Raises:
            ProductNotFoundException: If the product does not exist
            InvalidPriceException: If new_price is negative
        """
        if new_price < 0:
            raise InvalidPriceException(product_id, new_price)

        product = await ProductRepository.get_by_id(product_id, session)
        if product is None:
            raise ProductNotFoundException(product_id)

        current = await PriceLedgerRepository.get_current_price(product_id, session)
        previous_price = current.price if current is not None else product.price

        entry_id = await PriceLedgerRepository.record_price_change(
            PriceLedgerDTO(
                organization_id=product.organization_id,
                product_id=product_id,
                price=new_price,
                currency=product.currency,
                previous_price=previous_price,
                reason=reason,
                notes=notes,
                effective_from=effective_from,
                created_by=created_by
            ),
            session
        )
        await ProductRepository.update_price(product_id, new_price, session)

        logging.info(
            f"Price of product {product_id} changed {previous_price} → {new_price} "
            f"({reason.value}), ledger entry {entry_id}"
        )
        return entry_id

    @staticmethod
    async def build_add_item_input(
        product_id: str,
        session: Session | AsyncSession,
        quantity: int = 1,
        modifiers: tuple[SelectedModifierDTO, ...] = (),
        special_instructions: str | None = None
    ) -> AddItemInputDTO:
        """
        Build what the menu passes to CartService.add_item(), with the price
        taken from get_price_quote() at this moment.

        Raises:
            ProductNotFoundException: If the product does not exist
        """
        product = await ProductRepository.get_by_id(product_id, session)
        if product is None:
            raise ProductNotFoundException(product_id)
        quote = await PricingService.get_price_quote(product_id, session)

        return AddItemInputDTO(
            product_id=product_id,
            product_name=product.name,
            product_description=product.description,
            image_url=product.image_url,
            price=quote.price,
            price_ledger_id=quote.price_ledger_id,
            currency=quote.currency,
            quantity=quantity,
            modifiers=tuple(modifiers),
            special_instructions=special_instructions
        )
