"""
PricingService Unit Tests

Tests the price ledger lookups and price changes.
Uses in-memory SQLite database for testing.

Run with:
    pytest tests/pricing/unit/test_pricing_service.py -v
    pytest tests/pricing/unit/test_pricing_service.py --cov=services.pricing  # with coverage
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from enums.price_change_reason import PriceChangeReason
from exceptions.product import InvalidPriceException, ProductNotFoundException
from models.price_ledger import PriceLedger
from models.product import Product
from repositories.price_ledger import PriceLedgerRepository
from services.cart import CartService
from services.pricing import PricingService


@pytest.fixture
def product(session):
    """Product with base price 100 and no ledger entry"""
    product = Product(organization_id="org-1", name="Adana Kebap", description="Acılı", price=Decimal("100.00"), currency="TRY")
    session.add(product)
    session.commit()
    return product


@pytest.fixture
def product_with_ledger(session, product):
    """Same product with an initial ledger entry at 110"""
    entry = PriceLedger(
        organization_id="org-1",
        product_id=product.id,
        price=Decimal("110.00"),
        currency="TRY",
        reason=PriceChangeReason.INITIAL,
        effective_from=datetime.now() - timedelta(days=1)
    )
    session.add(entry)
    session.commit()
    return product, entry


class TestGetPriceQuote:

    @pytest.mark.asyncio
    async def test_quote_from_ledger(self, session, product_with_ledger):
        product, entry = product_with_ledger

        quote = await PricingService.get_price_quote(product.id, session)

        assert quote.price == Decimal("110.00")
        assert quote.currency == "TRY"
        assert quote.price_ledger_id == entry.id

    @pytest.mark.asyncio
    async def test_fallback_to_base_price(self, session, product, caplog):
        with caplog.at_level("WARNING"):
            quote = await PricingService.get_price_quote(product.id, session)

        assert quote.price == Decimal("100.00")
        assert quote.price_ledger_id is None
        assert "No price ledger entry" in caplog.text

    @pytest.mark.asyncio
    async def test_future_entry_is_ignored(self, session, product_with_ledger):
        product, entry = product_with_ledger
        session.add(PriceLedger(
            organization_id="org-1",
            product_id=product.id,
            price=Decimal("150.00"),
            previous_price=Decimal("110.00"),
            reason=PriceChangeReason.SEASONAL,
            effective_from=datetime.now() + timedelta(days=7)
        ))
        session.commit()

        quote = await PricingService.get_price_quote(product.id, session)

        assert quote.price == Decimal("110.00")
        assert quote.price_ledger_id == entry.id

    @pytest.mark.asyncio
    async def test_unknown_product(self, session):
        with pytest.raises(ProductNotFoundException):
            await PricingService.get_price_quote("missing", session)


class TestChangePrice:

    @pytest.mark.asyncio
    async def test_records_ledger_entry_and_updates_product(self, session, product_with_ledger):
        product, entry = product_with_ledger

        new_id = await PricingService.change_price(
            product.id, Decimal("125.00"), PriceChangeReason.PRICE_INCREASE, session,
            notes="Et fiyatları", created_by="user-1"
        )
        session.commit()

        new_entry = await PriceLedgerRepository.get_by_id(new_id, session)
        assert new_entry.price == Decimal("125.00")
        assert new_entry.previous_price == Decimal("110.00")
        assert new_entry.reason == PriceChangeReason.PRICE_INCREASE
        assert new_entry.created_by == "user-1"

        session.refresh(product)
        assert product.price == Decimal("125.00")

        quote = await PricingService.get_price_quote(product.id, session)
        assert quote.price_ledger_id == new_id

        # Old entry untouched
        old_entry = await PriceLedgerRepository.get_by_id(entry.id, session)
        assert old_entry.price == Decimal("110.00")

    @pytest.mark.asyncio
    async def test_history_newest_first(self, session, product_with_ledger):
        product, _ = product_with_ledger
        await PricingService.change_price(product.id, Decimal("120.00"), PriceChangeReason.PRICE_INCREASE, session)
        await PricingService.change_price(product.id, Decimal("99.00"), PriceChangeReason.PROMOTION, session)
        session.commit()

        history = await PriceLedgerRepository.get_price_history(product.id, session)

        assert [entry.price for entry in history] == [Decimal("99.00"), Decimal("120.00"), Decimal("110.00")]
        assert len(await PriceLedgerRepository.get_price_history(product.id, session, limit=1, offset=1)) == 1

    @pytest.mark.asyncio
    async def test_negative_price_rejected(self, session, product):
        with pytest.raises(InvalidPriceException):
            await PricingService.change_price(product.id, Decimal("-1"), PriceChangeReason.CORRECTION, session)

    @pytest.mark.asyncio
    async def test_cart_keeps_locked_price(self, session, product_with_ledger):
        product, entry = product_with_ledger
        cart = CartService(store=None)
        cart.add_item(await PricingService.build_add_item_input(product.id, session, quantity=2))

        await PricingService.change_price(product.id, Decimal("200.00"), PriceChangeReason.PRICE_INCREASE, session)
        session.commit()
        cart.add_item(await PricingService.build_add_item_input(product.id, session))

        item = cart.find_item(product.id)
        assert item.quantity == 3
        assert item.price_at_add == Decimal("110.00")
        assert item.price_ledger_id == entry.id
        assert cart.get_total() == Decimal("330.00")


class TestBuildAddItemInput:

    @pytest.mark.asyncio
    async def test_copies_product_and_quote(self, session, product_with_ledger, modifier_factory):
        product, entry = product_with_ledger
        spicy = modifier_factory("spice", "Acı", [("hot", "0")])

        add_input = await PricingService.build_add_item_input(
            product.id, session, quantity=2, modifiers=(spicy,), special_instructions="bol soğan"
        )

        assert add_input.product_name == "Adana Kebap"
        assert add_input.product_description == "Acılı"
        assert add_input.price == Decimal("110.00")
        assert add_input.price_ledger_id == entry.id
        assert add_input.quantity == 2
        assert add_input.modifiers == (spicy,)
        assert add_input.special_instructions == "bol soğan"
