"""
CheckoutService Unit Tests

Checkout flow with a mocked order creator (AsyncMock), plus one run against
the real OrderService on in-memory SQLite.
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from exceptions.order import OrderValidationException
from models.order import OrderCreatedDTO
from services.cart import CartService
from services.checkout import CheckoutService
from services.order import OrderService


@pytest.fixture
def cart(context, add_input_factory):
    cart = CartService(store=None)
    cart.set_context(context)
    cart.add_item(add_input_factory("burger", price="100.00", quantity=2))
    cart.set_customer_name("  Ayşe  ")
    return cart


@pytest.fixture
def order_creator():
    return AsyncMock(return_value=OrderCreatedDTO(order_id="order-1", order_number="ORD-20260315-0001"))


class TestCheckout:

    @pytest.mark.asyncio
    async def test_success_resets_cart(self, cart, order_creator, context):
        result = await CheckoutService(cart, order_creator).checkout(lang="en")

        assert result.success is True
        assert result.order.order_number == "ORD-20260315-0001"
        assert result.message == "Order received: ORD-20260315-0001"
        prepared = order_creator.await_args.args[0]
        assert prepared.customer_name == "Ayşe"
        assert prepared.total_amount == Decimal("200.00")

        assert cart.is_empty()
        assert cart.state.customer_name == ""
        assert cart.state.context == context

    @pytest.mark.asyncio
    async def test_invalid_cart(self, cart, order_creator, add_input_factory, modifier_factory):
        cart.add_item(add_input_factory("pizza", modifiers=[
            modifier_factory("size", "Boyut", is_required=True, min_selections=1, max_selections=1)
        ]))

        result = await CheckoutService(cart, order_creator).checkout()

        assert result.success is False
        assert result.reason == "invalid_cart"
        assert len(result.errors) == 2
        order_creator.assert_not_awaited()
        assert cart.get_unique_item_count() == 2

    @pytest.mark.asyncio
    async def test_invalid_customer_info(self, cart, order_creator):
        cart.set_customer_phone("0" * 21)

        result = await CheckoutService(cart, order_creator).checkout()

        assert result.reason == "invalid_customer_info"
        order_creator.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_cart(self, cart, order_creator):
        cart.clear_cart()

        result = await CheckoutService(cart, order_creator).checkout(lang="tr")

        assert result.reason == "empty_cart"
        assert result.message == "Sipariş vermek için sepetinize ürün ekleyin"
        order_creator.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_order_failure_keeps_cart(self, cart, order_creator):
        order_creator.side_effect = OrderValidationException("items", "too many")

        result = await CheckoutService(cart, order_creator).checkout()

        assert result.success is False
        assert result.reason == "order_failed"
        assert cart.get_item_count() == 2
        assert cart.state.customer_name == "  Ayşe  "

    @pytest.mark.asyncio
    async def test_database_error_keeps_cart(self, cart, order_creator):
        order_creator.side_effect = IntegrityError(
            "INSERT INTO orders", {}, Exception("UNIQUE constraint failed: orders.order_number")
        )

        result = await CheckoutService(cart, order_creator).checkout()

        assert result.success is False
        assert result.reason == "order_failed"
        assert cart.get_item_count() == 2
        assert cart.state.customer_name == "  Ayşe  "

    @pytest.mark.asyncio
    async def test_double_submit_creates_one_order(self, cart, order_creator):
        checkout = CheckoutService(cart, order_creator)

        first, second = await asyncio.gather(checkout.checkout(), checkout.checkout())

        assert first.success is True
        assert second.reason == "empty_cart"
        order_creator.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_with_order_service(self, cart, session):
        async def create_order(prepared):
            return await OrderService.create_order(prepared, session)

        result = await CheckoutService(cart, create_order).checkout()

        assert result.success is True
        assert result.order.order_number.startswith("ORD-")
        assert cart.is_empty()
