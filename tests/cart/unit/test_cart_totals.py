"""
Unit Tests: cart derivations (utils/cart_totals.py)

Pure functions over literal states, no engine involved.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from models.cart import CartItemDTO, CartStateDTO
from utils import cart_totals


def _item(item_id, price, quantity, modifiers=(), product_id=None):
    return CartItemDTO(
        id=item_id,
        product_id=product_id or item_id.split("_")[0],
        product_name=item_id,
        price_at_add=Decimal(price),
        currency="TRY",
        quantity=quantity,
        modifiers=tuple(modifiers),
        added_at=datetime(2026, 3, 15, tzinfo=timezone.utc)
    )


@pytest.fixture
def state(modifier_factory, context):
    extras = modifier_factory("extras", "Ekstra", [("cheese", "7.50"), ("bacon", "12.00")])
    no_onion = modifier_factory("onion", "Soğan", [("no-onion", "-2.00")])
    return CartStateDTO(
        context=context,
        items=(
            _item("burger_bacon-cheese", "100.00", 2, [extras]),
            _item("burger_no-onion", "100.00", 1, [no_onion]),
            _item("ayran", "25.00", 3),
        )
    )


class TestGenerateCartItemId:

    def test_without_options_is_product_id(self, modifier_factory):
        assert cart_totals.generate_cart_item_id("burger", []) == "burger"
        # Groups without a selected option do not change the id
        assert cart_totals.generate_cart_item_id("burger", [modifier_factory("size", "Boyut")]) == "burger"

    def test_sorted_across_groups(self, modifier_factory):
        modifiers = [
            modifier_factory("size", "Boyut", [("size-l", "10")]),
            modifier_factory("sauce", "Sos", [("sauce-bbq", "0")]),
        ]
        assert cart_totals.generate_cart_item_id("burger", modifiers) == "burger_sauce-bbq-size-l"
        assert cart_totals.generate_cart_item_id("burger", list(reversed(modifiers))) == "burger_sauce-bbq-size-l"

    def test_different_selections_differ(self, modifier_factory):
        large = [modifier_factory("size", "Boyut", [("size-l", "10")])]
        small = [modifier_factory("size", "Boyut", [("size-s", "0")])]
        assert cart_totals.generate_cart_item_id("burger", large) != cart_totals.generate_cart_item_id("burger", small)


class TestTotals:

    def test_item_totals(self, state):
        burger, no_onion_burger, ayran = state.items
        assert cart_totals.get_item_modifiers_total(burger) == Decimal("19.50")
        assert cart_totals.get_item_total(burger) == Decimal("239.00")
        assert cart_totals.get_item_total(no_onion_burger) == Decimal("98.00")
        assert cart_totals.get_item_total(ayran) == Decimal("75.00")

    def test_cart_totals_are_consistent(self, state):
        subtotal = cart_totals.get_subtotal(state)
        modifiers_total = cart_totals.get_modifiers_total(state)
        total = cart_totals.get_total(state)

        assert subtotal == Decimal("375.00")
        assert modifiers_total == Decimal("37.00")
        assert total == subtotal + modifiers_total
        assert total == sum(cart_totals.get_item_total(item) for item in state.items)
        assert total == Decimal("412.00")

    def test_counts(self, state):
        assert cart_totals.get_item_count(state) == 6
        assert cart_totals.get_unique_item_count(state) == 3
        assert cart_totals.get_product_quantity(state, "burger") == 3
        assert cart_totals.is_product_in_cart(state, "ayran")
        assert not cart_totals.is_product_in_cart(state, "cola")

    def test_empty_cart(self):
        empty = CartStateDTO()
        assert cart_totals.is_empty(empty)
        assert cart_totals.get_total(empty) == Decimal("0")
        assert cart_totals.get_item_count(empty) == 0
        assert cart_totals.find_item(empty, "burger") is None


class TestSummaryForOrg:

    def test_same_org(self, state):
        summary = cart_totals.get_cart_summary_for_org(state, "org-1")
        assert summary.has_items is True
        assert summary.item_count == 6
        assert summary.total == Decimal("412.00")

    @pytest.mark.parametrize("organization_id", ["org-2", None, ""])
    def test_other_org_or_missing(self, state, organization_id):
        summary = cart_totals.get_cart_summary_for_org(state, organization_id)
        assert summary.has_items is False
        assert summary.item_count == 0
        assert summary.total == Decimal("0")

    def test_no_context(self, state):
        summary = cart_totals.get_cart_summary_for_org(state.model_copy(update={"context": None}), "org-1")
        assert summary.has_items is False
