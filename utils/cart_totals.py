"""
Cart derivations.

Pure functions over an immutable CartStateDTO / CartItemDTO. Nothing here reads
the live cart, so every value is trivially reproducible from a literal state
and always consistent with the items it was given.

Invariant kept by these functions:
    get_total(state) == sum(get_item_total(i) for i in state.items)
                     == get_subtotal(state) + get_modifiers_total(state)
"""

from decimal import Decimal
from typing import Iterable

from models.cart import CartItemDTO, CartOrgSummaryDTO, CartStateDTO, SelectedModifierDTO

ZERO = Decimal("0")


def generate_cart_item_id(product_id: str, modifiers: Iterable[SelectedModifierDTO]) -> str:
    """
    Deterministic cart line id: product id plus the SORTED option ids of all groups.

    Same product + same selections → same id (lines merge), any difference in
    selections → a different line. Group order and option order do not matter.

    Examples:
        >>> generate_cart_item_id("burger", [])
        'burger'
        >>> # options "sauce-bbq" and "size-l" selected in two groups
        >>> generate_cart_item_id("burger", modifiers)
        'burger_sauce-bbq-size-l'
    """
    option_ids = sorted(
        option.option_id
        for modifier in modifiers
        for option in modifier.selected_options
    )
    if not option_ids:
        return product_id
    return f"{product_id}_{'-'.join(option_ids)}"


def calculate_modifier_total(modifiers: Iterable[SelectedModifierDTO]) -> Decimal:
    """Sum of price adjustments of every selected option, for ONE unit."""
    return sum(
        (option.price_adjustment for modifier in modifiers for option in modifier.selected_options),
        ZERO
    )


def get_item_modifiers_total(item: CartItemDTO) -> Decimal:
    return calculate_modifier_total(item.modifiers)


def get_item_total(item: CartItemDTO) -> Decimal:
    return (item.price_at_add + get_item_modifiers_total(item)) * item.quantity


def get_item_count(state: CartStateDTO) -> int:
    return sum(item.quantity for item in state.items)


def get_unique_item_count(state: CartStateDTO) -> int:
    return len(state.items)


def get_subtotal(state: CartStateDTO) -> Decimal:
    """Base prices only (price_at_add × quantity), modifiers excluded."""
    return sum((item.price_at_add * item.quantity for item in state.items), ZERO)


def get_modifiers_total(state: CartStateDTO) -> Decimal:
    return sum((get_item_modifiers_total(item) * item.quantity for item in state.items), ZERO)


def get_total(state: CartStateDTO) -> Decimal:
    return get_subtotal(state) + get_modifiers_total(state)


def is_empty(state: CartStateDTO) -> bool:
    return len(state.items) == 0


def find_item(state: CartStateDTO, item_id: str) -> CartItemDTO | None:
    for item in state.items:
        if item.id == item_id:
            return item
    return None


def is_product_in_cart(state: CartStateDTO, product_id: str) -> bool:
    return any(item.product_id == product_id for item in state.items)


def get_product_quantity(state: CartStateDTO, product_id: str) -> int:
    """Quantity of a product across all of its modifier combinations."""
    return sum(item.quantity for item in state.items if item.product_id == product_id)


def get_cart_summary_for_org(state: CartStateDTO, organization_id: str | None) -> CartOrgSummaryDTO:
    """
    Cart badge for a restaurant page.

    A cart filled at another restaurant (or without context) reports nothing,
    so the badge never shows foreign items.
    """
    if not organization_id or state.context is None or state.context.organization_id != organization_id:
        return CartOrgSummaryDTO()

    item_count = get_item_count(state)
    return CartOrgSummaryDTO(
        has_items=item_count > 0,
        item_count=item_count,
        total=get_total(state)
    )
