import logging
import threading
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

import config
from exceptions.cart import CartPersistenceException
from models.cart import (
    CART_SNAPSHOT_VERSION,
    AddItemInputDTO,
    CartContextDTO,
    CartItemDTO,
    CartOrgSummaryDTO,
    CartSnapshotDTO,
    CartStateDTO,
    CartValidationResultDTO,
    PreparedCartDTO,
    SelectedModifierDTO,
)
from repositories.cart_snapshot import CartSnapshotStore
from services.cart_submission import CartSubmissionService
from services.cart_validation import CartValidationService
from utils import cart_totals

logger = logging.getLogger(__name__)

CartListener = Callable[[CartStateDTO], None]


class CartService:
    """
    Client-side cart engine for the QR menu.

    Holds one frozen CartStateDTO. Every mutation is a read-modify-write of
    the whole state under a re-entrant lock: the new state is published, then
    saved to the snapshot store (best effort), then handed to subscribers.

    Mutations never raise for valid input. Unknown item ids are no-ops.

    Usage:
        cart = CartService(store=FileCartSnapshotRepository("data/cart-store.json"))
        cart.set_context(context)
        cart.add_item(add_input)
        payload = cart.prepare_for_submission()
    """

    def __init__(
        self,
        store: CartSnapshotStore | None = None,
        default_currency: str | None = None,
        now: Callable[[], datetime] | None = None
    ):
        """
        Args:
            store: Snapshot store, None keeps the cart in memory only
            default_currency: Currency for lines when neither input nor context names one
            now: Clock used for added_at (UTC), injectable for tests
        """
        self._store = store
        self._default_currency = default_currency or config.DEFAULT_CURRENCY
        self._now = now or (lambda: datetime.now(timezone.utc))
        self._lock = threading.RLock()
        self._listeners: list[CartListener] = []
        self._state = self._rehydrate()

    # ========================================================================
    # State, subscriptions, persistence
    # ========================================================================

    @property
    def state(self) -> CartStateDTO:
        return self._state

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """
        Register a listener called with every new state.

        Returns:
            Callable that removes the listener again (idempotent)
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _rehydrate(self) -> CartStateDTO:
        if self._store is None:
            return CartStateDTO()
        try:
            snapshot = self._store.load()
        except CartPersistenceException as e:
            # Covers CartSnapshotCorruptedException too
            logger.warning(f"Could not restore cart from {e.store_key}, starting empty: {e.reason}")
            return CartStateDTO()
        if snapshot is None:
            return CartStateDTO()
        if snapshot.version != CART_SNAPSHOT_VERSION:
            logger.warning(
                f"Discarding cart snapshot version {snapshot.version} "
                f"(expected {CART_SNAPSHOT_VERSION}) from {self._store.key}"
            )
            return CartStateDTO()
        state = snapshot.to_state()
        logger.debug(f"Cart restored: {len(state.items)} lines")
        return state

    def _persist(self, state: CartStateDTO) -> None:
        if self._store is None:
            return
        try:
            self._store.save(CartSnapshotDTO.from_state(state))
        except CartPersistenceException as e:
            # In-memory state stays authoritative
            logger.warning(f"Cart snapshot not saved to {e.store_key}: {e.reason}")

    def _update(self, fn: Callable[[CartStateDTO], CartStateDTO]) -> CartStateDTO:
        with self._lock:
            new_state = fn(self._state)
            if new_state is self._state:
                return new_state
            self._state = new_state
            self._persist(new_state)
            listeners = list(self._listeners)
            for listener in listeners:
                try:
                    listener(new_state)
                except Exception:
                    logger.exception(f"Cart listener {listener!r} failed")
            return new_state

    @staticmethod
    def _replace_items(state: CartStateDTO, items) -> CartStateDTO:
        return state.model_copy(update={"items": tuple(items)})

    # ========================================================================
    # Context
    # ========================================================================

    def set_context(self, context: CartContextDTO) -> None:
        """Switch the cart to a restaurant/table. Items are kept."""
        self._update(lambda s: s.model_copy(update={"context": context}))

    def clear_context(self) -> None:
        """Drop the restaurant context AND every item."""
        self._update(lambda s: s.model_copy(update={"context": None, "items": ()}))

    def update_table_context(self, table_id: str | None, table_name: str | None) -> None:
        """Move to another table of the same restaurant. No-op without context."""

        def fn(s: CartStateDTO) -> CartStateDTO:
            if s.context is None:
                return s
            context = s.context.model_copy(update={"table_id": table_id, "table_name": table_name})
            return s.model_copy(update={"context": context})

        self._update(fn)

    # ========================================================================
    # Items
    # ========================================================================

    def add_item(self, item_input: AddItemInputDTO) -> None:
        """
        Add a product line, or merge into the line with identical selections.

        On merge only the quantity changes: the locked price_at_add,
        price_ledger_id and added_at of the existing line are kept even when
        the input carries a different price.
        """
        item_id = cart_totals.generate_cart_item_id(item_input.product_id, item_input.modifiers)

        def fn(s: CartStateDTO) -> CartStateDTO:
            existing = cart_totals.find_item(s, item_id)
            if existing is not None:
                if existing.price_at_add != item_input.price:
                    logger.info(
                        f"Cart line {item_id} keeps locked price {existing.price_at_add} "
                        f"(current price {item_input.price})"
                    )
                merged = existing.model_copy(update={"quantity": existing.quantity + item_input.quantity})
                return self._replace_items(s, (merged if i.id == item_id else i for i in s.items))

            currency = item_input.currency or (s.context.currency if s.context else None) or self._default_currency
            new_item = CartItemDTO(
                id=item_id,
                product_id=item_input.product_id,
                product_name=item_input.product_name,
                product_description=item_input.product_description,
                image_url=item_input.image_url,
                price_at_add=item_input.price,
                price_ledger_id=item_input.price_ledger_id,
                currency=currency,
                quantity=item_input.quantity,
                modifiers=item_input.modifiers,
                special_instructions=item_input.special_instructions,
                added_at=self._now()
            )
            return self._replace_items(s, (*s.items, new_item))

        self._update(fn)

    def remove_item(self, item_id: str) -> None:
        def fn(s: CartStateDTO) -> CartStateDTO:
            if cart_totals.find_item(s, item_id) is None:
                return s
            return self._replace_items(s, (i for i in s.items if i.id != item_id))

        self._update(fn)

    def increment_quantity(self, item_id: str) -> None:
        def fn(s: CartStateDTO) -> CartStateDTO:
            item = cart_totals.find_item(s, item_id)
            if item is None:
                return s
            return self._set_quantity(s, item, item.quantity + 1)

        self._update(fn)

    def decrement_quantity(self, item_id: str) -> None:
        """Quantity - 1; the line disappears when it reaches zero."""

        def fn(s: CartStateDTO) -> CartStateDTO:
            item = cart_totals.find_item(s, item_id)
            if item is None:
                return s
            return self._set_quantity(s, item, item.quantity - 1)

        self._update(fn)

    def update_item_quantity(self, item_id: str, quantity: int) -> None:
        """Set an absolute quantity; zero or negative removes the line."""

        def fn(s: CartStateDTO) -> CartStateDTO:
            item = cart_totals.find_item(s, item_id)
            if item is None:
                return s
            return self._set_quantity(s, item, quantity)

        self._update(fn)

    def _set_quantity(self, s: CartStateDTO, item: CartItemDTO, quantity: int) -> CartStateDTO:
        if quantity <= 0:
            return self._replace_items(s, (i for i in s.items if i.id != item.id))
        updated = item.model_copy(update={"quantity": quantity})
        return self._replace_items(s, (updated if i.id == item.id else i for i in s.items))

    def update_item_modifiers(self, item_id: str, modifiers: tuple[SelectedModifierDTO, ...]) -> None:
        """
        Change the selections of a line.

        The line id follows its selections. If another line already has the
        new selections, the two lines are merged: quantities are summed into
        the other line (its price and added_at win) and this line disappears.
        Otherwise the line is renamed in place, keeping its price and added_at.
        """
        modifiers = tuple(modifiers)

        def fn(s: CartStateDTO) -> CartStateDTO:
            item = cart_totals.find_item(s, item_id)
            if item is None:
                return s
            new_id = cart_totals.generate_cart_item_id(item.product_id, modifiers)
            target = cart_totals.find_item(s, new_id) if new_id != item_id else None

            if target is not None:
                merged = target.model_copy(update={"quantity": target.quantity + item.quantity})
                return self._replace_items(
                    s,
                    (merged if i.id == new_id else i for i in s.items if i.id != item_id)
                )

            renamed = item.model_copy(update={"id": new_id, "modifiers": modifiers})
            return self._replace_items(s, (renamed if i.id == item_id else i for i in s.items))

        self._update(fn)

    def update_item_special_instructions(self, item_id: str, special_instructions: str | None) -> None:
        def fn(s: CartStateDTO) -> CartStateDTO:
            item = cart_totals.find_item(s, item_id)
            if item is None:
                return s
            updated = item.model_copy(update={"special_instructions": special_instructions})
            return self._replace_items(s, (updated if i.id == item_id else i for i in s.items))

        self._update(fn)

    # ========================================================================
    # Customer info & UI
    # ========================================================================

    def set_customer_name(self, name: str) -> None:
        self._update(lambda s: s.model_copy(update={"customer_name": name}))

    def set_customer_phone(self, phone: str) -> None:
        self._update(lambda s: s.model_copy(update={"customer_phone": phone}))

    def set_customer_notes(self, notes: str) -> None:
        self._update(lambda s: s.model_copy(update={"customer_notes": notes}))

    def set_cart_open(self, is_open: bool) -> None:
        self._update(lambda s: s.model_copy(update={"is_cart_open": is_open}))

    def toggle_cart(self) -> None:
        self._update(lambda s: s.model_copy(update={"is_cart_open": not s.is_cart_open}))

    # ========================================================================
    # Whole cart
    # ========================================================================

    def clear_cart(self) -> None:
        """Empty items and customer fields. The restaurant context stays."""
        self._update(self._cleared)

    def reset_for_new_order(self) -> None:
        """Called after a successful order; same effect as clear_cart()."""
        self._update(self._cleared)
        logger.debug("Cart reset for a new order")

    @staticmethod
    def _cleared(s: CartStateDTO) -> CartStateDTO:
        return s.model_copy(update={
            "items": (),
            "customer_name": "",
            "customer_phone": "",
            "customer_notes": "",
        })

    # ========================================================================
    # Derived values (see utils.cart_totals)
    # ========================================================================

    def get_item_count(self) -> int:
        return cart_totals.get_item_count(self._state)

    def get_unique_item_count(self) -> int:
        return cart_totals.get_unique_item_count(self._state)

    def get_item_modifiers_total(self, item: CartItemDTO) -> Decimal:
        return cart_totals.get_item_modifiers_total(item)

    def get_item_total(self, item: CartItemDTO) -> Decimal:
        return cart_totals.get_item_total(item)

    def get_subtotal(self) -> Decimal:
        return cart_totals.get_subtotal(self._state)

    def get_modifiers_total(self) -> Decimal:
        return cart_totals.get_modifiers_total(self._state)

    def get_total(self) -> Decimal:
        return cart_totals.get_total(self._state)

    def is_empty(self) -> bool:
        return cart_totals.is_empty(self._state)

    def find_item(self, item_id: str) -> CartItemDTO | None:
        return cart_totals.find_item(self._state, item_id)

    def is_product_in_cart(self, product_id: str) -> bool:
        return cart_totals.is_product_in_cart(self._state, product_id)

    def get_product_quantity(self, product_id: str) -> int:
        return cart_totals.get_product_quantity(self._state, product_id)

    def get_cart_summary_for_org(self, organization_id: str | None) -> CartOrgSummaryDTO:
        return cart_totals.get_cart_summary_for_org(self._state, organization_id)

    # ========================================================================
    # Checkout helpers
    # ========================================================================

    def validate_cart(self, lang: str | None = None) -> CartValidationResultDTO:
        return CartValidationService.validate_cart(self._state, lang=lang)

    def has_required_modifiers_selected(self, item: CartItemDTO) -> bool:
        return CartValidationService.has_required_modifiers_selected(item)

    def prepare_for_submission(self) -> PreparedCartDTO | None:
        return CartSubmissionService.prepare_for_submission(self._state)
