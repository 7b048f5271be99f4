import asyncio
import logging
from typing import Awaitable, Callable

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from enums.l10n_section import L10nSection
from exceptions.base import EMenuException
from models.cart import PreparedCartDTO
from models.checkout import CheckoutFormDTO, CheckoutResultDTO
from models.order import OrderCreatedDTO
from services.cart import CartService
from utils.localizator import Localizator

OrderCreator = Callable[[PreparedCartDTO], Awaitable[OrderCreatedDTO]]


class CheckoutService:
    """
    Checkout flow on top of a CartService.

    Submissions are serialized with an asyncio.Lock, so a double-tapped
    "place order" button waits for the first submission and then finds an
    already emptied cart instead of creating a second order.
    """

    def __init__(self, cart_service: CartService, order_creator: OrderCreator):
        """
        Args:
            cart_service: Cart to check out
            order_creator: Async callable persisting a PreparedCartDTO, e.g. bootstrap.create_order_via_db
        """
        self.cart_service = cart_service
        self.order_creator = order_creator
        self._lock = asyncio.Lock()

    async def checkout(self, lang: str | None = None) -> CheckoutResultDTO:
        """
        Validate the cart, submit it and reset it on success.

        Flow:
        1. Modifier rules (validate_cart) → invalid_cart
        2. Customer fields (CheckoutFormDTO) → invalid_customer_info
        3. Payload (prepare_for_submission) → empty_cart
        4. Order creator → order_failed on EMenuException or a database error, cart kept for a retry
        5. Success → reset_for_new_order()

        Returns:
            CheckoutResultDTO, never raises for domain errors
        """
        async with self._lock:
            validation = self.cart_service.validate_cart(lang=lang)
            if not validation.is_valid:
                return self._failed("invalid_cart", lang, errors=validation.errors)

            state = self.cart_service.state
            try:
                form = CheckoutFormDTO(
                    customer_name=state.customer_name,
                    customer_phone=state.customer_phone,
                    customer_notes=state.customer_notes
                )
            except ValidationError as e:
                logging.info(f"Checkout rejected, customer info invalid: {e.error_count()} errors")
                return self._failed("invalid_customer_info", lang)

            prepared = self.cart_service.prepare_for_submission()
            if prepared is None:
                return self._failed("empty_cart", lang)
            prepared = prepared.model_copy(update={
                "customer_name": form.customer_name,
                "customer_phone": form.customer_phone,
                "customer_notes": form.customer_notes,
            })

            try:
                order = await self.order_creator(prepared)
            except (EMenuException, SQLAlchemyError) as e:
                logging.error(f"❌ Order creation failed for organization {prepared.organization_id}: {e!r}")
                return self._failed("order_failed", lang)

            self.cart_service.reset_for_new_order()
            return CheckoutResultDTO(
                success=True,
                message=Localizator.get_text(L10nSection.CHECKOUT, "order_created", lang=lang).format(
                    order_number=order.order_number
                ),
                order=order
            )

    @staticmethod
    def _failed(reason: str, lang: str | None, errors=None) -> CheckoutResultDTO:
        return CheckoutResultDTO(
            success=False,
            reason=reason,
            message=Localizator.get_text(L10nSection.CHECKOUT, reason, lang=lang),
            errors=errors or []
        )
