from enums.order_type import OrderType
from models.cart import CartItemDTO, CartStateDTO, PreparedCartDTO, PreparedCartItemDTO
from utils.cart_totals import get_item_modifiers_total, get_item_total, get_subtotal, get_total


class CartSubmissionService:

    @staticmethod
    def prepare_for_submission(state: CartStateDTO) -> PreparedCartDTO | None:
        """
        Build the immutable order payload from a cart state.

        Performs no I/O and does NOT validate modifiers: the checkout flow must
        call CartValidationService.validate_cart() first.

        Order type is inferred from the table: table_id present → dine-in,
        otherwise takeaway.

        Args:
            state: Cart state to convert

        Returns:
            PreparedCartDTO, or None when the cart has no context or no items
        """
        context = state.context
        if context is None or not state.items:
            return None

        return PreparedCartDTO(
            organization_id=context.organization_id,
            table_id=context.table_id,
            table_name=context.table_name,
            customer_name=state.customer_name,
            customer_phone=state.customer_phone,
            customer_notes=state.customer_notes,
            order_type=OrderType.DINE_IN if context.table_id else OrderType.TAKEAWAY,
            subtotal=get_subtotal(state),
            total_amount=get_total(state),
            currency=context.currency,
            items=tuple(CartSubmissionService._prepare_item(item) for item in state.items)
        )

    @staticmethod
    def _prepare_item(item: CartItemDTO) -> PreparedCartItemDTO:
        return PreparedCartItemDTO(
            product_id=item.product_id,
            product_name=item.product_name,
            product_description=item.product_description,
            product_image_url=item.image_url,
            quantity=item.quantity,
            unit_price=item.price_at_add,
            modifier_total=get_item_modifiers_total(item),
            item_total=get_item_total(item),
            currency=item.currency,
            price_ledger_id=item.price_ledger_id,
            selected_modifiers=item.modifiers,
            special_instructions=item.special_instructions
        )
