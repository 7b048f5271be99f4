from enums.l10n_section import L10nSection
from models.cart import CartItemDTO, CartStateDTO, CartValidationErrorDTO, CartValidationResultDTO, SelectedModifierDTO
from utils.localizator import Localizator


class CartValidationService:
    """
    Checkout-time check of modifier cardinality rules.

    Advisory only: cart mutations never consult it. The rules come from the
    SelectedModifierDTO itself (captured from the catalog when the customer
    chose), not from the current catalog.
    """

    @staticmethod
    def validate_cart(state: CartStateDTO, lang: str | None = None) -> CartValidationResultDTO:
        """
        Validate every modifier group of every cart line.

        One error is produced per violated rule, so a single group can yield
        two errors (required and below minimum).

        Rules:
        1. is_required and nothing selected
        2. fewer selections than min_selections
        3. more selections than max_selections (only when max_selections > 0)

        Args:
            state: Cart state to validate
            lang: Optional language for the messages (defaults to config.MENU_LANGUAGE)

        Returns:
            CartValidationResultDTO with is_valid = not errors
        """
        errors: list[CartValidationErrorDTO] = []
        for item in state.items:
            for modifier in item.modifiers:
                errors.extend(CartValidationService._validate_modifier(item, modifier, lang))
        return CartValidationResultDTO(is_valid=len(errors) == 0, errors=errors)

    @staticmethod
    def has_required_modifiers_selected(item: CartItemDTO) -> bool:
        """True when every required group has at least min_selections options."""
        return all(
            len(modifier.selected_options) >= modifier.min_selections
            for modifier in item.modifiers
            if modifier.is_required
        )

    @staticmethod
    def _validate_modifier(
        item: CartItemDTO,
        modifier: SelectedModifierDTO,
        lang: str | None
    ) -> list[CartValidationErrorDTO]:
        selected_count = len(modifier.selected_options)
        messages = []

        if modifier.is_required and selected_count == 0:
            messages.append(
                Localizator.get_text(L10nSection.CART, "modifier_required", lang=lang).format(
                    modifier_name=modifier.modifier_name
                )
            )

        if selected_count < modifier.min_selections:
            messages.append(
                Localizator.get_text(L10nSection.CART, "modifier_min_selections", lang=lang).format(
                    modifier_name=modifier.modifier_name,
                    min_selections=modifier.min_selections
                )
            )

        if modifier.max_selections > 0 and selected_count > modifier.max_selections:
            messages.append(
                Localizator.get_text(L10nSection.CART, "modifier_max_selections", lang=lang).format(
                    modifier_name=modifier.modifier_name,
                    max_selections=modifier.max_selections
                )
            )

        return [
            CartValidationErrorDTO(
                item_id=item.id,
                product_name=item.product_name,
                modifier_name=modifier.modifier_name,
                message=message
            )
            for message in messages
        ]
