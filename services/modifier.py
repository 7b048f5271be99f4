from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from models.cart import SelectedModifierDTO, SelectedModifierOptionDTO
from repositories.modifier import ModifierRepository


class ModifierService:

    @staticmethod
    async def build_selected_modifiers(
        product_id: str,
        option_ids: Iterable[str],
        session: Session | AsyncSession
    ) -> tuple[SelectedModifierDTO, ...]:
        """
        Turn the option ids ticked on the product sheet into cart modifiers.

        One SelectedModifierDTO per visible group, in sort_order, carrying the
        group's rules as they are now. Groups without a chosen option are
        returned too (empty selection) so checkout validation can flag missing
        required choices. Unknown, hidden or unavailable option ids are ignored.

        Args:
            product_id: Product UUID
            option_ids: Chosen ModifierOption ids, any order
            session: Database session

        Returns:
            Tuple of SelectedModifierDTO, ready for AddItemInputDTO.modifiers
        """
        chosen = set(option_ids)
        groups = await ModifierRepository.get_by_product_id(product_id, session)

        selected = []
        for group in groups:
            if not group.is_visible:
                continue
            options = tuple(
                SelectedModifierOptionDTO(
                    option_id=option.id,
                    option_name=option.name,
                    price_adjustment=option.price_adjustment
                )
                for option in group.options
                if option.id in chosen and option.is_visible and option.is_available
            )
            selected.append(SelectedModifierDTO(
                modifier_id=group.id,
                modifier_name=group.name,
                is_required=group.is_required,
                min_selections=group.min_selections,
                max_selections=group.max_selections,
                selected_options=options
            ))
        return tuple(selected)
