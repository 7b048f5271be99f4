from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, selectinload

from db import session_execute
from models.modifier import ModifierOptionDTO, ProductModifier, ProductModifierDTO


class ModifierRepository:

    @staticmethod
    async def get_by_product_id(product_id: str, session: Session | AsyncSession) -> list[ProductModifierDTO]:
        """
        Modifier groups of a product with their options, both in sort_order.

        Options are eager-loaded (selectinload) so the DTOs can be built
        without lazy loads on an AsyncSession.
        """
        stmt = (select(ProductModifier)
                .where(ProductModifier.product_id == product_id)
                .options(selectinload(ProductModifier.options))
                .order_by(ProductModifier.sort_order, ProductModifier.name))
        modifiers = await session_execute(stmt, session)
        result = []
        for modifier in modifiers.scalars().all():
            options = sorted(modifier.options, key=lambda o: (o.sort_order, o.name))
            result.append(ProductModifierDTO(
                id=modifier.id,
                product_id=modifier.product_id,
                name=modifier.name,
                is_required=modifier.is_required,
                min_selections=modifier.min_selections,
                max_selections=modifier.max_selections,
                sort_order=modifier.sort_order,
                is_visible=modifier.is_visible,
                options=[ModifierOptionDTO.model_validate(option, from_attributes=True) for option in options]
            ))
        return result
