"""
Cart Repository Implementation
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.commerce.application.ports import ICartRepository
from app.domains.commerce.domain.entities import Cart, CartItem
from app.models.db import CartModel

logger = logging.getLogger(__name__)


class SQLAlchemyCartRepository(ICartRepository):
    """
    SQLAlchemy implementation of cart repository.

    Lines are stored as a JSONB array on the cart row.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, user_id: UUID) -> CartModel | None:
        result = await self.session.execute(select(CartModel).where(CartModel.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_by_user(self, user_id: UUID) -> Cart | None:
        model = await self._get_model(user_id)
        return self._to_entity(model) if model else None

    async def save(self, cart: Cart) -> Cart:
        cart.recalculate()
        model = await self._get_model(cart.user_id)  # type: ignore[arg-type]
        if model is None:
            model = CartModel(id=cart.id, user_id=cart.user_id)
            self.session.add(model)
        model.items = [i.to_dict() for i in cart.items]
        model.coupon_code = cart.coupon_code
        model.discount = cart.discount
        model.item_count = cart.item_count
        model.subtotal = cart.subtotal
        model.total = cart.total
        await self.session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: CartModel) -> Cart:
        cart = Cart(
            id=model.id,
            user_id=model.user_id,
            items=[CartItem.from_dict(i) for i in (model.items or [])],
            coupon_code=model.coupon_code,
            discount=float(model.discount or 0),
            item_count=model.item_count or 0,
            subtotal=float(model.subtotal or 0),
            total=float(model.total or 0),
        )
        if model.created_at is not None:
            cart.created_at = model.created_at
        if model.updated_at is not None:
            cart.updated_at = model.updated_at
        return cart
