"""
Wishlist Repository Implementation
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.engagement.application.ports import IWishlistRepository
from app.domains.engagement.domain.entities import Wishlist, WishlistItem
from app.models.db import WishlistModel


class SQLAlchemyWishlistRepository(IWishlistRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, user_id: UUID) -> WishlistModel | None:
        result = await self.session.execute(
            select(WishlistModel).where(WishlistModel.user_id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_user(self, user_id: UUID) -> Wishlist | None:
        model = await self._get_model(user_id)
        return self._to_entity(model) if model else None

    async def save(self, wishlist: Wishlist) -> Wishlist:
        model = await self._get_model(wishlist.user_id)  # type: ignore[arg-type]
        if model is None:
            model = WishlistModel(id=wishlist.id, user_id=wishlist.user_id)
            self.session.add(model)
        model.items = [i.to_dict() for i in wishlist.items]
        await self.session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: WishlistModel) -> Wishlist:
        wishlist = Wishlist(
            id=model.id,
            user_id=model.user_id,
            items=[WishlistItem.from_dict(i) for i in (model.items or [])],
        )
        if model.created_at is not None:
            wishlist.created_at = model.created_at
        if model.updated_at is not None:
            wishlist.updated_at = model.updated_at
        return wishlist
