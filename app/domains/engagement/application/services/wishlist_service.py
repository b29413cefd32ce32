"""
Wishlist Service

Keeps `wishlistCount` on products and `totalWishlistItems` on users in step
with wishlist contents.
"""

import logging
from typing import Any
from uuid import UUID

from app.core.domain import DomainException, EntityNotFoundException
from app.domains.catalog.application.ports import IProductRepository
from app.domains.catalog.domain.entities import Product
from app.domains.commerce.application.services import CartService
from app.domains.engagement.application.dto import MoveToCartResult
from app.domains.engagement.application.ports import IWishlistRepository
from app.domains.engagement.domain.entities import Wishlist
from app.domains.identity.application.ports import IUserRepository

logger = logging.getLogger(__name__)


class WishlistService:
    def __init__(
        self,
        wishlist_repository: IWishlistRepository,
        product_repository: IProductRepository,
        user_repository: IUserRepository,
        cart_service: CartService,
    ):
        self.wishlist_repository = wishlist_repository
        self.product_repository = product_repository
        self.user_repository = user_repository
        self.cart_service = cart_service

    async def _require_product(self, product_id: UUID) -> Product:
        product = await self.product_repository.get_by_id(product_id)
        if not product:
            raise EntityNotFoundException("Product", product_id, "Product not found")
        return product

    async def _store(self, wishlist: Wishlist) -> Wishlist:
        wishlist = await self.wishlist_repository.save(wishlist)
        await self.user_repository.set_wishlist_total(wishlist.user_id, len(wishlist))  # type: ignore[arg-type]
        return wishlist

    async def get_wishlist(self, user_id: UUID) -> Wishlist:
        """The user's wishlist, created on first access."""
        wishlist = await self.wishlist_repository.get_by_user(user_id)
        if wishlist is None:
            wishlist = await self.wishlist_repository.save(Wishlist.for_user(user_id))
        return wishlist

    async def render(self, wishlist: Wishlist) -> dict[str, Any]:
        """Wishlist with product summaries embedded in its items."""
        products = await self.product_repository.get_many([i.product_id for i in wishlist.items])
        return wishlist.to_dict({p.id: p.to_summary() for p in products})  # type: ignore[misc]

    async def get_count(self, user_id: UUID) -> int:
        wishlist = await self.wishlist_repository.get_by_user(user_id)
        return len(wishlist) if wishlist else 0

    async def contains(self, user_id: UUID, product_id: UUID) -> bool:
        wishlist = await self.wishlist_repository.get_by_user(user_id)
        return bool(wishlist and wishlist.contains(product_id))

    async def add(
        self, user_id: UUID, product_id: UUID, notify_on_sale: bool = True, notify_on_stock: bool = True
    ) -> Wishlist:
        """
        Raises:
            EntityNotFoundException: Unknown product
            BusinessRuleViolationException: Product already saved
        """
        await self._require_product(product_id)
        wishlist = await self.get_wishlist(user_id)
        wishlist.add(product_id, notify_on_sale, notify_on_stock)
        wishlist = await self._store(wishlist)
        await self.product_repository.adjust_wishlist_count(product_id, 1)
        return wishlist

    async def remove(self, user_id: UUID, product_id: UUID) -> Wishlist:
        wishlist = await self.get_wishlist(user_id)
        if wishlist.remove(product_id):
            wishlist = await self._store(wishlist)
            await self.product_repository.adjust_wishlist_count(product_id, -1)
        return wishlist

    async def toggle(self, user_id: UUID, product_id: UUID) -> tuple[bool, Wishlist]:
        """Add the product when absent, remove it otherwise; returns (added, wishlist)."""
        await self._require_product(product_id)
        wishlist = await self.get_wishlist(user_id)
        if wishlist.remove(product_id):
            added, delta = False, -1
        else:
            wishlist.add(product_id)
            added, delta = True, 1
        wishlist = await self._store(wishlist)
        await self.product_repository.adjust_wishlist_count(product_id, delta)
        return added, wishlist

    async def clear(self, user_id: UUID) -> None:
        wishlist = await self.wishlist_repository.get_by_user(user_id)
        if wishlist is None:
            return
        for product_id in wishlist.clear():
            await self.product_repository.adjust_wishlist_count(product_id, -1)
        await self._store(wishlist)

    async def update_preferences(
        self,
        user_id: UUID,
        product_id: UUID,
        notify_on_sale: bool | None = None,
        notify_on_stock: bool | None = None,
    ) -> Wishlist:
        wishlist = await self.wishlist_repository.get_by_user(user_id)
        if wishlist is None:
            raise EntityNotFoundException("Wishlist", user_id, "Wishlist not found")
        wishlist.set_preferences(product_id, notify_on_sale, notify_on_stock)
        return await self.wishlist_repository.save(wishlist)

    async def move_all_to_cart(self, user_id: UUID) -> MoveToCartResult:
        """
        Add one unit of every active, in-stock wishlist product to the cart.

        Products that cannot be added are reported by name; the wishlist is
        left untouched.
        """
        result = MoveToCartResult()
        wishlist = await self.wishlist_repository.get_by_user(user_id)
        if not wishlist or not wishlist.items:
            return result

        products = {p.id: p for p in await self.product_repository.get_many([i.product_id for i in wishlist.items])}
        for item in wishlist.items:
            product = products.get(item.product_id)
            if product is None:
                logger.warning(f"Wishlist of {user_id} references missing product {item.product_id}")
                continue
            if not (product.is_purchasable() and product.is_in_stock):
                result.failed.append(product.name)
                continue
            try:
                await self.cart_service.add_item(user_id, product.id, 1)  # type: ignore[arg-type]
                result.added += 1
            except DomainException as e:
                logger.info(f"Could not move {product.id} to cart for {user_id}: {e.message}")
                result.failed.append(product.name)
        return result


__all__ = ["WishlistService"]
