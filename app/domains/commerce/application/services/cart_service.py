"""
Cart Service

Cart lines are priced from the catalog when added; `validate_cart`
re-checks every line against current price and stock before checkout.
"""

import logging
from uuid import UUID

from app.core.domain import (
    BusinessRuleViolationException,
    DomainException,
    EntityNotFoundException,
    InsufficientStockException,
)
from app.domains.catalog.application.ports import IProductRepository
from app.domains.catalog.domain.entities import Product, ProductVariant
from app.domains.commerce.application.dto import CartValidation
from app.domains.commerce.application.ports import ICartRepository
from app.domains.commerce.application.services.coupon_service import CouponService
from app.domains.commerce.domain.entities import Cart, CartItem

logger = logging.getLogger(__name__)


class CartService:
    def __init__(
        self,
        cart_repository: ICartRepository,
        product_repository: IProductRepository,
        coupon_service: CouponService,
    ):
        self.cart_repository = cart_repository
        self.product_repository = product_repository
        self.coupon_service = coupon_service

    async def get_cart(self, user_id: UUID) -> Cart:
        """The user's cart, created on first access."""
        cart = await self.cart_repository.get_by_user(user_id)
        if cart is None:
            cart = await self.cart_repository.save(Cart.for_user(user_id))
        return cart

    async def _require_cart(self, user_id: UUID) -> Cart:
        cart = await self.cart_repository.get_by_user(user_id)
        if cart is None:
            raise EntityNotFoundException("Cart", user_id, "Cart not found")
        return cart

    async def get_count(self, user_id: UUID) -> int:
        cart = await self.cart_repository.get_by_user(user_id)
        return cart.item_count if cart else 0

    @staticmethod
    def _resolve_variant(
        product: Product, variant_id: UUID | None, variant_sku: str | None
    ) -> ProductVariant | None:
        if not (variant_id or variant_sku) or not product.has_variants:
            return None
        variant = product.find_variant(variant_id=variant_id, sku=variant_sku)
        if not variant:
            raise BusinessRuleViolationException("invalid_variant", "Invalid product variant")
        if not variant.is_active:
            raise BusinessRuleViolationException("variant_unavailable", "This variant is not available")
        return variant

    @staticmethod
    def _ensure_stock(product: Product, variant: ProductVariant | None, quantity: int) -> None:
        if not product.can_fulfil(quantity, variant):
            available = product.available_quantity(variant)
            raise InsufficientStockException(str(product.id), quantity, available)

    async def _save(self, cart: Cart, user_id: UUID) -> Cart:
        """Re-price an applied coupon against the new lines, then persist."""
        if cart.coupon_code:
            try:
                quote = await self.coupon_service.quote(cart.coupon_code, cart, user_id)
                cart.apply_coupon(quote.coupon.code, quote.discount)
            except DomainException as e:
                logger.info(f"Dropping coupon {cart.coupon_code} from cart {cart.id}: {e.message}")
                cart.remove_coupon()
        cart.recalculate()
        return await self.cart_repository.save(cart)

    async def add_item(
        self,
        user_id: UUID,
        product_id: UUID,
        quantity: int = 1,
        variant_id: UUID | None = None,
        variant_sku: str | None = None,
    ) -> Cart:
        """
        Add a line or merge it into the identical one.

        Stock is checked against the merged quantity.
        """
        product = await self.product_repository.get_by_id(product_id)
        if not product:
            raise EntityNotFoundException("Product", product_id, "Product not found")
        if not product.is_purchasable():
            raise BusinessRuleViolationException("product_unavailable", "Product is not available")

        variant = self._resolve_variant(product, variant_id, variant_sku)
        cart = await self.get_cart(user_id)

        existing = cart.find_line(product_id, variant.sku if variant else None)
        self._ensure_stock(product, variant, quantity + (existing.quantity if existing else 0))

        cart.add_line(
            CartItem(
                product_id=product_id,
                name=product.name,
                price=variant.price if variant else product.final_price,
                quantity=quantity,
                image=(variant.image if variant and variant.image else product.thumbnail),
                variant_id=variant.id if variant else None,
                variant_sku=variant.sku if variant else None,
                variant_attributes=dict(variant.attributes) if variant else {},
            )
        )
        return await self._save(cart, user_id)

    async def update_item(self, user_id: UUID, item_id: UUID, quantity: int) -> Cart:
        cart = await self._require_cart(user_id)
        item = cart.get_item(item_id)

        product = await self.product_repository.get_by_id(item.product_id)
        if product:
            variant = product.find_variant(variant_id=item.variant_id, sku=item.variant_sku) if item.variant_sku else None
            self._ensure_stock(product, variant, quantity)

        cart.set_quantity(item_id, quantity)
        return await self._save(cart, user_id)

    async def remove_item(self, user_id: UUID, item_id: UUID) -> Cart:
        cart = await self._require_cart(user_id)
        cart.remove_item(item_id)
        return await self._save(cart, user_id)

    async def remove_product(self, user_id: UUID, product_id: UUID) -> Cart:
        cart = await self._require_cart(user_id)
        cart.remove_product(product_id)
        return await self._save(cart, user_id)

    async def clear(self, user_id: UUID) -> Cart:
        cart = await self.get_cart(user_id)
        cart.clear()
        return await self.cart_repository.save(cart)

    async def apply_coupon(self, user_id: UUID, code: str) -> Cart:
        cart = await self._require_cart(user_id)
        quote = await self.coupon_service.quote(code, cart, user_id)
        cart.apply_coupon(quote.coupon.code, quote.discount)
        logger.info(f"Coupon {quote.coupon.code} applied to cart {cart.id}: -{quote.discount}")
        return await self.cart_repository.save(cart)

    async def remove_coupon(self, user_id: UUID) -> Cart:
        cart = await self._require_cart(user_id)
        cart.remove_coupon()
        return await self.cart_repository.save(cart)

    async def validate_cart(self, user_id: UUID) -> CartValidation:
        """
        Re-check every line against the catalog.

        Stale prices are corrected in place; lines are never removed.
        """
        cart = await self.cart_repository.get_by_user(user_id)
        if cart is None or cart.is_empty:
            return CartValidation(valid=True, issues=[])

        products = {p.id: p for p in await self.product_repository.get_many([i.product_id for i in cart.items])}
        issues: list[str] = []
        repriced = False

        for item in cart.items:
            product = products.get(item.product_id)
            if not product:
                issues.append(f'Product "{item.name}" is no longer available')
                continue
            if not product.is_purchasable():
                issues.append(f'Product "{item.name}" is not available')
                continue

            variant = product.find_variant(variant_id=item.variant_id, sku=item.variant_sku) if item.variant_sku else None
            current_price = variant.price if variant else product.final_price
            if item.price != current_price:
                issues.append(f'Price of "{item.name}" has changed from ৳{item.price:g} to ৳{current_price:g}')
                item.price = current_price
                repriced = True

            if not product.can_fulfil(item.quantity, variant):
                available = product.available_quantity(variant)
                if available <= 0:
                    issues.append(f'"{item.name}" is out of stock')
                else:
                    issues.append(f'Only {available} units of "{item.name}" available')

        if repriced:
            await self._save(cart, user_id)
        return CartValidation(valid=not issues, issues=issues)


__all__ = ["CartService"]
