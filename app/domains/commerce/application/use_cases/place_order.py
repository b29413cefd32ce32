"""
Place Order Use Case

Turns the user's cart into an order inside one unit of work.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from app.core.domain import (
    BusinessRuleViolationException,
    EventOutbox,
    InsufficientStockException,
    ValidationException,
)
from app.domains.catalog.application.ports import IProductRepository
from app.domains.commerce.application.dto import PlaceOrderRequest
from app.domains.commerce.application.ports import ICartRepository, ICouponRepository, IOrderRepository
from app.domains.commerce.application.services import CartService, CouponService
from app.domains.commerce.domain.entities import Cart, Order, OrderItem
from app.domains.commerce.domain.services import calculate_shipping_cost
from app.domains.commerce.domain.value_objects import PaymentMethod, ShippingMethod
from app.domains.identity.application.ports import IUserRepository
from app.domains.identity.domain.entities import User

logger = logging.getLogger(__name__)


@dataclass
class ShippingRates:
    free_threshold: float = 5000
    standard: float = 60
    express: float = 150


class PlaceOrderUseCase:
    """
    Use Case: Place Order

    Responsibilities:
    - Re-validate the cart (price and stock) and its coupon
    - Take stock with guarded updates; any shortfall aborts the whole order
    - Snapshot lines into the order and compute shipping
    - Clear the cart and bump user and product counters
    - Record OrderPlaced for post-commit notification
    """

    def __init__(
        self,
        cart_repository: ICartRepository,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        coupon_repository: ICouponRepository,
        user_repository: IUserRepository,
        cart_service: CartService,
        coupon_service: CouponService,
        outbox: EventOutbox,
        shipping_rates: ShippingRates | None = None,
    ):
        self.cart_repository = cart_repository
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.coupon_repository = coupon_repository
        self.user_repository = user_repository
        self.cart_service = cart_service
        self.coupon_service = coupon_service
        self.outbox = outbox
        self.shipping_rates = shipping_rates or ShippingRates()

    async def execute(self, user: User, request: PlaceOrderRequest) -> Order:
        """
        Place an order from the user's cart.

        Raises:
            ValidationException: Empty cart or failed cart validation
            BusinessRuleViolationException: Coupon no longer usable
            InsufficientStockException: Stock taken by a concurrent order
        """
        user_id: UUID = user.id  # type: ignore[assignment]
        cart = await self.cart_repository.get_by_user(user_id)
        if cart is None or cart.is_empty:
            raise ValidationException("Cart is empty")

        validation = await self.cart_service.validate_cart(user_id)
        if not validation.valid:
            raise ValidationException(f"Cart validation failed: {', '.join(validation.issues)}")
        cart = await self.cart_service.get_cart(user_id)

        discount, coupon_code = await self._redeem_coupon(cart, user, request.coupon_code)
        await self._take_stock(cart)

        shipping_method = ShippingMethod(request.shipping_method or ShippingMethod.STANDARD.value)
        shipping_cost = calculate_shipping_cost(
            shipping_method,
            cart.subtotal,
            self.shipping_rates.free_threshold,
            self.shipping_rates.standard,
            self.shipping_rates.express,
        )

        order = Order.place(
            user_id=user_id,
            customer_name=user.full_name,
            items=[
                OrderItem(
                    product_id=i.product_id,
                    name=i.name,
                    price=i.price,
                    quantity=i.quantity,
                    image=i.image,
                    variant_id=i.variant_id,
                    variant_sku=i.variant_sku,
                    variant_attributes=dict(i.variant_attributes),
                )
                for i in cart.items
            ],
            shipping_address={"country": "Bangladesh", **request.shipping_address},
            payment_method=PaymentMethod(request.payment_method),
            shipping_method=shipping_method,
            shipping_cost=shipping_cost,
            discount=discount,
            coupon_code=coupon_code,
            customer_note=request.customer_note,
        )
        order = await self.order_repository.create(order)

        cart.clear()
        await self.cart_repository.save(cart)

        await self.user_repository.record_purchase(user_id, order.total)
        for item in order.items:
            await self.product_repository.increment_sales(item.product_id, item.quantity)

        self.outbox.collect_from(order)
        logger.info(f"Order placed: {order.order_number} by {user_id} total={order.total}")
        return order

    async def _redeem_coupon(self, cart: Cart, user: User, requested_code: str | None) -> tuple[float, str | None]:
        code = requested_code or cart.coupon_code
        if not code:
            return 0.0, None

        quote = await self.coupon_service.quote(code, cart, user.id)  # type: ignore[arg-type]
        if not await self.coupon_repository.increment_usage(quote.coupon.id):  # type: ignore[arg-type]
            raise BusinessRuleViolationException("coupon_invalid", "Invalid or expired coupon")
        return quote.discount, quote.coupon.code

    async def _take_stock(self, cart: Cart) -> None:
        products = {p.id: p for p in await self.product_repository.get_many([i.product_id for i in cart.items])}
        for item in cart.items:
            product = products.get(item.product_id)
            if product is None or not product.track_quantity:
                continue
            if not await self.product_repository.adjust_stock(item.product_id, -item.quantity, variant_id=item.variant_id):
                variant = product.find_variant(variant_id=item.variant_id) if item.variant_id else None
                raise InsufficientStockException(
                    str(item.product_id),
                    item.quantity,
                    product.available_quantity(variant),
                    f'Insufficient stock for "{item.name}"',
                )


__all__ = ["PlaceOrderUseCase", "ShippingRates"]
