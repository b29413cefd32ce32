"""
Commerce API Routes

Cart, coupon and order endpoints. Customers act on their own cart and
orders; staff manage coupons and move orders along their lifecycle.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_current_user, get_pagination, require_admin
from app.api.responses import paginated_response, success_response
from app.core.domain import Pagination
from app.domains.commerce.api.dependencies import (
    get_cart_service,
    get_coupon_service,
    get_order_filters,
    get_order_service,
    get_place_order_use_case,
)
from app.domains.commerce.api.schemas import (
    AddToCartBody,
    AdminNoteBody,
    ApplyCouponBody,
    CancelOrderBody,
    CouponCreate,
    CouponUpdate,
    OrderStatusBody,
    PaymentStatusBody,
    PlaceOrderBody,
    UpdateCartItemBody,
)
from app.domains.commerce.application.dto import OrderFilters, PlaceOrderRequest
from app.domains.commerce.application.services import CartService, CouponService, OrderService
from app.domains.commerce.application.use_cases import PlaceOrderUseCase
from app.domains.identity.domain.entities import User

logger = logging.getLogger(__name__)

cart_router = APIRouter(prefix="/cart", tags=["Cart"])
coupons_router = APIRouter(prefix="/coupons", tags=["Coupons"])
orders_router = APIRouter(prefix="/orders", tags=["Orders"])


# ============================================================================
# Cart
# ============================================================================


@cart_router.get("")
async def get_cart(
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    cart = await service.get_cart(user.id)
    return success_response(cart.to_dict(), "Cart fetched successfully")


@cart_router.get("/count")
async def cart_count(
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    return success_response({"count": await service.get_count(user.id)}, "Cart count fetched")


@cart_router.get("/validate")
async def validate_cart(
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    result = await service.validate_cart(user.id)
    return success_response(result.to_dict(), "Cart is valid" if result.valid else "Cart has issues")


@cart_router.post("")
async def add_to_cart(
    body: AddToCartBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    cart = await service.add_item(
        user.id,
        body.product_id,
        quantity=body.quantity,
        variant_id=body.variant_id,
        variant_sku=body.variant_sku,
    )
    return success_response(cart.to_dict(), "Item added to cart")


@cart_router.post("/coupon")
async def apply_cart_coupon(
    body: ApplyCouponBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    cart = await service.apply_coupon(user.id, body.code)
    return success_response(cart.to_dict(), "Coupon applied")


@cart_router.patch("/{item_id}")
async def update_cart_item(
    item_id: UUID,
    body: UpdateCartItemBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    cart = await service.update_item(user.id, item_id, body.quantity)
    return success_response(cart.to_dict(), "Cart updated")


@cart_router.delete("/coupon")
async def remove_cart_coupon(
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    cart = await service.remove_coupon(user.id)
    return success_response(cart.to_dict(), "Coupon removed")


@cart_router.delete("/product/{product_id}")
async def remove_product_from_cart(
    product_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    cart = await service.remove_product(user.id, product_id)
    return success_response(cart.to_dict(), "Item removed from cart")


@cart_router.delete("/{item_id}")
async def remove_cart_item(
    item_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    cart = await service.remove_item(user.id, item_id)
    return success_response(cart.to_dict(), "Item removed from cart")


@cart_router.delete("")
async def clear_cart(
    user: User = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    cart = await service.clear(user.id)
    return success_response(cart.to_dict(), "Cart cleared")


# ============================================================================
# Coupons
# ============================================================================


@coupons_router.post("/apply")
async def preview_coupon(
    body: ApplyCouponBody,
    user: User = Depends(get_current_user),  # noqa: B008
    cart_service: CartService = Depends(get_cart_service),  # noqa: B008
    service: CouponService = Depends(get_coupon_service),  # noqa: B008
):
    """Quote the discount a code would give on the current cart without applying it."""
    cart = await cart_service.get_cart(user.id)
    quote = await service.quote(body.code, cart, user.id)
    return success_response(quote.to_dict(), "Coupon applied successfully")


@coupons_router.get("", dependencies=[Depends(require_admin)])
async def list_coupons(
    is_active: bool | None = Query(None, alias="isActive"),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: CouponService = Depends(get_coupon_service),  # noqa: B008
):
    result = await service.list_coupons(pagination, is_active=is_active)
    return paginated_response(result, "Coupons retrieved successfully")


@coupons_router.get("/{coupon_id}", dependencies=[Depends(require_admin)])
async def get_coupon(
    coupon_id: UUID,
    service: CouponService = Depends(get_coupon_service),  # noqa: B008
):
    coupon = await service.get_coupon(coupon_id)
    return success_response(coupon.to_dict(), "Coupon retrieved successfully")


@coupons_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_coupon(
    body: CouponCreate,
    service: CouponService = Depends(get_coupon_service),  # noqa: B008
):
    coupon = await service.create_coupon(body.model_dump())
    return success_response(coupon.to_dict(), "Coupon created successfully")


@coupons_router.patch("/{coupon_id}", dependencies=[Depends(require_admin)])
async def update_coupon(
    coupon_id: UUID,
    body: CouponUpdate,
    service: CouponService = Depends(get_coupon_service),  # noqa: B008
):
    coupon = await service.update_coupon(coupon_id, body.model_dump(exclude_unset=True))
    return success_response(coupon.to_dict(), "Coupon updated successfully")


@coupons_router.delete("/{coupon_id}", dependencies=[Depends(require_admin)])
async def delete_coupon(
    coupon_id: UUID,
    service: CouponService = Depends(get_coupon_service),  # noqa: B008
):
    await service.delete_coupon(coupon_id)
    return success_response(None, "Coupon deleted successfully")


# ============================================================================
# Orders (customer)
# ============================================================================


@orders_router.post("", status_code=status.HTTP_201_CREATED)
async def place_order(
    body: PlaceOrderBody,
    user: User = Depends(get_current_user),  # noqa: B008
    use_case: PlaceOrderUseCase = Depends(get_place_order_use_case),  # noqa: B008
):
    request = PlaceOrderRequest(
        shipping_address=body.shipping_address.snapshot(),
        payment_method=body.payment_method,
        shipping_method=body.shipping_method,
        customer_note=body.customer_note,
        coupon_code=body.coupon_code,
    )
    order = await use_case.execute(user, request)
    return success_response(order.to_dict(), "Order placed successfully")


@orders_router.get("/my")
async def my_orders(
    status_filter: str | None = Query(None, alias="status"),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    user: User = Depends(get_current_user),  # noqa: B008
    service: OrderService = Depends(get_order_service),  # noqa: B008
):
    result = await service.list_user_orders(user.id, pagination, status_filter)
    return paginated_response(result, "Orders fetched successfully")


@orders_router.get("/my/{order_id}")
async def my_order(
    order_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: OrderService = Depends(get_order_service),  # noqa: B008
):
    order = await service.get_user_order(order_id, user.id)
    return success_response(order.to_dict(), "Order fetched successfully")


@orders_router.get("/track/{order_number}")
async def track_order(
    order_number: str,
    service: OrderService = Depends(get_order_service),  # noqa: B008
):
    order = await service.track(order_number)
    return success_response(order.to_dict(), "Order fetched successfully")


@orders_router.patch("/my/{order_id}/cancel")
async def cancel_order(
    order_id: UUID,
    body: CancelOrderBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: OrderService = Depends(get_order_service),  # noqa: B008
):
    order = await service.cancel(order_id, user.id, body.reason)
    return success_response(order.to_dict(), "Order cancelled successfully")


# ============================================================================
# Orders (admin)
# ============================================================================


@orders_router.get("/admin/all", dependencies=[Depends(require_admin)])
async def all_orders(
    filters: OrderFilters = Depends(get_order_filters),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: OrderService = Depends(get_order_service),  # noqa: B008
):
    result = await service.list_orders(pagination, filters)
    return paginated_response(result, "Orders fetched successfully")


@orders_router.get("/admin/stats", dependencies=[Depends(require_admin)])
async def order_stats(service: OrderService = Depends(get_order_service)):  # noqa: B008
    return success_response(await service.get_stats(), "Order statistics fetched successfully")


@orders_router.get("/admin/{order_id}", dependencies=[Depends(require_admin)])
async def admin_order(
    order_id: UUID,
    service: OrderService = Depends(get_order_service),  # noqa: B008
):
    order = await service.get_order(order_id)
    return success_response(order.to_dict(), "Order fetched successfully")


@orders_router.patch("/admin/{order_id}/status")
async def update_order_status(
    order_id: UUID,
    body: OrderStatusBody,
    actor: User = Depends(require_admin),  # noqa: B008
    service: OrderService = Depends(get_order_service),  # noqa: B008
):
    order = await service.update_status(
        order_id,
        body.status,
        note=body.note,
        tracking_number=body.tracking_number,
        updated_by=actor.id,
    )
    return success_response(order.to_dict(), "Order status updated successfully")


@orders_router.patch("/admin/{order_id}/payment", dependencies=[Depends(require_admin)])
async def update_payment_status(
    order_id: UUID,
    body: PaymentStatusBody,
    service: OrderService = Depends(get_order_service),  # noqa: B008
):
    order = await service.update_payment_status(order_id, body.payment_status, body.transaction_id)
    return success_response(order.to_dict(), "Payment status updated successfully")


@orders_router.patch("/admin/{order_id}/note", dependencies=[Depends(require_admin)])
async def add_admin_note(
    order_id: UUID,
    body: AdminNoteBody,
    service: OrderService = Depends(get_order_service),  # noqa: B008
):
    order = await service.add_admin_note(order_id, body.note)
    return success_response(order.to_dict(), "Note added successfully")
