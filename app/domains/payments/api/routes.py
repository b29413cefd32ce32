"""
Payments API Routes

Customer initiation, public gateway callbacks and admin bookkeeping.
Gateway callbacks answer with a redirect to the storefront.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse

from app.api.dependencies import get_current_user, get_pagination, require_admin
from app.api.responses import paginated_response, success_response
from app.core.domain import Pagination
from app.domains.identity.domain.entities import User
from app.domains.payments.api.dependencies import get_payment_filters, get_payment_service
from app.domains.payments.api.schemas import InitiatePaymentBody, RefundBody
from app.domains.payments.application.dto import PaymentFilters
from app.domains.payments.application.services import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


async def _callback_data(request: Request) -> dict[str, str]:
    """SSLCommerz posts form fields; query parameters are accepted as well."""
    data = dict(request.query_params)
    if request.method == "POST":
        form = await request.form()
        data.update({k: v for k, v in form.items() if isinstance(v, str)})
    return data


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


# ============================================================================
# Customer
# ============================================================================


@router.post("")
async def initiate_payment(
    body: InitiatePaymentBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    result = await service.initiate(user.id, body.order_id, body.method)
    return success_response(result, "Payment initiated")


@router.get("/my")
async def my_payments(
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    user: User = Depends(get_current_user),  # noqa: B008
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    result = await service.list_user_payments(user.id, pagination)
    return paginated_response(result, "Payments fetched")


@router.get("/order/{order_id}")
async def order_payment(
    order_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    payment = await service.get_order_payment(order_id, user.id)
    return success_response(payment.to_dict(), "Payment fetched")


# ============================================================================
# Gateway callbacks (public)
# ============================================================================


@router.api_route("/sslcommerz/success", methods=["GET", "POST"], include_in_schema=False)
async def sslcommerz_success(
    request: Request,
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    return _redirect(await service.handle_sslcommerz_success(await _callback_data(request)))


@router.api_route("/sslcommerz/ipn", methods=["POST"], include_in_schema=False)
async def sslcommerz_ipn(
    request: Request,
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    return _redirect(await service.handle_sslcommerz_success(await _callback_data(request)))


@router.api_route("/sslcommerz/fail", methods=["GET", "POST"], include_in_schema=False)
async def sslcommerz_fail(
    request: Request,
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    return _redirect(await service.handle_sslcommerz_fail(await _callback_data(request)))


@router.api_route("/sslcommerz/cancel", methods=["GET", "POST"], include_in_schema=False)
async def sslcommerz_cancel(
    request: Request,
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    return _redirect(await service.handle_sslcommerz_cancel(await _callback_data(request)))


@router.get("/bkash/callback", include_in_schema=False)
async def bkash_callback(
    payment_id: str | None = Query(None, alias="paymentID"),  # noqa: B008
    callback_status: str | None = Query(None, alias="status"),  # noqa: B008
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    return _redirect(await service.handle_bkash_callback(payment_id, callback_status))


# ============================================================================
# Admin
# ============================================================================


@router.get("/admin/all", dependencies=[Depends(require_admin)])
async def all_payments(
    filters: PaymentFilters = Depends(get_payment_filters),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    result = await service.list_payments(pagination, filters)
    return paginated_response(result, "Payments fetched")


@router.get("/admin/stats", dependencies=[Depends(require_admin)])
async def payment_stats(service: PaymentService = Depends(get_payment_service)):  # noqa: B008
    return success_response(await service.get_stats(), "Payment statistics fetched")


@router.patch("/admin/{payment_id}/cod-paid", dependencies=[Depends(require_admin)])
async def mark_cod_paid(
    payment_id: UUID,
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    payment = await service.mark_cod_paid(payment_id)
    return success_response(payment.to_dict(), "COD marked as paid")


@router.post("/admin/{payment_id}/refund", dependencies=[Depends(require_admin)])
async def refund_payment(
    payment_id: UUID,
    body: RefundBody,
    service: PaymentService = Depends(get_payment_service),  # noqa: B008
):
    payment = await service.refund(payment_id, body.amount, body.reason)
    return success_response(payment.to_dict(), "Payment refunded")
