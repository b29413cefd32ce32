"""
SSLCommerz hosted checkout adapter.
"""

import logging
from uuid import UUID

from app.core.domain import IntegrationException, PaymentException
from app.domains.payments.application.dto import CustomerInfo, GatewaySession
from app.domains.payments.application.ports import ISSLCommerzGateway

from .http_client import GatewayHttpClient

logger = logging.getLogger(__name__)


class SSLCommerzGateway(ISSLCommerzGateway):
    """
    Opens SSLCommerz sessions and validates their callbacks.

    `callback_base` is the public URL of this API's payment router; the
    gateway posts success/fail/cancel/ipn back under it.
    """

    INIT_PATH = "/gwprocess/v4/api.php"
    VALIDATION_PATH = "/validator/api/validationserverAPI.php"

    def __init__(self, store_id: str, store_password: str, base_url: str, callback_base: str):
        self.store_id = store_id
        self.store_password = store_password
        self.callback_base = callback_base.rstrip("/")
        self.http = GatewayHttpClient("SSLCommerz", base_url)

    async def create_session(
        self, transaction_id: str, amount: float, customer: CustomerInfo, order_id: UUID, user_id: UUID
    ) -> GatewaySession:
        form = {
            "store_id": self.store_id,
            "store_passwd": self.store_password,
            "total_amount": amount,
            "currency": "BDT",
            "tran_id": transaction_id,
            "success_url": f"{self.callback_base}/sslcommerz/success",
            "fail_url": f"{self.callback_base}/sslcommerz/fail",
            "cancel_url": f"{self.callback_base}/sslcommerz/cancel",
            "ipn_url": f"{self.callback_base}/sslcommerz/ipn",
            "cus_name": customer.name,
            "cus_email": customer.email,
            "cus_phone": customer.phone,
            "cus_add1": customer.address,
            "cus_city": customer.city,
            "cus_country": customer.country,
            "shipping_method": "NO",
            "product_name": "E-Commerce Order",
            "product_category": "General",
            "product_profile": "general",
            "value_a": str(order_id),
            "value_b": str(user_id),
        }
        data = await self.http.request("POST", self.INIT_PATH, data=form)
        if data.get("status") != "SUCCESS" or not data.get("GatewayPageURL"):
            reason = data.get("failedreason") or "Payment initiation failed"
            logger.warning(f"SSLCommerz refused session for {transaction_id}: {reason}")
            raise PaymentException(reason, payment_id=transaction_id, reason=reason)
        return GatewaySession(gateway_url=data["GatewayPageURL"], session_key=data.get("sessionkey"))

    async def validate(self, val_id: str) -> bool:
        params = {
            "val_id": val_id,
            "store_id": self.store_id,
            "store_passwd": self.store_password,
            "format": "json",
        }
        try:
            data = await self.http.request("GET", self.VALIDATION_PATH, idempotent=True, params=params)
        except IntegrationException:
            return False
        return data.get("status") in ("VALID", "VALIDATED")

    async def close(self) -> None:
        await self.http.close()
