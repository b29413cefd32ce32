"""
bKash tokenized checkout adapter.
"""

import asyncio
import logging
import time

from app.core.domain import IntegrationException, PaymentException
from app.domains.payments.application.dto import BkashCheckout, BkashExecution
from app.domains.payments.application.ports import IBkashGateway

from .http_client import GatewayHttpClient

logger = logging.getLogger(__name__)

SUCCESS_STATUS_CODE = "0000"


class BkashGateway(IBkashGateway):
    """
    Grant token, create and execute bKash payments.

    The id_token is cached in memory until shortly before it expires.
    """

    TOKEN_PATH = "/tokenized/checkout/token/grant"
    CREATE_PATH = "/tokenized/checkout/create"
    EXECUTE_PATH = "/tokenized/checkout/execute"
    TOKEN_MARGIN_SECONDS = 60

    def __init__(
        self,
        app_key: str | None,
        app_secret: str | None,
        username: str | None,
        password: str | None,
        base_url: str,
        callback_url: str,
    ):
        self.app_key = app_key or ""
        self.app_secret = app_secret or ""
        self.username = username or ""
        self.password = password or ""
        self.callback_url = callback_url
        self.http = GatewayHttpClient("bKash", base_url)
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._lock = asyncio.Lock()

    async def grant_token(self) -> str:
        async with self._lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            data = await self.http.request(
                "POST",
                self.TOKEN_PATH,
                idempotent=True,
                json={"app_key": self.app_key, "app_secret": self.app_secret},
                headers={"username": self.username, "password": self.password},
            )
            token = data.get("id_token")
            if not token:
                logger.error(f"bKash token grant refused: {data.get('statusMessage') or data}")
                raise IntegrationException("bKash", "bKash authentication failed")

            lifetime = int(data.get("expires_in") or 3600)
            self._token = token
            self._token_expires_at = time.monotonic() + max(lifetime - self.TOKEN_MARGIN_SECONDS, 0)
            return token

    async def _headers(self) -> dict[str, str]:
        return {"Authorization": await self.grant_token(), "X-APP-Key": self.app_key}

    async def create_payment(self, transaction_id: str, amount: float, payer_reference: str) -> BkashCheckout:
        data = await self.http.request(
            "POST",
            self.CREATE_PATH,
            json={
                "mode": "0011",
                "payerReference": payer_reference,
                "callbackURL": self.callback_url,
                "amount": f"{amount:.2f}",
                "currency": "BDT",
                "intent": "sale",
                "merchantInvoiceNumber": transaction_id,
            },
            headers=await self._headers(),
        )
        if not data.get("bkashURL"):
            reason = data.get("errorMessage") or data.get("statusMessage") or "bKash payment initiation failed"
            logger.warning(f"bKash refused payment {transaction_id}: {reason}")
            raise PaymentException(reason, payment_id=transaction_id, reason=reason)
        return BkashCheckout(bkash_url=data["bkashURL"], payment_id=data["paymentID"])

    async def execute_payment(self, payment_id: str) -> BkashExecution:
        data = await self.http.request(
            "POST",
            self.EXECUTE_PATH,
            json={"paymentID": payment_id},
            headers=await self._headers(),
        )
        if data.get("statusCode") == SUCCESS_STATUS_CODE:
            return BkashExecution(success=True, trx_id=data.get("trxID"), raw=data)
        return BkashExecution(
            success=False,
            message=data.get("errorMessage") or data.get("statusMessage") or "Payment failed",
            raw=data,
        )

    async def close(self) -> None:
        await self.http.close()
