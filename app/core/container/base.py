"""
Base Container - Shared Singletons.

Single Responsibility: Manage process-wide resources (cache client, payment
gateway HTTP clients, credential service) shared by every request.
"""

import logging

from app.config.settings import Settings, get_settings
from app.core.cache import CacheService
from app.domains.identity.infrastructure.security import TokenService
from app.domains.payments.infrastructure.gateways import BkashGateway, SSLCommerzGateway

logger = logging.getLogger(__name__)


class BaseContainer:
    """
    Base container for shared singletons.

    Single Responsibility: Create and cache expensive shared resources.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

        self._cache: CacheService | None = None
        self._token_service: TokenService | None = None
        self._sslcommerz: SSLCommerzGateway | None = None
        self._bkash: BkashGateway | None = None

        logger.info("BaseContainer initialized")

    @property
    def payments_callback_base(self) -> str:
        """Public URL of the payment router, as seen by the gateways."""
        return f"{self.settings.BACKEND_URL.rstrip('/')}{self.settings.API_V1_STR}/payments"

    def get_cache(self) -> CacheService:
        if self._cache is None:
            self._cache = CacheService(self.settings)
        return self._cache

    def get_token_service(self) -> TokenService:
        if self._token_service is None:
            self._token_service = TokenService(self.settings)
        return self._token_service

    def get_sslcommerz(self) -> SSLCommerzGateway:
        if self._sslcommerz is None:
            logger.info(f"Creating SSLCommerz gateway: {self.settings.sslcommerz_base_url}")
            self._sslcommerz = SSLCommerzGateway(
                store_id=self.settings.SSLCOMMERZ_STORE_ID,
                store_password=self.settings.SSLCOMMERZ_STORE_PASSWORD,
                base_url=self.settings.sslcommerz_base_url,
                callback_base=self.payments_callback_base,
            )
        return self._sslcommerz

    def get_bkash(self) -> BkashGateway:
        if self._bkash is None:
            logger.info(f"Creating bKash gateway: {self.settings.bkash_base_url}")
            self._bkash = BkashGateway(
                app_key=self.settings.BKASH_APP_KEY,
                app_secret=self.settings.BKASH_APP_SECRET,
                username=self.settings.BKASH_USERNAME,
                password=self.settings.BKASH_PASSWORD,
                base_url=self.settings.bkash_base_url,
                callback_url=f"{self.payments_callback_base}/bkash/callback",
            )
        return self._bkash

    async def close(self) -> None:
        """Release gateway HTTP clients and the Redis connection."""
        if self._sslcommerz is not None:
            await self._sslcommerz.http.close()
        if self._bkash is not None:
            await self._bkash.http.close()
        if self._cache is not None:
            await self._cache.close()
        logger.info("BaseContainer resources released")
