from .bkash import BkashGateway
from .http_client import GatewayHttpClient, GatewayRetryableError
from .sslcommerz import SSLCommerzGateway

__all__ = ["BkashGateway", "GatewayHttpClient", "GatewayRetryableError", "SSLCommerzGateway"]
