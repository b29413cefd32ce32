"""
Payment DTOs
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CustomerInfo:
    """Buyer details forwarded to hosted checkout pages."""

    name: str
    email: str
    phone: str
    address: str
    city: str
    country: str = "Bangladesh"


@dataclass
class GatewaySession:
    """Hosted checkout opened at SSLCommerz."""

    gateway_url: str
    session_key: str | None = None


@dataclass
class BkashCheckout:
    bkash_url: str
    payment_id: str


@dataclass
class BkashExecution:
    """Outcome of executing an approved bKash payment."""

    success: bool
    trx_id: str | None = None
    message: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentFilters:
    status: str | None = None
    method: str | None = None


__all__ = ["CustomerInfo", "GatewaySession", "BkashCheckout", "BkashExecution", "PaymentFilters"]
