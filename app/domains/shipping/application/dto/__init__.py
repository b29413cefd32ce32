"""
Shipping DTOs
"""

from dataclasses import dataclass, field
from typing import Any

from app.domains.shipping.domain.entities import ShippingZone


@dataclass
class ShippingQuote:
    zone: ShippingZone | None
    rates: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"zone": self.zone.to_dict() if self.zone else None, "rates": self.rates}


__all__ = ["ShippingQuote"]
