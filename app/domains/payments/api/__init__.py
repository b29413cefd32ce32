"""
Payments API Layer
"""

from app.domains.payments.api.routes import router as payments_router

__all__ = ["payments_router"]
