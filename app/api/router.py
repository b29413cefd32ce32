"""
Top-level API router.

Mounted under `API_V1_STR` by the app factory; each domain contributes its
own routers with their path prefixes.
"""

from fastapi import APIRouter

from app.domains.analytics.api import analytics_router
from app.domains.catalog.api import categories_router, products_router
from app.domains.commerce.api import cart_router, coupons_router, orders_router
from app.domains.engagement.api import notifications_router, reviews_router, wishlist_router
from app.domains.identity.api import auth_router, users_router
from app.domains.payments.api import payments_router
from app.domains.shipping.api import shipping_router

api_router = APIRouter()

# Identity
api_router.include_router(auth_router)
api_router.include_router(users_router)

# Catalog
api_router.include_router(categories_router)
api_router.include_router(products_router)

# Commerce
api_router.include_router(cart_router)
api_router.include_router(coupons_router)
api_router.include_router(orders_router)

# Payments and fulfilment
api_router.include_router(payments_router)
api_router.include_router(shipping_router)

# Engagement
api_router.include_router(reviews_router)
api_router.include_router(wishlist_router)
api_router.include_router(notifications_router)

# Reporting
api_router.include_router(analytics_router)
