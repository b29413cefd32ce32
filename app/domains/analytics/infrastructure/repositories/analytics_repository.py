"""
Analytics Repository Implementation

Aggregate queries only; nothing here writes.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Float, Integer, func, select, true, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import iso, sid
from app.domains.analytics.application.ports import IAnalyticsRepository
from app.domains.catalog.domain.value_objects import ProductStatus
from app.domains.commerce.domain.value_objects import OrderStatus
from app.domains.engagement.domain.value_objects import ReviewStatus
from app.domains.identity.domain.value_objects import UserRole
from app.models.db import CategoryModel, OrderModel, ProductModel, ReviewModel, UserModel

NON_REVENUE_STATUSES = [s.value for s in OrderStatus if not s.counts_as_revenue()]

PUBLIC_DEFAULT_RATING = 4.8


def _revenue():
    return OrderModel.status.notin_(NON_REVENUE_STATUSES)


def _product_row(model: ProductModel) -> dict[str, Any]:
    return {
        "id": sid(model.id),
        "name": model.name,
        "slug": model.slug,
        "price": model.price,
        "thumbnail": model.thumbnail,
        "salesCount": model.sales_count,
        "rating": model.rating,
        "reviewCount": model.review_count,
    }


class SQLAlchemyAnalyticsRepository(IAnalyticsRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _scalar(self, stmt) -> Any:
        return (await self.session.execute(stmt)).scalar_one()

    async def dashboard_summary(self, today_start: datetime, month_start: datetime) -> dict[str, Any]:
        active_user = UserModel.is_deleted.is_(False)
        users = (
            await self.session.execute(
                select(
                    func.count(UserModel.id).filter(active_user),
                    func.count(UserModel.id).filter(active_user, UserModel.role == UserRole.CUSTOMER.value),
                    func.count(UserModel.id).filter(active_user, UserModel.created_at >= month_start),
                )
            )
        ).one()

        tracked = ProductModel.track_quantity.is_(True)
        products = (
            await self.session.execute(
                select(
                    func.count(ProductModel.id),
                    func.count(ProductModel.id).filter(ProductModel.status == ProductStatus.ACTIVE.value),
                    func.count(ProductModel.id).filter(tracked, ProductModel.quantity == 0),
                    func.count(ProductModel.id).filter(
                        tracked, ProductModel.quantity > 0, ProductModel.quantity <= ProductModel.low_stock_threshold
                    ),
                )
            )
        ).one()

        by_status = {
            status: count
            for status, count in (
                await self.session.execute(
                    select(OrderModel.status, func.count(OrderModel.id)).group_by(OrderModel.status)
                )
            ).all()
        }
        revenue = _revenue()
        orders = (
            await self.session.execute(
                select(
                    func.count(OrderModel.id).filter(OrderModel.created_at >= today_start),
                    func.coalesce(func.sum(OrderModel.total).filter(revenue), 0),
                    func.coalesce(func.sum(OrderModel.total).filter(revenue, OrderModel.created_at >= today_start), 0),
                    func.coalesce(func.sum(OrderModel.total).filter(revenue, OrderModel.created_at >= month_start), 0),
                )
            )
        ).one()

        approved = ReviewModel.status == ReviewStatus.APPROVED.value
        reviews = (
            await self.session.execute(select(func.count(ReviewModel.id), func.avg(ReviewModel.rating)).where(approved))
        ).one()

        return {
            "totalUsers": users[0],
            "totalCustomers": users[1],
            "newUsersThisMonth": users[2],
            "totalProducts": products[0],
            "activeProducts": products[1],
            "outOfStockProducts": products[2],
            "lowStockProducts": products[3],
            "totalCategories": await self._scalar(
                select(func.count(CategoryModel.id)).where(CategoryModel.is_active.is_(True))
            ),
            "totalOrders": sum(by_status.values()),
            "todayOrders": orders[0],
            "pendingOrders": by_status.get(OrderStatus.PENDING.value, 0),
            "processingOrders": by_status.get(OrderStatus.PROCESSING.value, 0),
            "shippedOrders": by_status.get(OrderStatus.SHIPPED.value, 0),
            "deliveredOrders": by_status.get(OrderStatus.DELIVERED.value, 0),
            "cancelledOrders": by_status.get(OrderStatus.CANCELLED.value, 0),
            "totalRevenue": float(orders[1]),
            "todayRevenue": float(orders[2]),
            "monthlyRevenue": float(orders[3]),
            "totalReviews": reviews[0],
            "avgRating": round(float(reviews[1]), 1) if reviews[1] is not None else 0,
        }

    async def public_stats(self) -> dict[str, Any]:
        approved = ReviewModel.status == ReviewStatus.APPROVED.value
        review_count, avg_rating = (
            await self.session.execute(select(func.count(ReviewModel.id), func.avg(ReviewModel.rating)).where(approved))
        ).one()
        return {
            "totalProducts": await self._scalar(
                select(func.count(ProductModel.id)).where(ProductModel.status == ProductStatus.ACTIVE.value)
            ),
            "totalCustomers": await self._scalar(
                select(func.count(UserModel.id)).where(
                    UserModel.role == UserRole.CUSTOMER.value, UserModel.is_deleted.is_(False)
                )
            ),
            "totalOrders": await self._scalar(
                select(func.count(OrderModel.id)).where(OrderModel.status == OrderStatus.DELIVERED.value)
            ),
            "averageRating": round(float(avg_rating), 1) if avg_rating is not None else PUBLIC_DEFAULT_RATING,
            "totalReviews": review_count,
        }

    async def revenue_by_day(self, start: datetime, end: datetime) -> list[dict[str, Any]]:
        day = func.to_char(OrderModel.created_at, "YYYY-MM-DD")
        rows = await self.session.execute(
            select(day, func.sum(OrderModel.total), func.count(OrderModel.id))
            .where(_revenue(), OrderModel.created_at >= start, OrderModel.created_at <= end)
            .group_by(day)
            .order_by(day)
        )
        return [{"date": d, "revenue": float(revenue or 0), "orders": count} for d, revenue, count in rows.all()]

    async def revenue_by_month(self, since: datetime) -> dict[tuple[int, int], tuple[float, int]]:
        year = func.extract("year", OrderModel.created_at)
        month = func.extract("month", OrderModel.created_at)
        rows = await self.session.execute(
            select(year, month, func.sum(OrderModel.total), func.count(OrderModel.id))
            .where(_revenue(), OrderModel.created_at >= since)
            .group_by(year, month)
        )
        return {(int(y), int(m)): (float(revenue or 0), count) for y, m, revenue, count in rows.all()}

    async def top_selling(self, limit: int) -> list[dict[str, Any]]:
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.status == ProductStatus.ACTIVE.value)
            .order_by(ProductModel.sales_count.desc())
            .limit(limit)
        )
        return [_product_row(m) for m in result.scalars().all()]

    async def top_rated(self, limit: int, min_reviews: int) -> list[dict[str, Any]]:
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.status == ProductStatus.ACTIVE.value, ProductModel.review_count >= min_reviews)
            .order_by(ProductModel.rating.desc(), ProductModel.review_count.desc())
            .limit(limit)
        )
        return [_product_row(m) for m in result.scalars().all()]

    async def recent_orders(self, limit: int) -> list[dict[str, Any]]:
        rows = await self.session.execute(
            select(OrderModel, UserModel.first_name, UserModel.last_name, UserModel.email)
            .outerjoin(UserModel, UserModel.id == OrderModel.user_id)
            .order_by(OrderModel.created_at.desc())
            .limit(limit)
        )
        return [
            {
                "id": sid(order.id),
                "orderNumber": order.order_number,
                "user": {"id": sid(order.user_id), "firstName": first, "lastName": last, "email": email},
                "total": order.total,
                "status": order.status,
                "paymentStatus": order.payment_status,
                "paymentMethod": order.payment_method,
                "itemCount": sum(int(i.get("quantity", 0)) for i in order.items or []),
                "createdAt": iso(order.created_at),
            }
            for order, first, last, email in rows.all()
        ]

    async def sales_by_category(self) -> list[dict[str, Any]]:
        item = func.jsonb_array_elements(OrderModel.items).table_valued("value", name="item")
        line = type_coerce(item.c.value, JSONB)
        product_id = line["product"].astext.cast(PG_UUID(as_uuid=True))
        quantity = func.sum(line["quantity"].astext.cast(Integer))
        revenue = func.sum(line["subtotal"].astext.cast(Float))
        rows = await self.session.execute(
            select(CategoryModel.name, quantity, revenue)
            .select_from(OrderModel)
            .join(item, true())
            .join(ProductModel, ProductModel.id == product_id)
            .join(CategoryModel, CategoryModel.id == ProductModel.category_id)
            .where(_revenue())
            .group_by(CategoryModel.name)
            .order_by(revenue.desc())
        )
        return [
            {"category": name, "sales": int(sales or 0), "revenue": float(amount or 0)}
            for name, sales, amount in rows.all()
        ]

    async def customer_report(self) -> list[dict[str, Any]]:
        total_spent = func.sum(OrderModel.total)
        rows = await self.session.execute(
            select(
                OrderModel.user_id,
                UserModel.first_name,
                UserModel.last_name,
                UserModel.email,
                func.count(OrderModel.id),
                total_spent,
                func.max(OrderModel.created_at),
            )
            .join(UserModel, UserModel.id == OrderModel.user_id)
            .where(_revenue())
            .group_by(OrderModel.user_id, UserModel.first_name, UserModel.last_name, UserModel.email)
            .order_by(total_spent.desc())
        )
        return [
            {
                "userId": sid(user_id),
                "firstName": first,
                "lastName": last,
                "email": email,
                "totalOrders": orders,
                "totalSpent": float(spent or 0),
                "lastOrder": iso(last_order),
            }
            for user_id, first, last, email, orders, spent, last_order in rows.all()
        ]

    async def sales_rows(self, start: datetime, end: datetime) -> list[dict[str, Any]]:
        rows = await self.session.execute(
            select(OrderModel, UserModel.first_name, UserModel.last_name, UserModel.email)
            .outerjoin(UserModel, UserModel.id == OrderModel.user_id)
            .where(_revenue(), OrderModel.created_at >= start, OrderModel.created_at <= end)
            .order_by(OrderModel.created_at.desc())
        )
        return [
            {
                "orderNumber": order.order_number,
                "createdAt": iso(order.created_at),
                "customerName": f"{first or ''} {last or ''}".strip(),
                "customerEmail": email or "",
                "products": [i.get("name", "") for i in order.items or []],
                "total": order.total,
                "status": order.status,
                "paymentStatus": order.payment_status,
            }
            for order, first, last, email in rows.all()
        ]
