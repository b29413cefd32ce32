"""
CSV rendering for downloadable reports.

Every cell is double-quoted, cells are joined by commas and rows by "\n".
"""

import csv
import io
from datetime import datetime
from typing import Any, Iterable

SALES_HEADERS = [
    "Order Number",
    "Order Date",
    "Customer Name",
    "Customer Email",
    "Products",
    "Total Amount (BDT)",
    "Status",
    "Payment Status",
]

CUSTOMER_HEADERS = [
    "Customer Name",
    "Email",
    "Total Orders",
    "Total Spent (BDT)",
    "Last Order Date",
]


def _day(value: datetime | str | None) -> str:
    if not value:
        return ""
    if isinstance(value, str):
        return value.split("T")[0]
    return value.date().isoformat()


def render_csv(headers: list[str], rows: Iterable[list[Any]]) -> str:
    buffer = io.StringIO()
    buffer.write(",".join(headers) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row])
    return buffer.getvalue().removesuffix("\n")


def render_sales_csv(orders: list[dict[str, Any]]) -> str:
    return render_csv(
        SALES_HEADERS,
        (
            [
                o["orderNumber"],
                _day(o.get("createdAt")),
                o.get("customerName", ""),
                o.get("customerEmail", ""),
                "; ".join(o.get("products", [])),
                o.get("total", 0),
                o.get("status", ""),
                o.get("paymentStatus", ""),
            ]
            for o in orders
        ),
    )


def render_customers_csv(customers: list[dict[str, Any]]) -> str:
    return render_csv(
        CUSTOMER_HEADERS,
        (
            [
                f"{c.get('firstName') or ''} {c.get('lastName') or ''}".strip(),
                c.get("email") or "",
                c.get("totalOrders", 0),
                c.get("totalSpent", 0),
                _day(c.get("lastOrder")),
            ]
            for c in customers
        ),
    )


__all__ = ["render_csv", "render_sales_csv", "render_customers_csv", "SALES_HEADERS", "CUSTOMER_HEADERS"]
