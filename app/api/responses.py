"""
Uniform response envelope: {success, message, data, meta?}.
"""

from typing import Any

from app.core.domain import PaginatedResult


def success_response(data: Any = None, message: str = "Success", meta: dict[str, Any] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True, "message": message, "data": data}
    if meta is not None:
        body["meta"] = meta
    return body


def paginated_response(result: PaginatedResult, message: str = "Success") -> dict[str, Any]:
    """Envelope for a page of entities exposing `to_dict()`."""
    return success_response(
        data=[item.to_dict() for item in result.items],
        message=message,
        meta=result.meta(),
    )


__all__ = ["success_response", "paginated_response"]
