from __future__ import annotations

from datetime import date

from ration_portal.application.exceptions import ValidationError
from ration_portal.domain.entities.stock import Stock


def parse_iso_date(value: str | date) -> str:
    """Normalize to YYYY-MM-DD, rejecting anything that is not a calendar date."""
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value).strip()).isoformat()
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def require_text(value: str | None, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required")
    return cleaned


def require_capacity(value: int, field: str = "max_capacity") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field} must be a positive integer")
    return value


def require_stock(stock: Stock, field: str = "stock_limit") -> Stock:
    if not stock.is_non_negative():
        raise ValidationError(f"{field} cannot contain negative quantities")
    return stock
