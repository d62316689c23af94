"""Render prices and dimensions for display."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .models import Dimensions, Pricing

PRICE_ON_REQUEST = "Price on request"


def format_price(price: float | int | Decimal | None) -> str:
    """Format ``price`` as whole US dollars, e.g. ``1250`` -> ``"$1,250"``."""

    if price is None:
        return PRICE_ON_REQUEST
    rounded = Decimal(str(price)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"${rounded:,}"


def format_pricing(pricing: Pricing) -> str:
    return format_price(pricing.original)


def format_dimensions(dimensions: Dimensions) -> str:
    return f"{dimensions.width}{dimensions.unit} × {dimensions.height}{dimensions.unit}"


__all__ = ["PRICE_ON_REQUEST", "format_dimensions", "format_price", "format_pricing"]
