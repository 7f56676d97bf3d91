from collections.abc import Sequence
from typing import Any

from ...core.canonical import format_amount
from ...core.canonical.entities import Product
from ...config import get_settings

_DEFAULT_DESCRIPTION_LIMITS = {
    "low": 80,
    "medium": 160,
    "high": 240,
}
_SUPPORTED_VERBOSITIES = {"low", "medium", "high", "extrahigh"}
_SAMPLE_SIZE = 3


def _truncate_description(value: str | None, *, limit: int) -> str:
    text = str(value or "").strip()
    if len(text) <= limit:
        return text
    return f"{text[:limit].rstrip()}... [truncated]"


def _normalize_verbosity(verbosity: str) -> str:
    normalized = str(verbosity or "").strip().lower()
    if normalized in _SUPPORTED_VERBOSITIES:
        return normalized
    return "medium"


def _format_price(product: Product, currency: str) -> str:
    if product.price <= 0:
        return ""
    return f"{format_amount(product.price)} {currency}"


def product_result_to_loggable(
    product: Product,
    *,
    verbosity: str | None = None,
    debug_enabled: bool | None = None,
    currency: str = "PLN",
) -> dict[str, Any] | None:
    settings = get_settings()
    if debug_enabled is None:
        debug_enabled = settings.debug

    if not debug_enabled:
        return None

    resolved_verbosity = verbosity if verbosity is not None else settings.log_verbosity
    level = _normalize_verbosity(resolved_verbosity)
    if level == "extrahigh":
        return product.to_dict()

    data = product.to_dict()

    if level == "high":
        data["description"] = _truncate_description(data.get("description"), limit=_DEFAULT_DESCRIPTION_LIMITS["high"])
        return data

    summary = {
        "id": product.id,
        "index": product.index,
        "name": product.name,
        "description": _truncate_description(product.description, limit=_DEFAULT_DESCRIPTION_LIMITS["medium"]),
        "category": product.category,
        "price": _format_price(product, currency),
        "stock": product.availability_count,
        "ean": product.ean,
        "has_image": bool(product.image_url),
        "has_b2b_link": bool(product.b2b_link),
        "details": {
            "color": product.color,
            "composition": product.composition,
            "grammage": product.grammage,
            "pieces_in_carton": product.pieces_in_carton,
        },
    }

    if level == "low":
        return {
            "index": summary.get("index"),
            "name": summary.get("name"),
            "price": summary.get("price"),
            "stock": summary.get("stock"),
            "has_image": summary.get("has_image"),
        }

    return summary


def products_to_loggable(
    products: Sequence[Product],
    *,
    verbosity: str | None = None,
    debug_enabled: bool | None = None,
) -> dict[str, Any] | None:
    """Feed-level debug payload: the count plus a few sample products."""
    sample = [
        product_result_to_loggable(product, verbosity=verbosity, debug_enabled=debug_enabled)
        for product in products[:_SAMPLE_SIZE]
    ]
    if not sample or sample[0] is None:
        return None
    return {"count": len(products), "sample": sample}


__all__ = ["product_result_to_loggable", "products_to_loggable"]
