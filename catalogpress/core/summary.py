import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from .canonical import Product, format_amount
from .filters import polish_sort_key

_ZERO = Decimal("0")


@dataclass(frozen=True)
class FeedSummary:
    total_products: int = 0
    available_products: int = 0
    estimated_pages: int = 0
    categories: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    compositions: list[str] = field(default_factory=list)
    price_min: Decimal = _ZERO
    price_max: Decimal = _ZERO
    stock_min: float = 0.0
    stock_max: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_products": self.total_products,
            "available_products": self.available_products,
            "estimated_pages": self.estimated_pages,
            "categories": list(self.categories),
            "colors": list(self.colors),
            "compositions": list(self.compositions),
            "price_range": {"min": format_amount(self.price_min), "max": format_amount(self.price_max)},
            "stock_range": {"min": self.stock_min, "max": self.stock_max},
        }


def _distinct(values: Iterable[str]) -> list[str]:
    return sorted({value for value in values if value}, key=polish_sort_key)


def summarize_products(products: Sequence[Product]) -> FeedSummary:
    """Metadata shown before generation: counts, facets and value ranges."""
    items = list(products)
    if not items:
        return FeedSummary()

    positive_prices = [product.price for product in items if product.price > _ZERO]
    stock = [product.availability_count for product in items]
    return FeedSummary(
        total_products=len(items),
        available_products=sum(1 for product in items if product.in_stock),
        estimated_pages=math.ceil(len(items) / 2),
        categories=_distinct(product.category for product in items),
        colors=_distinct(product.color for product in items),
        compositions=_distinct(product.composition for product in items),
        price_min=min(positive_prices) if positive_prices else _ZERO,
        price_max=max(product.price for product in items),
        stock_min=min(stock),
        stock_max=max(stock),
    )


__all__ = ["FeedSummary", "summarize_products"]
