"""Catalog filtering and sorting over normalized products."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .canonical import Product, parse_decimal_money

SORT_KEYS = ("price", "name", "category", "stock")

_POLISH_ALPHABET = "aąbcćdeęfghijklłmnńoópqrsśtuvwxyzźż"
_LETTER_RANK = {letter: rank for rank, letter in enumerate(_POLISH_ALPHABET)}

# Accepted spellings for each filter field: snake_case and the dashboard's camelCase.
_PARAM_ALIASES: dict[str, tuple[str, ...]] = {
    "search_phrase": ("search_phrase", "searchPhrase", "q"),
    "category": ("category",),
    "min_price": ("min_price", "minPrice"),
    "max_price": ("max_price", "maxPrice"),
    "min_stock": ("min_stock", "minStock"),
    "only_available": ("only_available", "onlyAvailable"),
    "color": ("color",),
    "composition": ("composition",),
    "sort_by": ("sort_by", "sortBy"),
}


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def _clean(value: Any) -> str:
    return str(value or "").strip()


@dataclass(frozen=True)
class CatalogFilters:
    search_phrase: str = ""
    category: str = ""
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    min_stock: float | None = None
    only_available: bool = False
    color: str = ""
    composition: str = ""
    sort_by: str = ""

    @classmethod
    def from_params(cls, params: Mapping[str, Any] | None) -> "CatalogFilters":
        params = params or {}

        def pick(field: str) -> Any:
            for alias in _PARAM_ALIASES[field]:
                value = params.get(alias)
                if value not in (None, ""):
                    return value
            return None

        min_stock = parse_decimal_money(pick("min_stock"))
        return cls(
            search_phrase=_clean(pick("search_phrase")),
            category=_clean(pick("category")),
            min_price=parse_decimal_money(pick("min_price")),
            max_price=parse_decimal_money(pick("max_price")),
            min_stock=float(min_stock) if min_stock is not None else None,
            only_available=parse_bool(pick("only_available")),
            color=_clean(pick("color")),
            composition=_clean(pick("composition")),
            sort_by=_clean(pick("sort_by")).lower(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "search_phrase": self.search_phrase,
            "category": self.category,
            "min_price": str(self.min_price) if self.min_price is not None else None,
            "max_price": str(self.max_price) if self.max_price is not None else None,
            "min_stock": self.min_stock,
            "only_available": self.only_available,
            "color": self.color,
            "composition": self.composition,
            "sort_by": self.sort_by,
        }


def polish_sort_key(text: str) -> tuple[tuple[int, int], ...]:
    """Collation key ordering Polish diacritics right after their base letter."""
    key: list[tuple[int, int]] = []
    for char in str(text or "").lower():
        if char in _LETTER_RANK:
            key.append((2, _LETTER_RANK[char]))
        elif char.isdigit():
            key.append((1, int(char)))
        elif char.isspace():
            key.append((0, 0))
        else:
            key.append((3, ord(char)))
    return tuple(key)


def _contains(field_value: str, needle: str) -> bool:
    return bool(field_value) and needle.lower() in field_value.lower()


def _predicates(filters: CatalogFilters) -> list[Callable[[Product], bool]]:
    checks: list[Callable[[Product], bool]] = []
    if filters.search_phrase:
        checks.append(lambda p: filters.search_phrase.lower() in p.name.lower())
    if filters.category:
        checks.append(lambda p: filters.category.lower() in p.category.lower())
    if filters.min_price is not None:
        checks.append(lambda p: p.price >= filters.min_price)
    if filters.max_price is not None:
        checks.append(lambda p: p.price <= filters.max_price)
    if filters.min_stock is not None:
        checks.append(lambda p: p.availability_count >= filters.min_stock)
    if filters.only_available:
        checks.append(lambda p: p.availability_count > 0)
    if filters.color:
        checks.append(lambda p: _contains(p.color, filters.color))
    if filters.composition:
        checks.append(lambda p: _contains(p.composition, filters.composition))
    return checks


def sort_products(products: Iterable[Product], sort_by: str) -> list[Product]:
    items = list(products)
    key = (sort_by or "").strip().lower()
    if key == "price":
        return sorted(items, key=lambda p: p.price)
    if key == "name":
        return sorted(items, key=lambda p: polish_sort_key(p.name))
    if key == "category":
        return sorted(items, key=lambda p: polish_sort_key(p.category))
    if key == "stock":
        return sorted(items, key=lambda p: p.availability_count, reverse=True)
    return items


def apply_filters(products: Iterable[Product], filters: CatalogFilters | None) -> list[Product]:
    if filters is None:
        return list(products)
    checks = _predicates(filters)
    selected = [product for product in products if all(check(product) for check in checks)]
    return sort_products(selected, filters.sort_by)


__all__ = [
    "CatalogFilters",
    "SORT_KEYS",
    "apply_filters",
    "parse_bool",
    "polish_sort_key",
    "sort_products",
]
