from .entities import Product
from .helpers import (
    format_amount,
    format_count,
    non_negative_amount,
    non_negative_count,
    parse_decimal_money,
)

__all__ = [
    "Product",
    "format_amount",
    "format_count",
    "non_negative_amount",
    "non_negative_count",
    "parse_decimal_money",
]
