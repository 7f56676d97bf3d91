from decimal import Decimal, InvalidOperation
import math
import re
from typing import Any

_CURRENCY_SUFFIX_RE = re.compile(r"(?:zł|zl|pln|eur|€)\.?$", re.IGNORECASE)
_MONEY_RE = re.compile(r"-?\d*\.?\d*")
_ZERO = Decimal("0")


def parse_decimal_money(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        return value if value.is_finite() else None

    if isinstance(value, int):
        return Decimal(str(value))

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        try:
            parsed = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return None
        return parsed if parsed.is_finite() else None

    if isinstance(value, str):
        text = _CURRENCY_SUFFIX_RE.sub("", value.strip().replace(" ", "").replace("\xa0", ""))
        # Polish feeds write "12,50"; with both separators the comma groups thousands.
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        else:
            text = text.replace(",", "")
        if not _MONEY_RE.fullmatch(text) or text in {"", "-", ".", "-."}:
            return None
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None

    return None


def non_negative_amount(value: Any) -> Decimal:
    parsed = parse_decimal_money(value)
    if parsed is None or parsed < _ZERO:
        return _ZERO
    return parsed


def non_negative_count(value: Any) -> float:
    parsed = parse_decimal_money(value)
    if parsed is None or parsed < _ZERO:
        return 0.0
    return float(parsed)


def format_amount(value: Decimal) -> str:
    return f"{value:.2f}"


def format_count(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


__all__ = [
    "format_amount",
    "format_count",
    "non_negative_amount",
    "non_negative_count",
    "parse_decimal_money",
]
