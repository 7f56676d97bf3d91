from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import Any

from .helpers import format_amount, non_negative_amount, non_negative_count


@dataclass(frozen=True)
class Product:
    id: str = ""
    index: str = ""
    name: str = ""
    description: str = ""
    category: str = ""
    price: Decimal = field(default_factory=lambda: Decimal("0"))
    price_net: Decimal = field(default_factory=lambda: Decimal("0"))
    image_url: str = ""
    b2b_link: str = ""
    ean: str = ""
    availability_count: float = 0.0
    color: str = ""
    composition: str = ""
    grammage: str = ""
    pieces_in_carton: str = ""
    package_width: str = ""
    package_height: str = ""
    package_depth: str = ""
    package_weight: str = ""

    def __post_init__(self) -> None:
        # Frozen: coerce through object.__setattr__ so invariants hold for any caller.
        for item in fields(self):
            if item.type is str or item.type == "str":
                value = getattr(self, item.name)
                object.__setattr__(self, item.name, "" if value is None else str(value).strip())
        object.__setattr__(self, "price", non_negative_amount(self.price))
        object.__setattr__(self, "price_net", non_negative_amount(self.price_net))
        object.__setattr__(self, "availability_count", non_negative_count(self.availability_count))

    @property
    def in_stock(self) -> bool:
        return self.availability_count > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "index": self.index,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": format_amount(self.price),
            "price_net": format_amount(self.price_net),
            "image_url": self.image_url,
            "b2b_link": self.b2b_link,
            "ean": self.ean,
            "availability_count": self.availability_count,
            "color": self.color,
            "composition": self.composition,
            "grammage": self.grammage,
            "pieces_in_carton": self.pieces_in_carton,
            "package_width": self.package_width,
            "package_height": self.package_height,
            "package_depth": self.package_depth,
            "package_weight": self.package_weight,
        }


__all__ = ["Product"]
