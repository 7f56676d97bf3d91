from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_FILTER_FIELDS = (
    "search_phrase",
    "category",
    "min_price",
    "max_price",
    "min_stock",
    "only_available",
    "color",
    "composition",
    "sort_by",
)


class CatalogFilterFields(BaseModel):
    """Filter/sort fields accepted in snake_case or the dashboard's camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    search_phrase: str = Field(default="", alias="searchPhrase")
    category: str = Field(default="")
    min_price: float | str | None = Field(default=None, alias="minPrice")
    max_price: float | str | None = Field(default=None, alias="maxPrice")
    min_stock: float | str | None = Field(default=None, alias="minStock")
    only_available: bool | str = Field(default=False, alias="onlyAvailable")
    color: str = Field(default="")
    composition: str = Field(default="")
    sort_by: str = Field(default="", alias="sortBy", examples=["price", "name", "category", "stock"])
    # Accepted from the dashboard but not rendered.
    discount_percent: float | str | None = Field(default=None, alias="discountPercent")
    discount_label: str = Field(default="", alias="discountLabel")

    def filter_params(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in _FILTER_FIELDS}


class FeedUrlRequest(CatalogFilterFields):
    url: str = Field(..., examples=["https://example.com/feeds/products.xml"])
    login: str = Field(default="")
    password: str = Field(default="")
    format: str | None = Field(
        default=None,
        description="Feed dialect override (csv, xml, abstore, xlsx, xls). Defaults to the URL extension, then XML.",
    )


__all__ = ["CatalogFilterFields", "FeedUrlRequest"]
