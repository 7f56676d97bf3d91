"""Stable public API facade for the catalogpress core engine."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .assets import AssetFetcher
from .canonical.entities import Product
from .config import CoreConfig, config_from_env
from .errors import EmptyFeed
from .filters import CatalogFilters, apply_filters
from .importers.feed import normalize
from .render import CatalogRenderer
from .render.layout import ProgressCallback
from .summary import FeedSummary, summarize_products

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogResult:
    pdf_bytes: bytes
    filename: str
    page_count: int
    product_count: int


def load_feed(
    source: bytes | str | Path,
    *,
    format_hint: str | None = None,
    config: CoreConfig | None = None,
) -> list[Product]:
    """Normalize a feed given as bytes, a path string or a ``Path``.

    Without an explicit ``format_hint`` the file name of a path source is used.
    """
    resolved_config = config or config_from_env()
    hint = format_hint
    if hint is None and isinstance(source, (str, Path)):
        hint = Path(source).name
    products = normalize(_coerce_bytes(source), hint, max_products=resolved_config.max_products)
    if not products:
        raise EmptyFeed("Feed contains no products.")
    return products


def summarize_feed(
    source: bytes | str | Path,
    *,
    format_hint: str | None = None,
    config: CoreConfig | None = None,
) -> FeedSummary:
    return summarize_products(load_feed(source, format_hint=format_hint, config=config))


def catalog_filename(config: CoreConfig | None = None) -> str:
    return f"katalog_{(config or CoreConfig()).catalog_name}.pdf"


def generate_catalog(
    products: Sequence[Product],
    filters: CatalogFilters | Mapping[str, Any] | None = None,
    *,
    config: CoreConfig | None = None,
    assets: AssetFetcher | None = None,
    logo: bytes | None = None,
    on_progress: ProgressCallback | None = None,
) -> CatalogResult:
    resolved_config = config or config_from_env()
    if filters is not None and not isinstance(filters, CatalogFilters):
        filters = CatalogFilters.from_params(filters)

    selected = apply_filters(products, filters)
    if not selected:
        raise EmptyFeed("No products match the selected filters.")
    logger.info("Generating catalog for %d of %d product(s)", len(selected), len(products))

    renderer = CatalogRenderer(
        resolved_config,
        assets=assets or AssetFetcher(resolved_config),
        logo=logo,
        on_progress=on_progress,
    )
    pdf_bytes = renderer.render(selected)
    return CatalogResult(
        pdf_bytes=pdf_bytes,
        filename=catalog_filename(resolved_config),
        page_count=renderer.page_count,
        product_count=len(selected),
    )


def _coerce_bytes(value: bytes | str | Path) -> bytes:
    if isinstance(value, bytes):
        return value
    path = Path(value)
    return path.read_bytes()


__all__ = [
    "CatalogResult",
    "catalog_filename",
    "generate_catalog",
    "load_feed",
    "summarize_feed",
]
