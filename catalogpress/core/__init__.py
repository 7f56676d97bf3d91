"""Core engine API.

The core layer is framework-agnostic and safe to import from scripts, tests,
CLI commands, and web frontends.
"""

from typing import Any

_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    "AssetFetcher": ("catalogpress.core.assets", "AssetFetcher"),
    "AssetResult": ("catalogpress.core.assets", "AssetResult"),
    "CatalogError": ("catalogpress.core.errors", "CatalogError"),
    "CatalogFilters": ("catalogpress.core.filters", "CatalogFilters"),
    "CatalogRenderer": ("catalogpress.core.render.layout", "CatalogRenderer"),
    "CatalogResult": ("catalogpress.core.api", "CatalogResult"),
    "CoreConfig": ("catalogpress.core.config", "CoreConfig"),
    "EmptyFeed": ("catalogpress.core.errors", "EmptyFeed"),
    "FeedParseError": ("catalogpress.core.errors", "FeedParseError"),
    "FeedSummary": ("catalogpress.core.summary", "FeedSummary"),
    "Product": ("catalogpress.core.canonical.entities", "Product"),
    "UnsupportedFormat": ("catalogpress.core.errors", "UnsupportedFormat"),
    "apply_filters": ("catalogpress.core.filters", "apply_filters"),
    "config_from_env": ("catalogpress.core.config", "config_from_env"),
    "generate_catalog": ("catalogpress.core.api", "generate_catalog"),
    "load_feed": ("catalogpress.core.api", "load_feed"),
    "normalize": ("catalogpress.core.importers.feed", "normalize"),
    "summarize_feed": ("catalogpress.core.api", "summarize_feed"),
    "summarize_products": ("catalogpress.core.summary", "summarize_products"),
}

__all__ = [
    "AssetFetcher",
    "AssetResult",
    "CatalogError",
    "CatalogFilters",
    "CatalogRenderer",
    "CatalogResult",
    "CoreConfig",
    "EmptyFeed",
    "FeedParseError",
    "FeedSummary",
    "Product",
    "UnsupportedFormat",
    "apply_filters",
    "config_from_env",
    "generate_catalog",
    "load_feed",
    "normalize",
    "summarize_feed",
    "summarize_products",
]


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attribute_name = target
    module = __import__(module_name, fromlist=[attribute_name])
    value = getattr(module, attribute_name)
    globals()[name] = value
    return value
