"""Public package entrypoint for the catalogpress engine.

This package provides a stable import surface for feed normalization and PDF
catalog rendering, plus optional frontend adapters (CLI and FastAPI server).
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Any

_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    "CatalogFilters": ("catalogpress.core", "CatalogFilters"),
    "Product": ("catalogpress.core", "Product"),
    "app": ("catalogpress.server.main", "app"),
    "create_app": ("catalogpress.server.main", "create_app"),
    "generate_catalog": ("catalogpress.core", "generate_catalog"),
    "load_feed": ("catalogpress.core", "load_feed"),
    "normalize": ("catalogpress.core", "normalize"),
    "summarize_products": ("catalogpress.core", "summarize_products"),
}

try:
    __version__ = version("catalogpress")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "CatalogFilters",
    "Product",
    "__version__",
    "app",
    "create_app",
    "generate_catalog",
    "load_feed",
    "normalize",
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
