from .feed import DIALECTS, SUPPORTED_EXTENSIONS, FeedDialect, normalize, resolve_dialect
from .resolver import resolve, resolve_ean, resolve_grammage, resolve_product

__all__ = [
    "DIALECTS",
    "FeedDialect",
    "SUPPORTED_EXTENSIONS",
    "normalize",
    "resolve",
    "resolve_dialect",
    "resolve_ean",
    "resolve_grammage",
    "resolve_product",
]
