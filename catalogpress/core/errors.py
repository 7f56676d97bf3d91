"""Error taxonomy for feed normalization and catalog rendering.

Everything derives from ``ValueError`` so adapters can keep treating these as
client-side input problems.
"""


class CatalogError(ValueError):
    """Base class for structural catalog failures."""


class UnsupportedFormat(CatalogError):
    pass


class FeedParseError(CatalogError):
    pass


class EmptyFeed(CatalogError):
    pass


class AssetUnavailable(CatalogError):
    """Raised inside asset synthesis only; never reaches callers of the core."""


class EmptyCode(AssetUnavailable):
    pass


__all__ = [
    "AssetUnavailable",
    "CatalogError",
    "EmptyCode",
    "EmptyFeed",
    "FeedParseError",
    "UnsupportedFormat",
]
