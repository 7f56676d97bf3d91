"""Core engine configuration.

Core config is side-effect free: it does not load dotenv files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class CoreConfig:
    max_products: int = 10000
    image_timeout: float = 10.0
    fetch_workers: int = 8
    prefetch_window: int = 40
    currency: str = "PLN"
    subtitle: str = "KATALOG PRODUKTOW"
    website: str = "www.spodiglyinitki.pl"
    catalog_name: str = "spod-igly-i-nitki"


def _env_int(name: str, default: int) -> int:
    try:
        value = int(os.getenv(name, ""))
    except ValueError:
        return default
    return value if value > 0 else default


def _env_float(name: str, default: float) -> float:
    try:
        value = float(os.getenv(name, ""))
    except ValueError:
        return default
    return value if value > 0 else default


def config_from_env() -> CoreConfig:
    defaults = CoreConfig()
    return CoreConfig(
        max_products=_env_int("CATALOG_MAX_PRODUCTS", defaults.max_products),
        image_timeout=_env_float("CATALOG_IMAGE_TIMEOUT", defaults.image_timeout),
        fetch_workers=_env_int("CATALOG_FETCH_WORKERS", defaults.fetch_workers),
        website=os.getenv("CATALOG_WEBSITE", defaults.website),
        catalog_name=os.getenv("CATALOG_NAME", defaults.catalog_name),
    )


__all__ = ["CoreConfig", "config_from_env"]
