"""Environment settings for the CLI and HTTP server.

Rendering knobs (product cap, worker pool, title texts) live in
``catalogpress.core.config``; this module only covers process-level options.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_tagline: str
    debug: bool
    log_verbosity: str
    cors_allow_origins: tuple[str, ...]
    logo_path: str | None
    max_upload_bytes: int
    feed_fetch_timeout: float
    host: str
    port: int


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _env_choice(name: str, default: str, *, allowed: set[str]) -> str:
    val = os.getenv(name)
    if val is None:
        return default
    normalized = val.strip().lower()
    if normalized in allowed:
        return normalized
    return default


def _env_number(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        parsed = float(val.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = tuple(
        origin.strip()
        for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    )
    return Settings(
        app_name=os.getenv("APP_NAME", "Catalog Press"),
        app_tagline=os.getenv(
            "APP_TAGLINE",
            "Turn supplier product feeds into printable PDF catalogs.",
        ),
        debug=_env_bool("DEBUG", default=False),
        log_verbosity=_env_choice(
            "LOG_VERBOSITY",
            default="medium",
            allowed={"low", "medium", "high", "extrahigh"},
        ),
        cors_allow_origins=origins or ("*",),
        logo_path=os.getenv("CATALOG_LOGO_PATH") or None,
        max_upload_bytes=int(_env_number("MAX_UPLOAD_BYTES", 50 * 1024 * 1024)),
        feed_fetch_timeout=_env_number("FEED_FETCH_TIMEOUT", 180.0),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(_env_number("PORT", 8000)),
    )


__all__ = ["Settings", "get_settings"]
