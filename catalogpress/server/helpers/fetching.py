"""Remote feed download for the URL routes."""

import logging
from pathlib import PurePosixPath
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth
from urllib3.util.retry import Retry

from ...core.importers.feed import SUPPORTED_EXTENSIONS

logger = logging.getLogger("uvicorn.error")

FEED_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "application/xml, text/xml, */*",
}
MAX_REDIRECTS = 10
DEFAULT_URL_FORMAT = "xml"


class FeedDownloadError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def http_session() -> requests.Session:
    s = requests.Session()
    retries = Retry(
        total=3,
        backoff_factor=0.6,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.max_redirects = MAX_REDIRECTS
    return s


def format_hint_from_url(url: str) -> str:
    suffix = PurePosixPath(urlparse(url).path).suffix.lower()
    if suffix in SUPPORTED_EXTENSIONS:
        return suffix.lstrip(".")
    return DEFAULT_URL_FORMAT


def download_feed(
    url: str,
    *,
    login: str = "",
    password: str = "",
    timeout: float = 180.0,
    session: requests.Session | None = None,
) -> bytes:
    target = str(url or "").strip()
    if not target:
        raise ValueError("Feed URL is required.")
    parsed = urlparse(target)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("Feed URL must be an absolute http(s) URL.")

    auth = HTTPBasicAuth(login, password) if login and password else None
    if auth is not None:
        logger.info("Fetching feed %s with Basic Auth for user %r", target, login)
    else:
        logger.info("Fetching feed %s", target)

    client = session or http_session()
    try:
        response = client.get(target, headers=FEED_HEADERS, auth=auth, allow_redirects=True, timeout=timeout)
    except requests.RequestException as exc:
        raise FeedDownloadError(f"Feed download failed: {exc}") from exc

    if response.status_code >= 400:
        reason = response.reason or "Unknown error"
        raise FeedDownloadError(f"HTTP {response.status_code}: {reason}", status_code=response.status_code)

    content = response.content or b""
    logger.info("Feed downloaded: %.1f KB", len(content) / 1024)
    return content


__all__ = ["FeedDownloadError", "download_feed", "format_hint_from_url", "http_session"]
