import sys
from pathlib import Path

import pytest

# Ensure `import catalogpress` works when running `pytest` without needing PYTHONPATH hacks.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from catalogpress.config import get_settings  # noqa: E402
from catalogpress.core.assets import AssetResult  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def offline_images(monkeypatch) -> list[str]:
    """Replace remote image fetching with an always-absent result."""
    requested: list[str] = []

    def fake_fetch_image(url: str, **kwargs) -> AssetResult:
        requested.append(url)
        return AssetResult.absent("offline")

    monkeypatch.setattr("catalogpress.core.assets.fetch_image", fake_fetch_image)
    return requested
