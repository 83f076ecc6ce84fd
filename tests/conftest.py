from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image, ImageDraw, ImageFont

from loved_banners.banner.assets import FontRegistry, OverlayStore, Resources
from loved_banners.banner.service import BannerService
from loved_banners.core.cache import BannerCache
from loved_banners.core.models import RENDER_TARGETS


def _font_bytes() -> bytes:
    # Pillow ships an embedded FreeType font (Aileron) behind load_default
    return ImageFont.load_default(size=21).font_bytes


def write_background(path: Path, size: tuple[int, int], color=(40, 90, 160)) -> Path:
    image = Image.new("RGB", size, color)
    draw = ImageDraw.Draw(image)
    width, height = size
    draw.rectangle([(width // 4, height // 4), (width * 3 // 4, height * 3 // 4)], fill=(220, 120, 30))
    image.save(path, format="JPEG", quality=95)
    return path


@pytest.fixture
def resources(tmp_path: Path) -> Resources:
    root = tmp_path / "resources"
    root.mkdir()
    res = Resources(root)
    res.font.write_bytes(_font_bytes())
    for target in RENDER_TARGETS:
        overlay = Image.new("RGBA", (target.width, target.height), (0, 0, 0, 0))
        ImageDraw.Draw(overlay).rectangle(
            [(0, target.height * 3 // 4), (target.width, target.height)],
            fill=(0, 0, 0, 128),
        )
        overlay.save(res.overlay(target))
    write_background(res.default_background, (1920, 1080))
    return res


@pytest.fixture
def make_background(tmp_path: Path):
    def _make(name: str, size: tuple[int, int], color=(40, 90, 160)) -> Path:
        return write_background(tmp_path / name, size, color)

    return _make


@pytest.fixture
def fonts(resources: Resources) -> FontRegistry:
    registry = FontRegistry()
    registry.register(resources.font, "Torus")
    return registry


@pytest.fixture
def cache(tmp_path: Path) -> BannerCache:
    return BannerCache(tmp_path / "config" / "banner-cache")


@pytest.fixture
def service(resources: Resources, cache: BannerCache) -> BannerService:
    return BannerService(resources, cache, FontRegistry(), OverlayStore(resources))
