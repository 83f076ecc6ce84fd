"""Voting banner creation with an on-disk render cache."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

from loguru import logger
from PIL import Image, UnidentifiedImageError

from loved_banners.banner.assets import FONT_FAMILY, FontRegistry, OverlayStore, Resources
from loved_banners.banner.encoder import encode_jpeg
from loved_banners.banner.layout import TITLE_FONT_SIZE, compute_layout
from loved_banners.banner.rasterizer import rasterize
from loved_banners.core.cache import BannerCache, cache_key
from loved_banners.core.models import RENDER_TARGETS, BannerRequest, LayoutResult
from loved_banners.exceptions import AssetIOError, CacheIOError

Encoder = Callable[[Image.Image, Path], Path]


class BannerService:
    """Renders voting banners at 1x and 2x, skipping unchanged ones.

    The cache, font registry, and overlay store are passed in so one set can be
    shared by every banner of a round; any left out are created here.
    """

    def __init__(
        self,
        resources: Resources,
        cache: BannerCache,
        fonts: FontRegistry | None = None,
        overlays: OverlayStore | None = None,
        encoder: Encoder = encode_jpeg,
    ) -> None:
        self.resources = resources
        self.cache = cache
        self.fonts = fonts or FontRegistry()
        self.overlays = overlays or OverlayStore(resources)
        self.encoder = encoder

    @property
    def default_background_path(self) -> Path:
        return self.resources.default_background

    def _init_font(self) -> None:
        if not self.fonts.is_registered(FONT_FAMILY):
            self.fonts.register(self.resources.font, FONT_FAMILY)

    def _read_background(self, path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise AssetIOError(f"Failed to read background {path}: {exc}") from exc

    @staticmethod
    def _decode_background(data: bytes, path: Path) -> Image.Image:
        try:
            with Image.open(io.BytesIO(data)) as im:
                im.load()
                return im.copy()
        except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as exc:
            raise AssetIOError(f"Failed to decode background {path}: {exc}") from exc

    def layout(self, background: Image.Image, title: str) -> LayoutResult:
        font = self.fonts.get(FONT_FAMILY, TITLE_FONT_SIZE)
        return compute_layout(background.width, background.height, title, font)

    def render(self, background: Image.Image, layout: LayoutResult) -> list[Image.Image]:
        """Rasterize every render target in memory."""
        return [
            rasterize(
                background,
                layout,
                target,
                self.overlays.get(target),
                self.fonts.get(FONT_FAMILY, TITLE_FONT_SIZE * target.scale),
            )
            for target in RENDER_TARGETS
        ]

    def create_banner(self, background_path: Path | None, output_stem: Path, title: str) -> bool:
        """Create ``<stem>.jpg`` and ``<stem>@2x.jpg``.

        Returns True if the banners were rendered, False if cached ones were kept.
        """
        if background_path is None:
            background_path = self.default_background_path
        if not output_stem:
            raise ValueError("Output path not set")
        output_stem = Path(output_stem)

        self._init_font()

        background_bytes = self._read_background(background_path)
        key = cache_key(background_bytes, title)
        outputs = [target.output_path(output_stem) for target in RENDER_TARGETS]

        if self.cache.has(key) and all(path.exists() for path in outputs):
            return False

        background = self._decode_background(background_bytes, background_path)
        layout = self.layout(background, title)

        for raster, output in zip(self.render(background, layout), outputs):
            self.encoder(raster, output)

        try:
            self.cache.record(key)
        except CacheIOError as exc:
            logger.warning(f"{exc}; banners for {output_stem} will be rendered again next time")
        return True

    def create(self, request: BannerRequest) -> bool:
        return self.create_banner(request.background_path, request.output_stem, request.title)
