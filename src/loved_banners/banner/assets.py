"""Font and overlay assets shared by every banner rendered in a process."""

from __future__ import annotations

import io
import threading
from pathlib import Path

from loguru import logger
from PIL import Image, ImageFont, UnidentifiedImageError

from loved_banners.core.models import RenderTarget
from loved_banners.exceptions import AssetIOError

FONT_FAMILY = "Torus"
FONT_FILENAME = "Torus-Regular.otf"
DEFAULT_BACKGROUND_FILENAME = "voting-default-background.jpg"


def overlay_filename(target: RenderTarget) -> str:
    return f"voting-overlay{target.suffix}.png"


class Resources:
    """Fixed asset locations inside a resources directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @property
    def font(self) -> Path:
        return self.root / FONT_FILENAME

    @property
    def default_background(self) -> Path:
        return self.root / DEFAULT_BACKGROUND_FILENAME

    def overlay(self, target: RenderTarget) -> Path:
        return self.root / overlay_filename(target)


class FontRegistry:
    """Registered typefaces by family name, with sized instances cached."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self._sized: dict[tuple[str, int], ImageFont.FreeTypeFont] = {}
        self._lock = threading.Lock()

    def is_registered(self, family: str) -> bool:
        with self._lock:
            return family in self._data

    def register(self, path: Path, family: str) -> None:
        """Load a TrueType/OpenType file under ``family``. Re-registering is a no-op."""
        with self._lock:
            if family in self._data:
                return
            try:
                data = Path(path).read_bytes()
                # Parse once so a broken file fails here rather than at draw time
                ImageFont.truetype(io.BytesIO(data), 12)
            except OSError as exc:
                raise AssetIOError(f"Failed to load font {path}: {exc}") from exc
            self._data[family] = data
            logger.debug(f"Registered font family {family!r} from {path}")

    def get(self, family: str, size: int) -> ImageFont.FreeTypeFont:
        with self._lock:
            font = self._sized.get((family, size))
            if font is None:
                if family not in self._data:
                    raise AssetIOError(f"Font family {family!r} is not registered")
                font = ImageFont.truetype(io.BytesIO(self._data[family]), size)
                self._sized[(family, size)] = font
            return font


class OverlayStore:
    """Lazily loads each scale's overlay image exactly once."""

    def __init__(self, resources: Resources) -> None:
        self.resources = resources
        self._images: dict[int, Image.Image] = {}
        self._locks: dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, scale: int) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(scale, threading.Lock())

    def get(self, target: RenderTarget) -> Image.Image:
        image = self._images.get(target.scale)
        if image is not None:
            return image
        with self._lock_for(target.scale):
            image = self._images.get(target.scale)
            if image is None:
                image = self._load(target)
                self._images[target.scale] = image
            return image

    def _load(self, target: RenderTarget) -> Image.Image:
        path = self.resources.overlay(target)
        try:
            with Image.open(path) as im:
                image = im.convert("RGBA")
        except (OSError, UnidentifiedImageError) as exc:
            raise AssetIOError(f"Failed to load overlay {path}: {exc}") from exc
        if image.size != (target.width, target.height):
            raise AssetIOError(
                f"Overlay {path} is {image.width}x{image.height}, "
                f"expected {target.width}x{target.height}"
            )
        logger.debug(f"Loaded overlay {path}")
        return image
