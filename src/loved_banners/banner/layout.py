"""Banner geometry: cover-fit cropping and title truncation."""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from loved_banners.core.models import UNSCALED_HEIGHT, UNSCALED_WIDTH, LayoutResult

TITLE_FONT_SIZE = 21
TITLE_MARGIN = 16
TITLE_MAX_WIDTH = UNSCALED_WIDTH - 2 * TITLE_MARGIN
ELLIPSIS = "..."


class TextMeasurer(Protocol):
    def getlength(self, text: str) -> float: ...


def cover_fit(width: int, height: int) -> tuple[float, float, float, float]:
    """Return ``(x, y, w, h)`` of the background drawn on the logical canvas.

    The image is scaled to fill the canvas with its aspect ratio kept, and the
    overflow on the long axis is split evenly, so ``x`` or ``y`` is negative.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image size {width}x{height}")
    image_ratio = width / height
    canvas_ratio = UNSCALED_WIDTH / UNSCALED_HEIGHT
    scaled_width: float = UNSCALED_WIDTH
    scaled_height: float = UNSCALED_HEIGHT
    if image_ratio < canvas_ratio:
        scaled_height = UNSCALED_WIDTH / image_ratio
    else:
        scaled_width = UNSCALED_HEIGHT * image_ratio
    x = (UNSCALED_WIDTH - scaled_width) / 2
    y = (UNSCALED_HEIGHT - scaled_height) / 2
    return x, y, scaled_width, scaled_height


def crop_rect(width: int, height: int) -> tuple[float, float, float, float]:
    """Region of the source image, in source pixels, that ends up visible."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image size {width}x{height}")
    if width / height < UNSCALED_WIDTH / UNSCALED_HEIGHT:
        crop_width = float(width)
        crop_height = width * UNSCALED_HEIGHT / UNSCALED_WIDTH
    else:
        crop_height = float(height)
        crop_width = height * UNSCALED_WIDTH / UNSCALED_HEIGHT
    crop_x = (width - crop_width) / 2
    crop_y = (height - crop_height) / 2
    # Float error must not push the box outside the source
    crop_width = min(crop_width, float(width))
    crop_height = min(crop_height, float(height))
    crop_x = min(max(crop_x, 0.0), width - crop_width)
    crop_y = min(max(crop_y, 0.0), height - crop_height)
    return crop_x, crop_y, crop_width, crop_height


def truncate_title(
    title: str, font: TextMeasurer, max_width: float = TITLE_MAX_WIDTH
) -> tuple[str, bool]:
    """Shorten ``title`` with a trailing ellipsis until it fits ``max_width``.

    At least one character is kept before the ellipsis.
    """
    title_width = font.getlength(title)
    if title_width <= max_width:
        return title, False

    logger.warning(
        f"Title is {(title_width / max_width - 1) * 100:.2f}% wider than the "
        f'available space. Truncating title: "{title}"'
    )
    candidate = title
    while len(candidate) > 1 and font.getlength(candidate + ELLIPSIS) > max_width:
        candidate = candidate[:-1]
    display = candidate + ELLIPSIS
    if font.getlength(display) > max_width:
        logger.warning(f'Title still overflows after truncation: "{display}"')
    return display, True


def compute_layout(width: int, height: int, title: str, font: TextMeasurer) -> LayoutResult:
    crop_x, crop_y, crop_width, crop_height = crop_rect(width, height)
    display_title, truncated = truncate_title(title, font)
    return LayoutResult(
        crop_x=crop_x,
        crop_y=crop_y,
        crop_width=crop_width,
        crop_height=crop_height,
        display_title=display_title,
        truncated=truncated,
    )
