"""Compose a banner raster for one render target using Pillow."""

from __future__ import annotations

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from loved_banners.banner.layout import TITLE_MARGIN
from loved_banners.core.models import LayoutResult, RenderTarget

TITLE_COLOR = (255, 255, 255, 255)
SHADOW_COLOR = (0, 0, 0, 102)
SHADOW_BLUR = 3
SHADOW_OFFSET_Y = 3
TITLE_BOTTOM_OFFSET = 31


def rasterize(
    background: Image.Image,
    layout: LayoutResult,
    target: RenderTarget,
    overlay: Image.Image,
    font: ImageFont.FreeTypeFont,
) -> Image.Image:
    """Return an RGBA image of ``target`` size with background, overlay, and title."""
    size = (target.width, target.height)
    scale = target.scale

    canvas = Image.new("RGBA", size, (0, 0, 0, 255))
    cropped = background.convert("RGBA").resize(
        size, Image.Resampling.LANCZOS, box=layout.crop_box
    )
    canvas.alpha_composite(cropped)
    canvas.alpha_composite(overlay)

    if not layout.display_title:
        return canvas

    anchor_xy = (target.width - TITLE_MARGIN * scale, target.height - TITLE_BOTTOM_OFFSET * scale)

    # Shadow goes on its own layer so the blur does not touch the background
    shadow = Image.new("RGBA", size, (0, 0, 0, 0))
    ImageDraw.Draw(shadow).text(
        (anchor_xy[0], anchor_xy[1] + SHADOW_OFFSET_Y * scale),
        layout.display_title,
        font=font,
        fill=SHADOW_COLOR,
        anchor="rd",
    )
    # A canvas shadow blur of b is a Gaussian with sigma b / 2
    shadow = shadow.filter(ImageFilter.GaussianBlur(radius=SHADOW_BLUR * scale / 2))
    canvas.alpha_composite(shadow)

    ImageDraw.Draw(canvas).text(
        anchor_xy, layout.display_title, font=font, fill=TITLE_COLOR, anchor="rd"
    )
    return canvas
