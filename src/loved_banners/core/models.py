"""Pydantic data models for beatmapsets, banner requests, and render geometry."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Logical canvas size; physical size is this times the render scale
UNSCALED_WIDTH = 670
UNSCALED_HEIGHT = 200


class Beatmapset(BaseModel):
    """A nominated beatmapset as supplied by the round info."""

    id: int
    title: str
    artist: str = ""
    bg_path: Path | None = None


class BannerRequest(BaseModel):
    """One banner to render. ``background_path=None`` means the default background."""

    model_config = ConfigDict(frozen=True)

    background_path: Path | None
    output_stem: Path
    title: str
    beatmapset_id: int | None = None


class RenderTarget(BaseModel):
    """A fixed output resolution."""

    model_config = ConfigDict(frozen=True)

    scale: int

    @property
    def width(self) -> int:
        return UNSCALED_WIDTH * self.scale

    @property
    def height(self) -> int:
        return UNSCALED_HEIGHT * self.scale

    @property
    def suffix(self) -> str:
        return f"@{self.scale}x" if self.scale > 1 else ""

    def output_path(self, stem: Path) -> Path:
        return Path(f"{stem}{self.suffix}.jpg")


RENDER_TARGETS: tuple[RenderTarget, ...] = (RenderTarget(scale=1), RenderTarget(scale=2))


class LayoutResult(BaseModel):
    """Crop rectangle in source pixels and the title that fits the banner."""

    model_config = ConfigDict(frozen=True)

    crop_x: float
    crop_y: float
    crop_width: float
    crop_height: float
    display_title: str
    truncated: bool = False

    @property
    def crop_box(self) -> tuple[float, float, float, float]:
        return (
            self.crop_x,
            self.crop_y,
            self.crop_x + self.crop_width,
            self.crop_y + self.crop_height,
        )


class BannerStatus(str, Enum):
    GENERATED = "generated"
    CACHED = "cached"
    FAILED = "failed"
    SKIPPED = "skipped"


class BannerResult(BaseModel):
    """Outcome of one banner in a batch."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request: BannerRequest
    status: BannerStatus = BannerStatus.SKIPPED
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status in (BannerStatus.GENERATED, BannerStatus.CACHED)


class RoundManifest(BaseModel):
    """Round info for offline banner generation."""

    round_id: int | None = None
    title: str = ""
    beatmapsets: list[Beatmapset] = Field(default_factory=list)
