"""Exception hierarchy for loved-banners."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loved_banners.core.models import BannerResult


class BannerError(Exception):
    """Base exception for all loved-banners errors."""


class AssetIOError(BannerError):
    """Background, font, or overlay asset could not be read or decoded."""


class CacheIOError(BannerError):
    """Error writing the banner cache index."""


class EncodingError(BannerError):
    """Error compressing a rendered banner to JPEG."""


class ConfigError(BannerError):
    """Error in configuration."""


class BannerBatchError(BannerError):
    """A fail-fast batch was aborted by a failing banner."""

    def __init__(self, message: str, results: list[BannerResult]) -> None:
        super().__init__(message)
        self.results = results
