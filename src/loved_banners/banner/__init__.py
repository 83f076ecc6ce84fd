"""Banner rendering: assets, layout, rasterization, and JPEG encoding."""

from loved_banners.banner.service import BannerService

__all__ = ["BannerService"]
