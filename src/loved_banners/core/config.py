"""Configuration management using TOML files and platformdirs."""

from __future__ import annotations

from pathlib import Path

import platformdirs
from pydantic import BaseModel, Field, ValidationError

from loved_banners.exceptions import ConfigError

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

APP_NAME = "loved-banners"


def config_dir() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME))


def cache_dir() -> Path:
    return Path(platformdirs.user_cache_dir(APP_NAME))


def default_config_path() -> Path:
    return config_dir() / "loved-banners.toml"


class PathsConfig(BaseModel):
    resources_dir: Path = Path("resources")
    cache_file: Path = Field(default_factory=lambda: cache_dir() / "banner-cache")
    backgrounds_dir: Path = Path("backgrounds")
    banners_dir: Path = Field(default_factory=lambda: Path.cwd() / "banners")


class BannersConfig(BaseModel):
    # beatmapset ID -> title shown on the banner
    title_overrides: dict[int, str] = Field(default_factory=dict)
    fail_fast: bool = False
    max_workers: int = Field(default=4, ge=1)


class Config(BaseModel):
    paths: PathsConfig = Field(default_factory=PathsConfig)
    banners: BannersConfig = Field(default_factory=BannersConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        """Load config from a TOML file, falling back to defaults."""
        config_path = path or default_config_path()
        if not config_path.exists():
            if path is not None:
                raise ConfigError(f"Config file not found: {config_path}")
            return cls()
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            return cls.model_validate(data)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {config_path}: {exc}") from exc
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Failed to read {config_path}: {exc}") from exc
