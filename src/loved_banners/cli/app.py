"""Typer CLI application for loved-banners."""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Optional

import anyio
import typer
from loguru import logger
from pydantic import ValidationError

from loved_banners import __version__
from loved_banners.cli.display import (
    console,
    print_error,
    print_results,
    print_success,
    print_summary,
    print_warning,
)
from loved_banners.core.config import Config, cache_dir, config_dir, default_config_path
from loved_banners.exceptions import BannerBatchError, BannerError, ConfigError

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

if TYPE_CHECKING:
    from loved_banners.banner.service import BannerService
    from loved_banners.core.models import RoundManifest

app = typer.Typer(
    name="loved-banners",
    help="Voting banner generator for osu! Loved rounds.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Config file (defaults to the user config dir)"),
]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"loved-banners {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
) -> None:
    """loved-banners: render voting banners for a Loved round."""
    if verbose:
        logger.enable("loved_banners")
    else:
        logger.disable("loved_banners")


def _build_service(config: Config) -> BannerService:
    from loved_banners.banner.assets import Resources
    from loved_banners.banner.service import BannerService
    from loved_banners.core.cache import BannerCache

    return BannerService(
        Resources(config.paths.resources_dir),
        BannerCache(config.paths.cache_file),
    )


def _load_manifest(path: Path) -> RoundManifest:
    from loved_banners.core.models import RoundManifest

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return RoundManifest.model_validate(data)
    except OSError as exc:
        raise ConfigError(f"Failed to read manifest {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigError(f"Invalid manifest {path}: {exc}") from exc


@app.command()
def render(
    output_stem: Annotated[
        Path, typer.Argument(help="Output path without extension (.jpg and @2x.jpg are added)")
    ],
    title: Annotated[str, typer.Argument(help="Title shown on the banner")],
    background: Annotated[
        Optional[Path],
        typer.Option("--background", "-b", help="Background image (defaults to the bundled one)"),
    ] = None,
    config_file: ConfigOption = None,
) -> None:
    """Render a single voting banner."""
    try:
        config = Config.load(config_file)
        service = _build_service(config)
        generated = service.create_banner(background, output_stem, title)
    except BannerError as exc:
        print_error(str(exc))
        raise typer.Exit(1)
    if generated:
        print_success(f"Created banners for {output_stem}")
    else:
        console.print(f"[dim]Using cached banners for {output_stem}[/dim]")


@app.command()
def generate(
    manifest: Annotated[Path, typer.Argument(help="Round manifest (TOML) listing beatmapsets")],
    output_dir: Annotated[
        Optional[Path], typer.Option("--output-dir", "-o", help="Directory for banner files")
    ] = None,
    backgrounds_dir: Annotated[
        Optional[Path],
        typer.Option("--backgrounds-dir", help="Directory with <beatmapset id>.jpg backgrounds"),
    ] = None,
    fail_fast: Annotated[
        Optional[bool],
        typer.Option("--fail-fast/--keep-going", help="Abort the round on the first failure"),
    ] = None,
    config_file: ConfigOption = None,
) -> None:
    """Render banners for every beatmapset in a round manifest."""
    from loved_banners.core.batch import (
        backgrounds_dir_for_round,
        build_requests,
        generate_banners,
        load_background_paths,
    )
    from loved_banners.core.models import BannerStatus

    try:
        config = Config.load(config_file)
        round_manifest = _load_manifest(manifest)
    except BannerError as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    if backgrounds_dir is None:
        backgrounds_dir = config.paths.backgrounds_dir
        if round_manifest.round_id is not None:
            backgrounds_dir = backgrounds_dir_for_round(backgrounds_dir, round_manifest.round_id)

    beatmapsets = round_manifest.beatmapsets
    bg_paths = load_background_paths(backgrounds_dir, beatmapsets)
    for beatmapset in beatmapsets:
        if beatmapset.bg_path is None:
            beatmapset.bg_path = bg_paths.get(beatmapset.id)

    requests = build_requests(
        beatmapsets,
        output_dir or config.paths.banners_dir,
        config.banners.title_overrides,
    )
    service = _build_service(config)
    run = partial(
        generate_banners,
        service,
        requests,
        fail_fast=config.banners.fail_fast if fail_fast is None else fail_fast,
        max_workers=config.banners.max_workers,
    )

    try:
        results = anyio.run(run)
    except BannerBatchError as exc:
        print_results(exc.results)
        print_error(str(exc))
        raise typer.Exit(1)

    print_results(results)
    print_summary(results)
    if any(result.status == BannerStatus.FAILED for result in results):
        print_warning("Some banners could not be generated.")
        raise typer.Exit(1)
    print_success("Done generating banners")


@app.command(name="config-path")
def config_path() -> None:
    """Show config and cache paths."""
    console.print(f"[bold]Config:[/bold] {default_config_path()}")
    console.print(f"[bold]Config dir:[/bold] {config_dir()}")
    console.print(f"[bold]Cache dir:[/bold]  {cache_dir()}")


def run() -> None:
    app()
