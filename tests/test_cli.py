from pathlib import Path

from typer.testing import CliRunner

from loved_banners import __version__
from loved_banners.banner.assets import Resources
from loved_banners.cli.app import app

runner = CliRunner()


def _write_config(tmp_path: Path, resources: Resources) -> Path:
    path = tmp_path / "loved-banners.toml"
    path.write_text(
        f"""
[paths]
resources_dir = "{resources.root.as_posix()}"
cache_file = "{(tmp_path / 'banner-cache').as_posix()}"
backgrounds_dir = "{(tmp_path / 'backgrounds').as_posix()}"
banners_dir = "{(tmp_path / 'banners').as_posix()}"

[banners.title_overrides]
2 = "Overridden"
"""
    )
    return path


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_config_path() -> None:
    result = runner.invoke(app, ["config-path"])
    assert result.exit_code == 0
    assert "loved-banners.toml" in result.output


def test_render_then_cached(tmp_path: Path, resources: Resources) -> None:
    config = _write_config(tmp_path, resources)
    stem = tmp_path / "out" / "banner"

    result = runner.invoke(app, ["render", str(stem), "Artist - Title", "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert "Created" in result.output
    assert Path(f"{stem}@2x.jpg").exists()

    result = runner.invoke(app, ["render", str(stem), "Artist - Title", "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert "cached" in result.output


def test_render_missing_background(tmp_path: Path, resources: Resources) -> None:
    config = _write_config(tmp_path, resources)
    result = runner.invoke(
        app,
        ["render", str(tmp_path / "x"), "T", "-b", str(tmp_path / "none.jpg"), "-c", str(config)],
    )
    assert result.exit_code == 1


def test_generate_from_manifest(tmp_path: Path, resources: Resources, make_background) -> None:
    config = _write_config(tmp_path, resources)
    backgrounds = tmp_path / "backgrounds" / "150"
    backgrounds.mkdir(parents=True)
    make_background("backgrounds/150/1.jpg", (1200, 300))
    manifest = tmp_path / "round.toml"
    manifest.write_text(
        """
round_id = 150
title = "Loved round 150"

[[beatmapsets]]
id = 1
title = "First Map"

[[beatmapsets]]
id = 2
title = "Second Map"
"""
    )

    result = runner.invoke(app, ["generate", str(manifest), "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "banners" / "1.jpg").exists()
    assert (tmp_path / "banners" / "2@2x.jpg").exists()
    assert len((tmp_path / "banner-cache").read_text().split()) == 2


def test_generate_reports_failures(tmp_path: Path, resources: Resources) -> None:
    config = _write_config(tmp_path, resources)
    broken = tmp_path / "broken.jpg"
    broken.write_bytes(b"nope")
    manifest = tmp_path / "round.toml"
    manifest.write_text(
        f"""
[[beatmapsets]]
id = 1
title = "Broken"
bg_path = "{broken.as_posix()}"
"""
    )
    result = runner.invoke(app, ["generate", str(manifest), "-c", str(config), "--keep-going"])
    assert result.exit_code == 1

    result = runner.invoke(app, ["generate", str(manifest), "-c", str(config), "--fail-fast"])
    assert result.exit_code == 1


def test_generate_bad_manifest(tmp_path: Path, resources: Resources) -> None:
    config = _write_config(tmp_path, resources)
    manifest = tmp_path / "round.toml"
    manifest.write_text("[[beatmapsets]]\ntitle = 'no id'\n")
    result = runner.invoke(app, ["generate", str(manifest), "-c", str(config)])
    assert result.exit_code == 1
