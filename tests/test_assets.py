import threading
from pathlib import Path

import pytest
from PIL import Image

from loved_banners.banner.assets import FontRegistry, OverlayStore, Resources
from loved_banners.core.models import RENDER_TARGETS, RenderTarget
from loved_banners.exceptions import AssetIOError


def test_register_is_idempotent(resources: Resources) -> None:
    registry = FontRegistry()
    assert not registry.is_registered("Torus")
    registry.register(resources.font, "Torus")
    registry.register(resources.font, "Torus")
    assert registry.is_registered("Torus")
    assert registry.get("Torus", 21) is registry.get("Torus", 21)
    assert registry.get("Torus", 42).size == 42


def test_register_missing_font_raises(tmp_path: Path) -> None:
    registry = FontRegistry()
    with pytest.raises(AssetIOError):
        registry.register(tmp_path / "missing.otf", "Torus")
    assert not registry.is_registered("Torus")


def test_register_broken_font_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.otf"
    path.write_bytes(b"not a font")
    with pytest.raises(AssetIOError):
        FontRegistry().register(path, "Torus")


def test_get_unregistered_family_raises() -> None:
    with pytest.raises(AssetIOError):
        FontRegistry().get("Torus", 21)


def test_overlay_paths(tmp_path: Path) -> None:
    res = Resources(tmp_path)
    assert res.overlay(RenderTarget(scale=1)).name == "voting-overlay.png"
    assert res.overlay(RenderTarget(scale=2)).name == "voting-overlay@2x.png"


def test_overlay_loaded_once_per_scale(resources: Resources, monkeypatch) -> None:
    store = OverlayStore(resources)
    calls = []
    original = OverlayStore._load

    def counting_load(self, target):
        calls.append(target.scale)
        return original(self, target)

    monkeypatch.setattr(OverlayStore, "_load", counting_load)

    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        for target in RENDER_TARGETS:
            store.get(target)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(calls) == [1, 2]
    assert store.get(RENDER_TARGETS[1]).size == (1340, 400)


def test_overlay_missing_raises(tmp_path: Path) -> None:
    store = OverlayStore(Resources(tmp_path))
    with pytest.raises(AssetIOError):
        store.get(RENDER_TARGETS[0])


def test_overlay_wrong_size_raises(tmp_path: Path) -> None:
    res = Resources(tmp_path)
    Image.new("RGBA", (100, 100)).save(res.overlay(RENDER_TARGETS[0]))
    with pytest.raises(AssetIOError):
        OverlayStore(res).get(RENDER_TARGETS[0])
