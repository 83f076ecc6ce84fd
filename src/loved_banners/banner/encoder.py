"""JPEG output for rendered banners."""

from __future__ import annotations

import contextlib
import os
from pathlib import Path

from loguru import logger
from PIL import Image

from loved_banners.exceptions import EncodingError

JPEG_QUALITY = 80


def encode_jpeg(image: Image.Image, path: Path) -> Path:
    """Write ``image`` as an optimized progressive JPEG.

    The file is written next to ``path`` first and moved into place, so a
    failed encode never leaves a truncated banner behind.
    """
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        image.convert("RGB").save(
            tmp_path,
            format="JPEG",
            quality=JPEG_QUALITY,
            optimize=True,
            progressive=True,
        )
        os.replace(tmp_path, path)
    except (OSError, ValueError) as exc:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise EncodingError(f"Failed to write {path}: {exc}") from exc
    logger.debug(f"Wrote {path}")
    return path
