"""Content-addressed index of already rendered banners."""

from __future__ import annotations

import os
import threading
from hashlib import md5
from pathlib import Path

from loguru import logger

from loved_banners.exceptions import CacheIOError

# Bump whenever the rendered output would change for the same inputs.
ALGORITHM_VERSION = "5"


def cache_key(background: bytes, title: str) -> str:
    """Hash the algorithm version, background bytes, and final title."""
    h = md5()
    h.update(ALGORITHM_VERSION.encode())
    h.update(background)
    h.update(title.encode("utf-8"))
    return h.hexdigest()


class BannerCache:
    """Set of cache keys backed by a text file with one hex key per line.

    The file is read on first use. Every ``record`` rewrites it in full under
    a lock, so concurrent inserts from worker threads cannot drop each other.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._keys: set[str] = set()
        self._loaded = False
        self._lock = threading.Lock()

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        try:
            contents = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            contents = ""
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Failed to read banner cache {self.path}, starting empty: {exc}")
            contents = ""
        self._keys = {line.strip() for line in contents.splitlines() if line.strip()}
        self._loaded = True
        logger.debug(f"Loaded {len(self._keys)} banner cache entries from {self.path}")

    def has(self, key: str) -> bool:
        with self._lock:
            self._ensure_loaded()
            return key in self._keys

    def record(self, key: str) -> None:
        """Add a key and persist the whole index."""
        with self._lock:
            self._ensure_loaded()
            self._keys.add(key)
            self._save()

    def __len__(self) -> int:
        with self._lock:
            self._ensure_loaded()
            return len(self._keys)

    def _save(self) -> None:
        text = "".join(f"{key}\n" for key in sorted(self._keys))
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise CacheIOError(f"Failed to write banner cache {self.path}: {exc}") from exc
        logger.debug(f"Saved {len(self._keys)} banner cache entries to {self.path}")
