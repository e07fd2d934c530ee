"""Content store — directory-backed key -> blob persistence with age-based freshness.

Each key is one file in the store directory. A blob is fresh while
``now - mtime < max_age``; the timestamp comes from the filesystem and is not
embedded in the blob. Writes go through a temp file and ``os.replace`` so a
concurrent reader sees either the old or the new blob, never a partial one.
"""

from __future__ import annotations

import logging
import os
import struct
import tempfile
import time
from pathlib import Path
from typing import Callable

from pricewright.config import DEFAULT_MAX_AGE
from pricewright.errors import NotFound, StoreIOError

logger = logging.getLogger(__name__)

# little-endian IEEE-754 double
_FLOAT = struct.Struct("<d")
_TMP_SUFFIX = ".tmp"


class ContentStore:
    """Disk-backed blob store keyed by plain file names."""

    def __init__(
        self,
        directory: str | Path,
        max_age: float = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ):
        self.directory = Path(directory)
        self.max_age = max_age
        self._clock = clock

    def path_for(self, key: str) -> Path:
        if not key or key in (".", "..") or "/" in key or os.sep in key:
            raise ValueError(f"Invalid store key: {key!r}")
        return self.directory / key

    # ------------------------------------------------------------------
    # Freshness
    # ------------------------------------------------------------------

    def age(self, key: str) -> float | None:
        """Seconds since the blob was last written, or None if it doesn't exist."""
        try:
            mtime = self.path_for(key).stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreIOError(f"Cannot stat {key}: {exc}") from exc
        return self._clock() - mtime

    def has_fresh(self, key: str, max_age: float | None = None) -> bool:
        age = self.age(key)
        if age is None:
            return False
        window = self.max_age if max_age is None else max_age
        return age < window

    # ------------------------------------------------------------------
    # Raw bytes
    # ------------------------------------------------------------------

    def read(self, key: str) -> bytes:
        path = self.path_for(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFound(f"No cached entry for {key} in {self.directory}") from exc
        except OSError as exc:
            raise StoreIOError(f"Cannot read {path}: {exc}") from exc
        logger.debug("Read %d bytes from %s", len(data), path)
        return data

    def write(self, key: str, data: bytes) -> None:
        """Atomically write data under key, creating the store directory if needed."""
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=_TMP_SUFFIX)
        except OSError as exc:
            raise StoreIOError(f"Cannot write {path}: {exc}") from exc

        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_path, path)
        except OSError as exc:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreIOError(f"Cannot write {path}: {exc}") from exc
        logger.debug("Wrote %d bytes to %s", len(data), path)

    # ------------------------------------------------------------------
    # Fixed-width floats
    # ------------------------------------------------------------------

    def read_float(self, key: str) -> float:
        data = self.read(key)
        if len(data) != _FLOAT.size:
            raise StoreIOError(f"Cached entry {key} is {len(data)} bytes, expected {_FLOAT.size}")
        return _FLOAT.unpack(data)[0]

    def write_float(self, key: str, value: float) -> None:
        self.write(key, _FLOAT.pack(value))

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def keys(self) -> list[str]:
        """Stored keys, sorted. In-flight temp files are skipped."""
        if not self.directory.is_dir():
            return []
        try:
            return sorted(
                p.name for p in self.directory.iterdir() if p.is_file() and not p.name.endswith(_TMP_SUFFIX)
            )
        except OSError as exc:
            raise StoreIOError(f"Cannot list {self.directory}: {exc}") from exc

    def delete(self, key: str) -> bool:
        """Remove a blob. Returns False if it was already absent."""
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StoreIOError(f"Cannot delete {key}: {exc}") from exc
        return True

    def clear(self) -> int:
        removed = sum(1 for key in self.keys() if self.delete(key))
        logger.info("Removed %d entries from %s", removed, self.directory)
        return removed
