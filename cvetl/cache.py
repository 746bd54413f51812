"""On-disk JSON snapshot cache.

Snapshots are plain JSON files.  A file that is missing or empty is a
cache miss; anything else must be valid JSON.  Writes overwrite the file
in place (no temp-file swap), so a crash mid-write can leave a truncated
snapshot behind.  Concurrent writers to one path race — last one wins.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from .config import EtlConfig
from .paths import ContentType, file_path

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 2


def file_hash(path: Path | str) -> str:
    """Return the SHA-256 hex digest of a file's full contents.

    Raises:
        OSError: if the file cannot be read.
    """
    return hashlib.sha256(Path(path).read_bytes()).hexdigest()


def load_snapshot(path: Path | str) -> Any:
    """Load a JSON snapshot.

    Args:
        path: Snapshot file path.

    Returns:
        Decoded JSON, or an empty dict if the file is missing or empty.

    Raises:
        json.JSONDecodeError: if the file holds invalid JSON.
    """
    path = Path(path)
    if not path.exists() or path.stat().st_size == 0:
        logger.debug("Cache miss: %s", path)
        return {}
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def dump_snapshot(path: Path | str, data: Any, indent: int = DEFAULT_INDENT) -> None:
    """Write a JSON snapshot, replacing any previous content.

    The parent directory must already exist.  Data is serialized before
    the file is opened, so unserializable values leave it untouched.

    Args:
        path: Snapshot file path.
        data: JSON-serializable value.
        indent: Spaces per nesting level.

    Raises:
        TypeError: for values JSON cannot represent.
        ValueError: for ``nan`` and infinite floats.
    """
    path = Path(path)
    text = json.dumps(data, indent=indent, ensure_ascii=False, allow_nan=False)
    with path.open("w", encoding="utf-8") as f:
        f.write(text)
        f.write("\n")
    logger.debug("Wrote snapshot %s", path)


class SnapshotCache:
    """Snapshot cache rooted at a single directory.

    Attributes:
        dir: Directory cache paths are joined onto (``None`` = relative).
        indent: Indentation used when dumping snapshots.
    """

    def __init__(self, dir: Path | str | None = None, indent: int = DEFAULT_INDENT):
        self.dir = Path(dir) if dir is not None else None
        self.indent = indent

    @classmethod
    def from_config(cls, config: EtlConfig) -> "SnapshotCache":
        """Build a cache from the ``cache`` section of the configuration."""
        return cls(dir=config.cache.dir, indent=config.cache.indent)

    def path_for(self, url: Any, type: ContentType | str | None = None) -> Path:
        """Return the cache path for a source URL under this cache's directory."""
        return file_path(url, self.dir, type)

    def is_cached(self, path: Path | str) -> bool:
        """Check whether a non-empty snapshot exists at ``path``."""
        path = Path(path)
        return path.is_file() and path.stat().st_size > 0

    def is_fresh(self, path: Path | str, digest: str | None) -> bool:
        """Check whether the cached file still matches a known digest.

        Args:
            path: Cached file path.
            digest: Previously recorded SHA-256 hex digest, if any.

        Returns:
            ``True`` if the file is cached and its digest equals ``digest``.
        """
        if not digest or not self.is_cached(path):
            return False
        return file_hash(path) == digest

    def load(self, path: Path | str) -> Any:
        """Load a snapshot (see ``load_snapshot``)."""
        return load_snapshot(path)

    def dump(self, path: Path | str, data: Any) -> None:
        """Write a snapshot with this cache's indentation."""
        dump_snapshot(path, data, indent=self.indent)
