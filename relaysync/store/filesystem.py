"""Filesystem-based StorageBackend implementation.

Writes each object as a file under one root directory:
  {root}/index.json
  {root}/{index}_with_id.json
  {root}/metadata_latest.json
  {root}/announcement.json
  {root}/reorg_flag.json

Writes go through a temp file and os.replace, so readers see either the
old object or the new one, never a partial write.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from relaysync.store.classify import classify_os_error, read_error, write_error
from relaysync.store.keys import LOCAL_KEYS, KeyNamingScheme


class LocalBackend:
    """Local directory StorageBackend."""

    scheme = "file"

    def __init__(self, root: str | Path):
        self.root = Path(root).absolute()
        self.keys = KeyNamingScheme(LOCAL_KEYS)
        self.root.mkdir(parents=True, exist_ok=True)

    @property
    def store(self) -> str:
        return self.root.as_uri()

    def __repr__(self) -> str:
        return f"LocalBackend(root={str(self.root)!r})"

    def _path(self, key: str) -> Path:
        return self.root / key

    async def get(self, key: str) -> bytes:
        try:
            return self._path(key).read_bytes()
        except OSError as e:
            raise read_error(classify_os_error(e), key, self.store, e) from e

    async def put(self, key: str, data: bytes, content_type: str = "application/json") -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
            try:
                with os.fdopen(tmp_fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_path, path)
            except OSError:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise
        except OSError as e:
            raise write_error(key, self.store, e) from e

    def location(self, key: str) -> str:
        return self._path(key).as_uri()

    async def close(self) -> None:
        return None


__all__ = ["LocalBackend"]
