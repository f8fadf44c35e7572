"""
File-backed Key-Value Store

DESIGN DECISION: Each key is one file inside a namespace directory.
The app and the widget each get their own directory, so the widget
can read its snapshot without touching the app's keys.

TRADEOFFS:
- Two namespaces are written one after the other, not atomically
- A single key is replaced atomically (temp file + os.replace)
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from walletlens.services.storage.interface import KeyValueStore, StorageError


_SAFE_KEY = re.compile(r"[^A-Za-z0-9._-]")


class FileKeyValueStore(KeyValueStore):
    """
    Stores each key as a file under a directory.

    The directory is created on first use.
    """

    SUFFIX = ".bin"

    def __init__(self, directory: Path):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not key:
            raise StorageError("Key must not be empty")
        return self._directory / f"{_SAFE_KEY.sub('_', key)}{self.SUFFIX}"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read '{key}': {e}")

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory,
                prefix=f".{path.stem}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write '{key}': {e}")

    def remove(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to remove '{key}': {e}")
