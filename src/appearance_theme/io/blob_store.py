"""Get/set blob storage for persisted state.

The preference store only needs "read the bytes" and "replace the bytes".
FileBlobStore does that against one path, with atomic replacement.

This module is a STABLE BOUNDARY.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol


class BlobStore(Protocol):
    def read(self) -> Optional[bytes]:
        """Return stored bytes, or None when nothing has been stored yet."""
        ...

    def write(self, data: bytes) -> None:
        """Replace stored bytes. Raises OSError on failure."""
        ...


class FileBlobStore:
    """Blob store backed by a single file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def write(self, data: bytes) -> None:
        """Atomic write: temp file in the same directory, then rename.

        Creates parent directories if needed.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, self.path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    def __repr__(self) -> str:
        return f"FileBlobStore({str(self.path)!r})"

