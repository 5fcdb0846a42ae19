"""
Blob cache store protocol and a filesystem implementation.

Keys are relative, slash-separated paths (``replays/<match>-<start>-<end>.json``).
``get`` raises BlobNotFoundError for an absent key; every other exception is a
store failure.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol


class BlobNotFoundError(KeyError):
    """No blob is stored under the requested key."""


class BlobStore(Protocol):
    """Key/value object store used to memoize serialized replays."""

    async def get(self, key: str) -> bytes:
        """Return the stored body; raise BlobNotFoundError when absent."""
        ...

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        """Store body under key, replacing any previous body."""
        ...


class FileBlobStore:
    """Blobs as files under a root directory; keys may not escape the root."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        """Resolve key to a file path inside root. Raises ValueError if it would escape."""
        if not key or key.startswith(("/", "\\")) or "\\" in key:
            raise ValueError(f"Invalid blob key: {key!r}")
        resolved = (self._root / key).resolve()
        try:
            resolved.relative_to(self._root)
        except ValueError:
            raise ValueError(f"Blob key would escape store root: {key!r}") from None
        return resolved

    def _read(self, key: str) -> bytes:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise BlobNotFoundError(key) from None

    def _write(self, key: str, body: bytes) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # One temp file per writer; concurrent puts of the same key each publish a complete body.
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=path.name + ".", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(body)
            os.replace(tmp, path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp)
            raise

    async def get(self, key: str) -> bytes:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, key)

    async def put(self, key: str, body: bytes, content_type: str) -> None:
        # The file extension carries the content type; nothing else to record.
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write, key, body)
