"""
Resolve attachment bytes from an in-memory buffer or a file location.

Files under the private documents directory are read directly. Anything
else is treated as an external resource that needs scoped access: acquire,
read, release.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import unquote, urlparse

from threadline.exceptions import NoSuchFileError
from threadline.infra.logging_config import get_logger
from threadline.schemas.message import BytesSource, ContentDescriptorSource, UriSource

logger = get_logger("data_source")


class ScopedResourceAccess(Protocol):
    def acquire(self, path: Path) -> bool: ...
    def release(self, path: Path) -> None: ...


class FileSystemScopedAccess:
    """Grants access to existing, readable regular files."""

    def acquire(self, path: Path) -> bool:
        return path.is_file() and os.access(path, os.R_OK)

    def release(self, path: Path) -> None:
        return None


def uri_to_path(uri: str) -> Path:
    """Turn a plain path or a file:// URI into a Path."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


class DataSourceResolver:
    def __init__(
        self,
        documents_dir: Optional[Path] = None,
        scoped_access: Optional[ScopedResourceAccess] = None,
    ) -> None:
        self._documents_dir = documents_dir.resolve() if documents_dir else None
        self._scoped_access = scoped_access or FileSystemScopedAccess()

    async def fetch(self, source: ContentDescriptorSource) -> bytes:
        if isinstance(source, BytesSource):
            return source.data
        if isinstance(source, UriSource):
            return await asyncio.to_thread(
                self._read, uri_to_path(source.uri), source.uri
            )
        raise TypeError(f"Unsupported content source: {source!r}")

    def is_stored_in_documents(self, path: Path) -> bool:
        if self._documents_dir is None:
            return False
        return path.resolve().is_relative_to(self._documents_dir)

    def _read(self, path: Path, location: str) -> bytes:
        if self.is_stored_in_documents(path):
            return path.read_bytes()
        return self._read_scoped(path, location)

    def _read_scoped(self, path: Path, location: str) -> bytes:
        if not self._scoped_access.acquire(path):
            raise NoSuchFileError(location)
        try:
            return path.read_bytes()
        finally:
            self._scoped_access.release(path)
            logger.debug("Released scoped access to %s", location)
