"""Filesystem-backed artifact store.

ArtifactStore is a read-only view over the data directory:
- feed text files generated by the feed fetchers
- media images referenced from feed text
- custom avatar images uploaded out of band

Name validation:
- names must be single, safe path segments
- path traversal and separator characters are rejected
"""

import logging
import os
import re
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import BinaryIO

from apps.rss2twtxt.core.errors import ErrorCategory, ServiceError

from .schemas import ArtifactInfo, ArtifactKind

logger = logging.getLogger(__name__)

MEDIA_DIR = "media"

# Streaming chunk size for file bodies
CHUNK_SIZE = 64 * 1024

PATH_TRAVERSAL_PATTERN = re.compile(r"\.\.|%2e%2e|%252e", re.IGNORECASE)

FORBIDDEN_CHARACTERS = ("/", "\\", "\0", "\n", "\r")


class ArtifactStoreError(ServiceError):
    """Base exception for artifact store operations."""

    category = ErrorCategory.IO


class ArtifactNotFoundError(ArtifactStoreError):
    """Artifact does not exist in storage."""

    category = ErrorCategory.NOT_FOUND


class ArtifactReadError(ArtifactStoreError):
    """Artifact exists (or existed) but could not be read."""

    category = ErrorCategory.IO


class InvalidNameError(ArtifactStoreError):
    """Name is not a safe single path segment."""

    category = ErrorCategory.VALIDATION


def validate_name(value: str, label: str = "name") -> str:
    """Validate that a name is a safe single path segment.

    Args:
        value: Name taken from the request path
        label: Component label used in error messages

    Returns:
        The validated name, unchanged

    Raises:
        InvalidNameError: If the name is empty or could escape the data directory
    """
    if not value:
        raise InvalidNameError("Bad Request")

    if PATH_TRAVERSAL_PATTERN.search(value):
        logger.warning(f"Path traversal attempt detected in {label}: {value[:50]}")
        raise InvalidNameError("Bad Request")

    for char in FORBIDDEN_CHARACTERS:
        if char in value:
            logger.warning(f"Forbidden character in {label}: {value[:50]!r}")
            raise InvalidNameError("Bad Request")

    return value


class ArtifactStore:
    """Read-only filesystem artifact store.

    Layout convention (relative to root):
        {name}.txt          feed text
        media/{name}.png    media image
        {name}.png          custom avatar

    Existence checks are advisory. Files may be replaced or removed between
    stat() and open(); the failure of open() is authoritative.
    """

    def __init__(self, root: str | Path):
        """Initialize the store.

        Args:
            root: Data directory holding the generated artifacts
        """
        self.root = Path(root)

    def build_path(self, kind: ArtifactKind, name: str) -> Path:
        """Build the filesystem path for an artifact.

        Raises:
            InvalidNameError: If the name is not a safe path segment
        """
        validate_name(name)

        if kind == ArtifactKind.FEED_TEXT:
            return self.root / f"{name}.txt"
        if kind == ArtifactKind.MEDIA_IMAGE:
            return self.root / MEDIA_DIR / f"{name}.png"
        if kind == ArtifactKind.AVATAR_IMAGE:
            return self.root / f"{name}.png"
        raise ValueError(f"Unknown artifact kind: {kind}")

    def locate(self, kind: ArtifactKind, name: str) -> bool:
        """Check whether an artifact currently exists as a regular file."""
        return self.build_path(kind, name).is_file()

    def stat(self, kind: ArtifactKind, name: str) -> ArtifactInfo:
        """Return size and modification time of an artifact.

        Raises:
            ArtifactNotFoundError: If the artifact does not exist
            ArtifactReadError: If the metadata cannot be read
        """
        path = self.build_path(kind, name)
        try:
            st = path.stat()
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(f"Artifact not found: {kind.value}/{name}") from e
        except OSError as e:
            raise ArtifactReadError(f"Failed to stat artifact {path}: {e}") from e

        if not path.is_file():
            raise ArtifactNotFoundError(f"Artifact not found: {kind.value}/{name}")

        return ArtifactInfo(
            kind=kind,
            name=name,
            path=str(path),
            size_bytes=st.st_size,
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
        )

    def open(self, kind: ArtifactKind, name: str) -> BinaryIO:
        """Open an artifact for reading.

        Raises:
            ArtifactReadError: If the file cannot be opened, including when it
                disappeared after a successful stat()
        """
        path = self.build_path(kind, name)
        try:
            return open(path, "rb")
        except OSError as e:
            raise ArtifactReadError(f"Failed to open artifact {path}: {e}") from e

    @staticmethod
    def iter_chunks(handle: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        """Yield the contents of an open handle in chunks and close it.

        Stops early (closing the handle) when the consumer abandons the
        iterator, e.g. on client disconnect.
        """
        try:
            while True:
                chunk = handle.read(chunk_size)
                if not chunk:
                    break
                yield chunk
        except OSError as e:
            logger.error(f"Error streaming artifact body: {e}")
            raise ArtifactReadError(f"Failed while streaming artifact: {e}") from e
        finally:
            handle.close()


def ensure_layout(root: str | Path) -> None:
    """Create the data directory layout if missing."""
    os.makedirs(Path(root) / MEDIA_DIR, exist_ok=True)
