"""Storage module for served artifacts.

This module provides:
- ArtifactInfo: Metadata snapshot of a stored artifact (path + size + mtime)
- ArtifactStore: Filesystem-backed, read-only artifact lookup

Name validation:
- single path segment only
- path traversal prevention
"""

from .artifact_store import (
    ArtifactNotFoundError,
    ArtifactReadError,
    ArtifactStore,
    ArtifactStoreError,
    InvalidNameError,
    ensure_layout,
    validate_name,
)
from .schemas import ArtifactInfo, ArtifactKind

__all__ = [
    "ArtifactInfo",
    "ArtifactKind",
    "ArtifactStore",
    "ensure_layout",
    "validate_name",
    # Exceptions
    "ArtifactStoreError",
    "ArtifactNotFoundError",
    "ArtifactReadError",
    "InvalidNameError",
]
