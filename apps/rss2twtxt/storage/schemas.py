"""Storage schemas for served artifacts.

ArtifactInfo is the metadata snapshot of a file on disk. It is derived fresh
from the filesystem for every request and never cached.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ArtifactKind(str, Enum):
    """Kinds of artifacts the service publishes."""

    FEED_TEXT = "feed_text"
    MEDIA_IMAGE = "media_image"
    AVATAR_IMAGE = "avatar_image"


class ArtifactInfo(BaseModel):
    """Metadata for an artifact stored under the data directory.

    Path format:
        feed_text:    {root}/{name}.txt
        media_image:  {root}/media/{name}.png
        avatar_image: {root}/{name}.png
    """

    kind: ArtifactKind = Field(..., description="Artifact kind")
    name: str = Field(..., description="Logical artifact name (safe path segment)")
    path: str = Field(..., description="Absolute filesystem path")
    size_bytes: int = Field(
        ...,
        ge=0,
        description="Size of the content in bytes",
    )
    modified_at: datetime = Field(
        ...,
        description="Last modification time (timezone-aware, UTC)",
    )

    @property
    def content_type(self) -> str:
        if self.kind == ArtifactKind.FEED_TEXT:
            return "text/plain; charset=utf-8"
        return "image/png"
