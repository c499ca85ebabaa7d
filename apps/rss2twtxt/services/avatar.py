"""Avatar resolution.

Avatars are served for registered feeds only. A custom image stored next to
the feed text wins; otherwise an identicon is generated from the feed name.
Generated avatars are never written back to disk.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from apps.rss2twtxt.core.caching import weak_etag
from apps.rss2twtxt.core.errors import FeedNotFoundError
from apps.rss2twtxt.storage import (
    ArtifactInfo,
    ArtifactKind,
    ArtifactNotFoundError,
    ArtifactStore,
)

from .identicon import AVATAR_BLOCK_SIZE, AVATAR_RESOLUTION, identicon
from .registry import FeedRegistry

logger = logging.getLogger(__name__)


class AvatarSource(str, Enum):
    CUSTOM = "custom"
    GENERATED = "generated"


@dataclass(frozen=True)
class ResolvedAvatar:
    """Outcome of avatar resolution, before any body work."""

    name: str
    source: AvatarSource
    info: ArtifactInfo | None = None

    @property
    def modified_at(self) -> datetime | None:
        return self.info.modified_at if self.info else None

    def etag(self, resource: str) -> str:
        """Timestamp-weak for custom avatars, name-weak for generated ones."""
        return weak_etag(resource, self.modified_at)


class AvatarResolver:
    """Resolves feed names to custom or generated avatars."""

    def __init__(
        self,
        store: ArtifactStore,
        registry: FeedRegistry,
        resolution: int = AVATAR_RESOLUTION,
        block_size: int = AVATAR_BLOCK_SIZE,
    ):
        self.store = store
        self.registry = registry
        self.resolution = resolution
        self.block_size = block_size

    def is_known_feed(self, name: str) -> bool:
        """A feed is known when registered or when its feed text exists."""
        return name in self.registry or self.store.locate(ArtifactKind.FEED_TEXT, name)

    def resolve(self, name: str) -> ResolvedAvatar:
        """Decide which avatar serves a feed name.

        Raises:
            FeedNotFoundError: If the feed is not known, even when an image
                file exists under that name
        """
        if not self.is_known_feed(name):
            logger.warning(f"feed does not exist {name}")
            raise FeedNotFoundError(name)

        try:
            info = self.store.stat(ArtifactKind.AVATAR_IMAGE, name)
        except ArtifactNotFoundError:
            return ResolvedAvatar(name=name, source=AvatarSource.GENERATED)

        return ResolvedAvatar(name=name, source=AvatarSource.CUSTOM, info=info)

    def render(self, avatar: ResolvedAvatar) -> bytes:
        """Generate the identicon PNG for a generated avatar."""
        if avatar.source != AvatarSource.GENERATED:
            raise ValueError(f"Avatar for {avatar.name} is not generated")
        return identicon(avatar.name.encode("utf-8"), self.resolution, self.block_size)
