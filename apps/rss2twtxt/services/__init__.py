"""Domain services: feed registry, feed validation, and avatars."""

from .avatar import AvatarResolver, AvatarSource, ResolvedAvatar
from .feed_validator import FeedValidator, normalize_feed_name
from .identicon import identicon
from .registry import Feed, FeedRegistry

__all__ = [
    "AvatarResolver",
    "AvatarSource",
    "Feed",
    "FeedRegistry",
    "FeedValidator",
    "ResolvedAvatar",
    "identicon",
    "normalize_feed_name",
]
