"""Application context for dependency injection.

AppContext holds the long-lived collaborators shared by all request workers.
It is created once at startup, stored on ``app.state`` and handed to
endpoints through ``Depends(get_context)``.
"""

from dataclasses import dataclass

from fastapi import Request

from apps.rss2twtxt.config import ServerConfig
from apps.rss2twtxt.services import AvatarResolver, FeedRegistry, FeedValidator
from apps.rss2twtxt.storage import ArtifactStore, ensure_layout


@dataclass(frozen=True)
class AppContext:
    """Runtime collaborators of the web service."""

    store: ArtifactStore
    registry: FeedRegistry
    validator: FeedValidator
    avatars: AvatarResolver

    @classmethod
    def from_config(cls, config: ServerConfig) -> "AppContext":
        """Create the production context, loading the registry from disk."""
        ensure_layout(config.data_dir)
        store = ArtifactStore(config.data_dir)
        registry = FeedRegistry.load(config.registry_path)
        return cls(
            store=store,
            registry=registry,
            validator=FeedValidator(timeout=config.http_timeout),
            avatars=AvatarResolver(store, registry),
        )

    @classmethod
    def create(
        cls,
        store: ArtifactStore,
        registry: FeedRegistry,
        validator: FeedValidator,
    ) -> "AppContext":
        """Assemble a context from existing collaborators."""
        return cls(
            store=store,
            registry=registry,
            validator=validator,
            avatars=AvatarResolver(store, registry),
        )


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the application context."""
    return request.app.state.context
