"""Tests for AvatarResolver and identicon generation."""

from datetime import UTC, datetime

import pytest

from apps.rss2twtxt.core.errors import FeedNotFoundError
from apps.rss2twtxt.services import AvatarResolver, AvatarSource, FeedRegistry, identicon
from apps.rss2twtxt.storage import ArtifactStore

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def resolver(store: ArtifactStore, registry: FeedRegistry) -> AvatarResolver:
    return AvatarResolver(store, registry)


class TestIdenticon:
    """Tests for identicon rendering."""

    def test_png_output(self) -> None:
        assert identicon(b"alice").startswith(PNG_SIGNATURE)

    def test_reproducible(self) -> None:
        """Test two independent renders produce identical bytes."""
        assert identicon(b"alice") == identicon(b"alice")

    def test_depends_on_seed(self) -> None:
        assert identicon(b"alice") != identicon(b"bob")

    def test_size(self) -> None:
        from io import BytesIO

        from PIL import Image

        image = Image.open(BytesIO(identicon(b"alice", size=60, block_size=12)))
        assert image.size == (60, 60)

    def test_invalid_geometry(self) -> None:
        with pytest.raises(ValueError):
            identicon(b"alice", size=10, block_size=12)


class TestResolve:
    """Tests for avatar resolution."""

    def test_unregistered_name_is_not_found(self, resolver: AvatarResolver) -> None:
        with pytest.raises(FeedNotFoundError):
            resolver.resolve("nobody")

    def test_stray_image_without_feed_is_not_found(
        self, resolver: AvatarResolver, store: ArtifactStore, write_artifact
    ) -> None:
        """Test an image file alone never makes a name resolvable."""
        write_artifact(store.root / "stray.png", PNG_SIGNATURE + b"custom")

        with pytest.raises(FeedNotFoundError):
            resolver.resolve("stray")

    def test_registered_without_image_is_generated(self, resolver: AvatarResolver, registry: FeedRegistry) -> None:
        registry.register("alice", "http://a.example/feed")

        avatar = resolver.resolve("alice")

        assert avatar.source == AvatarSource.GENERATED
        assert avatar.info is None
        assert avatar.etag("/avatar/alice") == 'W/"/avatar/alice"'

    def test_feed_text_counts_as_known(
        self, resolver: AvatarResolver, store: ArtifactStore, write_artifact
    ) -> None:
        """Test a feed with a text artifact but no registry entry is known."""
        write_artifact(store.root / "legacy.txt", b"2024-01-01T00:00:00Z\thello\n")
        assert resolver.resolve("legacy").source == AvatarSource.GENERATED

    def test_custom_image_wins(
        self,
        resolver: AvatarResolver,
        registry: FeedRegistry,
        store: ArtifactStore,
        write_artifact,
    ) -> None:
        registry.register("alice", "http://a.example/feed")
        mtime = 1_700_000_000
        write_artifact(store.root / "alice.png", PNG_SIGNATURE + b"custom", mtime=mtime)

        avatar = resolver.resolve("alice")

        assert avatar.source == AvatarSource.CUSTOM
        assert avatar.info.size_bytes == len(PNG_SIGNATURE) + 6
        assert avatar.modified_at == datetime.fromtimestamp(mtime, tz=UTC)
        assert avatar.etag("/avatar/alice") == 'W/"/avatar/alice-2023-11-14T22:13:20Z"'


class TestRender:
    """Tests for generated avatar bodies."""

    def test_render_generated(self, resolver: AvatarResolver, registry: FeedRegistry) -> None:
        registry.register("alice", "http://a.example/feed")
        avatar = resolver.resolve("alice")

        assert resolver.render(avatar) == identicon(b"alice")

    def test_render_custom_is_rejected(
        self,
        resolver: AvatarResolver,
        registry: FeedRegistry,
        store: ArtifactStore,
        write_artifact,
    ) -> None:
        registry.register("alice", "http://a.example/feed")
        write_artifact(store.root / "alice.png", PNG_SIGNATURE)

        with pytest.raises(ValueError):
            resolver.render(resolver.resolve("alice"))
