"""Pytest configuration and fixtures for tests."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from apps.rss2twtxt.core.errors import InvalidFeedError, MissingURLError  # noqa: E402
from apps.rss2twtxt.services import Feed, FeedRegistry  # noqa: E402
from apps.rss2twtxt.storage import ArtifactStore, ensure_layout  # noqa: E402


class StubFeedValidator:
    """Validator that never touches the network.

    Maps URLs to feed names; unknown URLs are treated as invalid feeds.
    """

    def __init__(self, feeds: dict[str, str] | None = None):
        self.feeds = dict(feeds or {})
        self.calls: list[str] = []

    def validate(self, url: str | None) -> Feed:
        self.calls.append(url or "")
        if not url:
            raise MissingURLError()
        if url not in self.feeds:
            raise InvalidFeedError(url)
        return Feed(name=self.feeds[url], url=url)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory with the media/ layout."""
    root = tmp_path / "data"
    ensure_layout(root)
    return root


@pytest.fixture
def store(data_dir: Path) -> ArtifactStore:
    return ArtifactStore(data_dir)


@pytest.fixture
def registry_path(data_dir: Path) -> Path:
    return data_dir / "feeds.json"


@pytest.fixture
def registry(registry_path: Path) -> FeedRegistry:
    """Empty registry persisted under the data directory."""
    return FeedRegistry.load(registry_path)


@pytest.fixture
def stub_validator() -> StubFeedValidator:
    return StubFeedValidator(
        {
            "http://a.example/feed": "alice",
            "http://b.example/rss": "bob",
        }
    )


def write_file(path: Path, content: bytes, mtime: float | None = None) -> Path:
    """Write a file and optionally pin its modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


# Environment configuration
def pytest_configure(config):
    """Configure pytest environment."""
    config.addinivalue_line("markers", "integration: mark test as integration test")

    os.environ.setdefault("ENVIRONMENT", "test")


@pytest.fixture
def write_artifact():
    """Helper writing files with a pinned modification time."""
    return write_file
