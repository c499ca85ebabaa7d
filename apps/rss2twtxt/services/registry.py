"""Feed registry.

Authoritative mapping of feed names to source URLs, shared by all request
workers and persisted as a JSON document after every change.

Consistency:
- check, insert and persist run as one unit under a single lock
- mutations are copy-on-write: the new mapping is saved first and only then
  replaces the live one, so readers never observe an uncommitted entry and a
  failed save leaves the registry unchanged
- saves go to a temporary file that atomically replaces the target
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from apps.rss2twtxt.core.errors import FeedConflictError, PersistenceError

logger = logging.getLogger(__name__)


class Feed(BaseModel):
    """A registered source feed."""

    name: str = Field(..., min_length=1, description="Unique, case-sensitive feed name")
    url: str = Field(..., min_length=1, description="RSS/Atom source URL")


class RegistryDocument(BaseModel):
    """On-disk representation of the registry."""

    feeds: dict[str, str] = Field(default_factory=dict)


class FeedRegistry:
    """Lock-guarded, durably persisted feed registry.

    Example usage:
        registry = FeedRegistry.load(Path("data/feeds.json"))
        registry.register("alice", "http://a.example/feed")
        for feed in registry.list():
            ...
    """

    def __init__(self, path: str | Path, feeds: dict[str, str] | None = None):
        """Initialize the registry.

        Args:
            path: Location of the persisted registry document
            feeds: Initial name to URL mapping (assumed already persisted)
        """
        self.path = Path(path)
        self._feeds: dict[str, str] = dict(feeds or {})
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: str | Path) -> "FeedRegistry":
        """Load the registry from disk.

        A missing file yields an empty registry.

        Raises:
            PersistenceError: If the document exists but cannot be read or parsed
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"No registry at {path}, starting empty")
            return cls(path)
        except OSError as e:
            raise PersistenceError(f"Failed to read registry {path}: {e}") from e

        try:
            document = RegistryDocument.model_validate_json(raw)
        except PydanticValidationError as e:
            raise PersistenceError(f"Corrupt registry {path}: {e}") from e

        logger.info(f"Loaded {len(document.feeds)} feeds from {path}")
        return cls(path, document.feeds)

    def __contains__(self, name: object) -> bool:
        return name in self._feeds

    def __len__(self) -> int:
        return len(self._feeds)

    def get(self, name: str) -> Feed | None:
        url = self._feeds.get(name)
        if url is None:
            return None
        return Feed(name=name, url=url)

    def list(self) -> list[Feed]:
        """Return a snapshot of all feeds sorted by name."""
        snapshot = self._feeds
        return [Feed(name=name, url=snapshot[name]) for name in sorted(snapshot)]

    def register(self, name: str, url: str) -> Feed:
        """Register a new feed and persist the registry.

        Raises:
            FeedConflictError: If the name is already registered
            PersistenceError: If the registry could not be saved; the
                registry is left unchanged
        """
        with self._lock:
            if name in self._feeds:
                raise FeedConflictError(name)

            updated = {**self._feeds, name: url}
            self._save(updated)
            self._feeds = updated

        logger.debug(f"Registry now holds {len(self._feeds)} feeds")
        return Feed(name=name, url=url)

    def _save(self, feeds: dict[str, str]) -> None:
        """Atomically write the full registry document."""
        document = RegistryDocument(feeds=feeds)
        payload = json.dumps(document.model_dump(), indent=2, sort_keys=True)

        directory = self.path.parent
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Could not save registry to {self.path}: {e}") from e
