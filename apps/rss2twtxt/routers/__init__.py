"""HTTP routers for the web service."""

from . import feeds, index, media

__all__ = ["feeds", "index", "media"]
