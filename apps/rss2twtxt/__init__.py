"""rss2twtxt web service: publishes twtxt feeds, media, and avatars."""

__version__ = "0.1.0"
