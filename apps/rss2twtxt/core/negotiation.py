"""Content negotiation for the feed list.

The feed list has two representations: a line-oriented plain text listing
for machines and an HTML page for people. Plain text is selected only when
it is the client's best-ranked media range.
"""

from dataclasses import dataclass
from enum import Enum

PLAIN_TEXT = "text/plain"


class Representation(str, Enum):
    """Representations of the feed list."""

    PLAIN_TEXT = "plain_text"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class MediaRange:
    """One entry of an Accept header."""

    media_type: str
    quality: float
    position: int

    @property
    def specificity(self) -> int:
        """2 for type/subtype, 1 for type/*, 0 for */*."""
        main, _, sub = self.media_type.partition("/")
        if main == "*":
            return 0
        if sub == "*":
            return 1
        return 2


def parse_accept(header: str | None) -> list[MediaRange]:
    """Parse an Accept header into media ranges ranked by preference.

    Ranking: quality (desc), then specificity (desc), then header order.
    Malformed entries and entries with q=0 are dropped.
    """
    if not header:
        return []

    ranges: list[MediaRange] = []
    for position, part in enumerate(header.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        media_type = pieces[0].lower()
        if "/" not in media_type:
            continue

        quality = 1.0
        for param in pieces[1:]:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value.strip())
                except ValueError:
                    quality = 0.0
        if quality <= 0:
            continue

        ranges.append(MediaRange(media_type=media_type, quality=quality, position=position))

    ranges.sort(key=lambda r: (-r.quality, -r.specificity, r.position))
    return ranges


def select_representation(accept: str | None) -> Representation:
    """Choose the feed list representation for an Accept header."""
    ranges = parse_accept(accept)
    if ranges and ranges[0].media_type == PLAIN_TEXT:
        return Representation.PLAIN_TEXT
    return Representation.STRUCTURED
