"""Cache validators and conditional request decisions.

Two ETag flavours are used:
- timestamp-weak: W/"{resource}-{RFC3339 mtime}" for media and custom avatars
- name-weak:      W/"{resource}" for generated avatars, whose bytes depend
                  only on the feed name

If-None-Match is matched by substring containment, not exact tag equality.
Clients may send a list of tags and existing clients rely on this behaviour.
"""

from datetime import UTC, datetime
from email.utils import formatdate, parsedate_to_datetime
from urllib.parse import quote

from starlette.requests import Request

# Media identity changes with content, so it can be cached for 90 days
MEDIA_CACHE_CONTROL = "public, max-age=7776000"

# Avatars are keyed by name and may be replaced out of band
AVATAR_CACHE_CONTROL = "public, no-cache, must-revalidate"

# Characters kept as-is in ETag resources; anything else is percent-encoded
URI_SAFE_CHARACTERS = "/%?=&:@!$'()*+,;-._~"


def format_rfc3339(moment: datetime) -> str:
    """Format an instant as RFC3339 with second precision.

    UTC is rendered with a trailing ``Z``.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC).replace(microsecond=0)
    return moment.isoformat().replace("+00:00", "Z")


def format_http_date(moment: datetime) -> str:
    """Format an instant as an RFC 7231 IMF-fixdate (Last-Modified)."""
    return formatdate(moment.timestamp(), usegmt=True)


def resource_path(request: Request) -> str:
    """Return the request URI (path plus query string) used to key ETags.

    The raw, still percent-encoded path is used so that the tag stays
    ASCII and never contains a bare ``"``.
    """
    raw = request.scope.get("raw_path") or request.url.path.encode("utf-8")
    uri = raw.split(b"?", 1)[0]
    query = request.scope.get("query_string", b"")
    if query:
        uri = uri + b"?" + query
    return quote(uri, safe=URI_SAFE_CHARACTERS)


def weak_etag(resource: str, modified_at: datetime | None = None) -> str:
    """Compute a weak ETag for a resource.

    Args:
        resource: Request URI of the resource
        modified_at: Artifact modification time; None for generated content
            that depends only on the resource name

    Returns:
        Weak ETag header value
    """
    if modified_at is None:
        return f'W/"{resource}"'
    return f'W/"{resource}-{format_rfc3339(modified_at)}"'


def is_not_modified(if_none_match: str | None, etag: str) -> bool:
    """Check whether the client's cached copy is still current."""
    if not if_none_match:
        return False
    return etag in if_none_match


def is_modified_since(if_modified_since: str | None, modified_at: datetime) -> bool:
    """Evaluate If-Modified-Since at one-second resolution.

    A missing or unparseable header counts as modified.
    """
    if not if_modified_since:
        return True
    try:
        since = parsedate_to_datetime(if_modified_since)
    except (TypeError, ValueError):
        return True
    if since.tzinfo is None:
        since = since.replace(tzinfo=UTC)
    current = modified_at.astimezone(UTC).replace(microsecond=0)
    return current > since
