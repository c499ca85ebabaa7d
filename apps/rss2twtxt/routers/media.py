"""Media router.

Handles media images referenced from feeds and per-feed avatars. Both use
weak ETags; the validator is computed before any file is opened or any
identicon is generated so that 304 answers skip body work entirely.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from apps.rss2twtxt.core.caching import (
    AVATAR_CACHE_CONTROL,
    MEDIA_CACHE_CONTROL,
    format_http_date,
    is_not_modified,
    resource_path,
    weak_etag,
)
from apps.rss2twtxt.core.context import AppContext, get_context
from apps.rss2twtxt.core.errors import NotFoundError
from apps.rss2twtxt.core.responses import bytes_response, not_modified_response, stream_response
from apps.rss2twtxt.observability import get_logger, set_context
from apps.rss2twtxt.services import AvatarSource
from apps.rss2twtxt.storage import ArtifactKind, ArtifactNotFoundError, validate_name

logger = logging.getLogger(__name__)
events = get_logger(__name__)

router = APIRouter(tags=["media"])

PNG = "image/png"


@router.api_route("/media/{name}", methods=["GET", "HEAD"])
def get_media(name: str, request: Request, ctx: AppContext = Depends(get_context)) -> Response:
    """Serve a media image with a long-lived cache policy."""
    validate_name(name)

    try:
        info = ctx.store.stat(ArtifactKind.MEDIA_IMAGE, name)
    except ArtifactNotFoundError as e:
        logger.warning(f"media not found: {name}")
        raise NotFoundError("Media Not Found") from e

    etag = weak_etag(resource_path(request), info.modified_at)
    headers = {"ETag": etag, "Cache-Control": MEDIA_CACHE_CONTROL}

    if is_not_modified(request.headers.get("if-none-match"), etag):
        events.not_modified(request.url.path, etag)
        return not_modified_response(headers)

    handle = ctx.store.open(ArtifactKind.MEDIA_IMAGE, name)
    headers["Last-Modified"] = format_http_date(info.modified_at)
    return stream_response(request, handle, info.size_bytes, PNG, headers)


@router.api_route("/avatar/{name}", methods=["GET", "HEAD"])
def get_avatar(name: str, request: Request, ctx: AppContext = Depends(get_context)) -> Response:
    """Serve a feed's avatar: the custom image if present, else an identicon.

    Only known feeds have avatars.
    """
    validate_name(name)
    set_context(feed_name=name)

    avatar = ctx.avatars.resolve(name)
    etag = avatar.etag(resource_path(request))
    headers = {"ETag": etag, "Cache-Control": AVATAR_CACHE_CONTROL}

    if is_not_modified(request.headers.get("if-none-match"), etag):
        events.not_modified(request.url.path, etag, source=avatar.source.value)
        return not_modified_response(headers)

    if avatar.source == AvatarSource.CUSTOM:
        handle = ctx.store.open(ArtifactKind.AVATAR_IMAGE, name)
        headers["Last-Modified"] = format_http_date(avatar.info.modified_at)
        return stream_response(request, handle, avatar.info.size_bytes, PNG, headers)

    content = ctx.avatars.render(avatar)
    return bytes_response(request, content, PNG, headers=headers)
