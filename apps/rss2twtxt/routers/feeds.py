"""Feeds router.

Handles the feed list (negotiated plain text or HTML) and the generated
twtxt feed files.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from apps.rss2twtxt.core.caching import format_http_date, is_modified_since
from apps.rss2twtxt.core.context import AppContext, get_context
from apps.rss2twtxt.core.errors import FeedNotFoundError
from apps.rss2twtxt.core.negotiation import Representation, select_representation
from apps.rss2twtxt.core.responses import bytes_response, not_modified_response, stream_response
from apps.rss2twtxt.observability import set_context
from apps.rss2twtxt.storage import ArtifactKind, ArtifactNotFoundError, validate_name
from apps.rss2twtxt.templates import render_feeds, render_plain_feeds

logger = logging.getLogger(__name__)

router = APIRouter(tags=["feeds"])


def _plain_list(request: Request, ctx: AppContext) -> Response:
    body = render_plain_feeds(ctx.registry.list())
    return bytes_response(request, body.encode("utf-8"), "text/plain")


@router.api_route("/we-are-feeds.txt", methods=["GET", "HEAD"])
def we_are_feeds(request: Request, ctx: AppContext = Depends(get_context)) -> Response:
    """Plain text list of all feeds, one ``name url`` pair per line."""
    return _plain_list(request, ctx)


@router.api_route("/feeds", methods=["GET", "HEAD"])
def list_feeds(request: Request, ctx: AppContext = Depends(get_context)) -> Response:
    """Feed list in the representation preferred by the client."""
    representation = select_representation(request.headers.get("accept"))
    if representation == Representation.PLAIN_TEXT:
        return _plain_list(request, ctx)

    body = render_feeds(ctx.registry.list())
    return bytes_response(request, body.encode("utf-8"), "text/html")


@router.api_route("/{name}/twtxt.txt", methods=["GET", "HEAD"])
def get_feed(name: str, request: Request, ctx: AppContext = Depends(get_context)) -> Response:
    """Serve a generated twtxt feed file.

    Supports If-Modified-Since; the body is streamed from disk.
    """
    validate_name(name)
    set_context(feed_name=name)

    try:
        info = ctx.store.stat(ArtifactKind.FEED_TEXT, name)
    except ArtifactNotFoundError as e:
        logger.warning(f"feed does not exist {name}")
        raise FeedNotFoundError(name) from e

    headers = {"Last-Modified": format_http_date(info.modified_at)}

    if not is_modified_since(request.headers.get("if-modified-since"), info.modified_at):
        return not_modified_response(headers)

    handle = ctx.store.open(ArtifactKind.FEED_TEXT, name)
    return stream_response(request, handle, info.size_bytes, info.content_type, headers)
