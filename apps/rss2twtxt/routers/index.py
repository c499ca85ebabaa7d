"""Index router.

Serves the landing page and accepts feed registrations from its form.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request, Response
from fastapi.responses import HTMLResponse

from apps.rss2twtxt.core.context import AppContext, get_context
from apps.rss2twtxt.core.errors import ConflictError, PersistenceError, ValidationError
from apps.rss2twtxt.core.responses import bytes_response
from apps.rss2twtxt.observability import get_logger
from apps.rss2twtxt.templates import render_index, render_message

logger = logging.getLogger(__name__)
events = get_logger(__name__)

router = APIRouter(tags=["index"])


def _message(status_code: int, title: str, message: str) -> HTMLResponse:
    return HTMLResponse(content=render_message(title, message), status_code=status_code)


@router.api_route("/", methods=["GET", "HEAD"])
def index(request: Request) -> Response:
    """Landing page with the registration form."""
    return bytes_response(request, render_index().encode("utf-8"), "text/html")


@router.post("/")
def register_feed(
    url: str = Form(default=""),
    ctx: AppContext = Depends(get_context),
) -> HTMLResponse:
    """Validate a feed URL and register the feed.

    Responses:
        201: feed registered
        400: no URL, or the URL is not a valid RSS/Atom feed
        409: a feed with the same name already exists
        500: the registry could not be saved
    """
    try:
        feed = ctx.validator.validate(url)
        ctx.registry.register(feed.name, feed.url)
    except ValidationError as e:
        events.registration_rejected(url, e.message, e.status_code)
        return _message(e.status_code, "Error", e.message)
    except ConflictError as e:
        events.registration_rejected(url, e.message, e.status_code)
        return _message(e.status_code, "Error", e.message)
    except PersistenceError as e:
        logger.error(f"Could not save feed: {e}", exc_info=True, extra={"url": url})
        return _message(e.status_code, "Error", "Could not save feed")

    events.feed_registered(feed.name, feed.url)
    return _message(201, "Success", f"Feed successfully added {feed.name}: {feed.url}")
