"""Response builders shared by all resources.

GET and HEAD must produce identical headers. HEAD responses keep the
Content-Length of the full representation but never carry a body.
"""

from collections.abc import Mapping
from typing import BinaryIO

from fastapi import Request, Response
from fastapi.responses import StreamingResponse

from apps.rss2twtxt.storage import ArtifactStore


def is_head(request: Request) -> bool:
    return request.method == "HEAD"


def bytes_response(
    request: Request,
    content: bytes,
    media_type: str,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Build a response for an in-memory body, honouring HEAD."""
    all_headers = dict(headers or {})
    all_headers["Content-Length"] = str(len(content))
    return Response(
        content=b"" if is_head(request) else content,
        status_code=status_code,
        media_type=media_type,
        headers=all_headers,
    )


def stream_response(
    request: Request,
    handle: BinaryIO,
    size: int,
    media_type: str,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Build a streamed response for an open file, honouring HEAD.

    For HEAD the handle is closed without being read.
    """
    all_headers = dict(headers or {})
    all_headers["Content-Length"] = str(size)
    if is_head(request):
        handle.close()
        return Response(content=b"", media_type=media_type, headers=all_headers)
    return StreamingResponse(
        ArtifactStore.iter_chunks(handle),
        media_type=media_type,
        headers=all_headers,
    )


def not_modified_response(headers: Mapping[str, str] | None = None) -> Response:
    """304 with validator headers and no body."""
    return Response(status_code=304, headers=dict(headers or {}))
