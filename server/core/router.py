from __future__ import annotations

import email.utils
import logging
from http import HTTPStatus
from typing import Any, Optional
from urllib.parse import unquote, urlsplit

from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from server.storage import AssetCache
from shared.protocol import INDEX_FILE, UPGRADE_PATH, StatusCode, classify
from shared.protocol.constants import INDEX_ALIASES, NOT_FOUND_BODY
from shared.utils import log_msg

logger = logging.getLogger(__name__)


def resolve_file_name(url: str) -> str:
    """Final path segment of ``url``, collapsed to index.html for directory-like paths."""
    path = unquote(urlsplit(url).path)
    file_name = path.rsplit("/", 1)[-1]
    if path.endswith("/") or file_name in INDEX_ALIASES:
        return INDEX_FILE
    return file_name


def is_upgrade(request: Request) -> bool:
    return "websocket" in request.headers.get("Upgrade", "").lower()


def build_response(status: StatusCode, body: bytes, content_type: str) -> Response:
    headers = Headers()
    headers["Date"] = email.utils.formatdate(usegmt=True)
    headers["Connection"] = "close"
    headers["Content-Length"] = str(len(body))
    headers["Content-Type"] = content_type
    return Response(int(status), HTTPStatus(int(status)).phrase, headers, body)


class StaticRequestHandler:
    """Answers plain HTTP requests from the asset cache."""

    def __init__(self, assets: AssetCache) -> None:
        self.assets = assets

    def handle(self, url: str) -> Response:
        file_name = resolve_file_name(url)
        body = self.assets.get(file_name)
        if body is not None:
            return build_response(StatusCode.SUCCESS, body, classify(file_name))
        log_msg(f'Client requested a file not in the cache: "{url}" (parsed to filename: {file_name})')
        return build_response(StatusCode.NOT_FOUND, NOT_FOUND_BODY, "text/plain")

    def process_request(self, connection: Any, request: Request) -> Optional[Response]:
        """
        ``process_request`` hook for the websockets server.

        Returns None to let an upgrade at the root proceed to the handshake and
        a static response for everything else.
        """
        if is_upgrade(request) and urlsplit(request.path).path == UPGRADE_PATH:
            return None
        try:
            return self.handle(request.path)
        except Exception as exc:
            log_msg(exc, "error", log_stack=True)
            return build_response(StatusCode.INTERNAL_ERROR, b"500 Internal Server Error\n", "text/plain")


__all__ = ["StaticRequestHandler", "resolve_file_name", "is_upgrade", "build_response"]
