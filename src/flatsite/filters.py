"""Per-route request filters.

A filter has the same shape as an aiohttp middleware: it receives the
request and the next handler, and either short-circuits with its own
response or calls through. Routes name their filter by tag.
"""

import hmac
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Protocol

from aiohttp import web

from flatsite.config import Config

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


class Filter(Protocol):
    async def __call__(self, request: web.Request, handler: Handler) -> web.StreamResponse: ...


class ApiKeyFilter:
    """Reject requests whose ``x-api-key`` header is not the configured key."""

    def __init__(self, config: Config) -> None:
        self._api_key = config.app.api_key

    async def __call__(self, request: web.Request, handler: Handler) -> web.StreamResponse:
        provided = request.headers.get(API_KEY_HEADER)
        if provided is None:
            return unauthorized("Missing API key")

        if not self._api_key or not hmac.compare_digest(
            provided.encode("utf-8", "surrogateescape"),
            self._api_key.encode("utf-8", "surrogateescape"),
        ):
            logger.info(f"Rejected API request to {request.path}: invalid API key")
            return unauthorized("Invalid API key")

        return await handler(request)


FILTERS: dict[str, type[Filter]] = {
    "auth": ApiKeyFilter,
}


def unauthorized(message: str) -> web.Response:
    return web.json_response({"success": False, "message": message}, status=401)


def apply_filters(handler: Handler, filters: list[Filter]) -> Handler:
    """Wrap ``handler`` so the first filter runs outermost."""
    for request_filter in reversed(filters):
        handler = partial(request_filter, handler=handler)
    return handler
