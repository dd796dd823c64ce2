"""Error pages.

Router failures become small canned HTML pages. Anything else is either
shown as a debug page (development) or left to aiohttp's default 500
handler (production).
"""

import logging
import traceback
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Self

from aiohttp import web

from flatsite.core.templates import TemplateRenderer

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


class DispatchFailure(StrEnum):
    """Why a request could not be dispatched to a controller."""

    NOT_FOUND = "not-found"
    METHOD_NOT_ALLOWED = "method-not-allowed"
    NOT_ACCEPTABLE = "not-acceptable"

    @property
    def status(self) -> int:
        return _FAILURE_STATUS[self]

    @property
    def html(self) -> str:
        return FAILURE_PAGES[self]

    @classmethod
    def from_status(cls, status: int) -> Self | None:
        for failure, failure_status in _FAILURE_STATUS.items():
            if failure_status == status:
                return failure
        return None


_FAILURE_STATUS = {
    DispatchFailure.NOT_FOUND: 404,
    DispatchFailure.METHOD_NOT_ALLOWED: 405,
    DispatchFailure.NOT_ACCEPTABLE: 406,
}

FAILURE_PAGES = {
    DispatchFailure.NOT_FOUND: "<h1>404 Not Found</h1><p>The page you requested does not exist.</p>",
    DispatchFailure.METHOD_NOT_ALLOWED: (
        "<h1>405 Method Not Allowed</h1><p>This page does not support that request method.</p>"
    ),
    DispatchFailure.NOT_ACCEPTABLE: (
        "<h1>406 Not Acceptable</h1><p>This page cannot be served in the requested format.</p>"
    ),
}


def failure_response(failure: DispatchFailure, exc: web.HTTPException | None = None) -> web.Response:
    """Build the canned HTML response for a dispatch failure.

    Keeps the ``Allow`` header of a 405 raised by the router.
    """
    headers = {}
    if exc is not None and "Allow" in exc.headers:
        headers["Allow"] = exc.headers["Allow"]
    return web.Response(
        status=failure.status,
        text=failure.html,
        content_type="text/html",
        headers=headers,
    )


def create_error_middleware(*, debug: bool, templates: TemplateRenderer):
    """Create the error page middleware.

    Args:
        debug: Render a traceback page for unhandled exceptions
        templates: Renderer used for the debug page

    Returns:
        aiohttp middleware
    """

    @web.middleware
    async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        try:
            return await handler(request)
        except web.HTTPException as e:
            failure = DispatchFailure.from_status(e.status)
            if failure is None:
                raise
            logger.debug(f"{request.method} {request.path}: {failure}")
            return failure_response(failure, e)
        except Exception as e:
            if not debug:
                raise
            logger.exception(f"Unhandled error for {request.method} {request.path}")
            return _debug_response(request, e, templates)

    return error_middleware


def _debug_response(request: web.Request, exc: Exception, templates: TemplateRenderer) -> web.Response:
    html = templates.render(
        "debug.html",
        {
            "exc_type": type(exc).__qualname__,
            "exc_message": str(exc),
            "method": request.method,
            "path": request.path_qs,
            "traceback": "".join(traceback.format_exception(exc)),
        },
    )
    return web.Response(status=500, text=html, content_type="text/html")
