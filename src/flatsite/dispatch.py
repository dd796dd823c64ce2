"""Route table to aiohttp handler wiring.

aiohttp's URL dispatcher does the matching. Each registered handler then
negotiates the response type, builds the controller through the container,
runs the route's filter and calls the controller method.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from aiohttp import hdrs, web

from flatsite.app_keys import container_key
from flatsite.filters import FILTERS, apply_filters

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

HTML = "text/html"
JSON = "application/json"


@dataclass(frozen=True)
class Route:
    """A static route definition.

    ``path`` uses aiohttp's ``{name}`` placeholder syntax. ``handler`` names a
    controller class and the method to call on it.
    """

    method: str
    path: str
    handler: tuple[type, str]
    produces: str = HTML
    filter_tag: str | None = None
    name: str | None = None

    @property
    def handler_name(self) -> str:
        controller_cls, method_name = self.handler
        return f"{controller_cls.__name__}.{method_name}"


def create_route_defs(routes: list[Route]) -> list[web.RouteDef]:
    """Build aiohttp route definitions for a route table.

    Raises:
        ValueError: If a route names an unknown filter tag or a missing
            controller method
    """
    defs = []
    for route in routes:
        if route.filter_tag is not None and route.filter_tag not in FILTERS:
            raise ValueError(f"Unknown filter '{route.filter_tag}' on route {route.method} {route.path}")

        controller_cls, method_name = route.handler
        if not callable(getattr(controller_cls, method_name, None)):
            raise ValueError(f"Route {route.method} {route.path}: {route.handler_name} is not callable")

        handler = _make_handler(route)
        if route.method == hdrs.METH_GET:
            # Also answers HEAD
            defs.append(web.get(route.path, handler, name=route.name))
        else:
            kwargs = {"name": route.name} if route.name else {}
            defs.append(web.route(route.method, route.path, handler, **kwargs))
    return defs


def _make_handler(route: Route) -> Handler:
    controller_cls, method_name = route.handler

    async def dispatch(request: web.Request) -> web.StreamResponse:
        if not accepts(request.headers.get(hdrs.ACCEPT), route.produces):
            raise web.HTTPNotAcceptable()

        container = request.app[container_key]
        controller = container.resolve(controller_cls)
        action: Handler = getattr(controller, method_name)

        filters = []
        if route.filter_tag is not None:
            filters.append(container.resolve(FILTERS[route.filter_tag]))

        logger.debug(f"{request.method} {request.path} -> {route.handler_name}")
        return await apply_filters(action, filters)(request)

    dispatch.__name__ = f"dispatch_{method_name}"
    return dispatch


def accepts(accept_header: str | None, media_type: str) -> bool:
    """Check whether an ``Accept`` header allows ``media_type``.

    A missing or empty header accepts anything. The most specific matching
    range decides (``type/sub``, then ``type/*``, then ``*/*``); ``q=0``
    on that range is a refusal.
    """
    if not accept_header or not accept_header.strip():
        return True

    main_type, _, sub_type = media_type.lower().partition("/")
    best: tuple[int, float] | None = None
    for part in accept_header.split(","):
        media_range, *params = (piece.strip() for piece in part.split(";"))
        if not media_range:
            continue

        range_main, _, range_sub = media_range.lower().partition("/")
        if range_main == main_type and range_sub == sub_type:
            specificity = 2
        elif range_main == main_type and range_sub == "*":
            specificity = 1
        elif range_main == "*":
            specificity = 0
        else:
            continue

        # Among equally specific ranges the highest q wins
        candidate = (specificity, _quality(params))
        if best is None or candidate > best:
            best = candidate

    return best is not None and best[1] > 0


def _quality(params: list[str]) -> float:
    for param in params:
        name, _, value = param.partition("=")
        if name.strip().lower() == "q":
            try:
                return float(value)
            except ValueError:
                return 0.0
    return 1.0
