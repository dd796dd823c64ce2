"""Static route table."""

from flatsite.controllers import ApiPageController, HomeController, PageController
from flatsite.dispatch import JSON, Route

ROUTES = [
    Route("GET", "/", (HomeController, "index"), name="home"),
    Route("GET", "/api/page", (ApiPageController, "index"), produces=JSON, filter_tag="auth", name="api-pages"),
    Route(
        "GET",
        "/api/page/{slug}",
        (ApiPageController, "show"),
        produces=JSON,
        filter_tag="auth",
        name="api-page",
    ),
    Route("GET", "/{slug}", (PageController, "show"), name="page"),
]
