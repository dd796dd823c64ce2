"""aiohttp server for flatsite.

Application factory: the front controller every request goes through.
"""

import logging

from aiohttp import web

from flatsite.app_keys import config_key, container_key
from flatsite.config import Config
from flatsite.container import Container
from flatsite.core.pages import ContentRepository, FilesystemContentRepository
from flatsite.core.renderer import MarkdownParser, MistuneMarkdownParser
from flatsite.core.templates import JinjaTemplateRenderer, TemplateRenderer
from flatsite.dispatch import Route, create_route_defs
from flatsite.errors import create_error_middleware
from flatsite.routes import ROUTES

logger = logging.getLogger(__name__)


def build_container(config: Config) -> Container:
    """Register the site's services under the types controllers ask for."""
    container = Container()
    container.register(Config, config)
    container.register(ContentRepository, FilesystemContentRepository(config.content.source_dir))
    container.register(MarkdownParser, MistuneMarkdownParser())
    container.register(TemplateRenderer, JinjaTemplateRenderer(config.content.templates_dir))
    return container


def create_app(config: Config, *, routes: list[Route] | None = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        routes: Route table (default: ROUTES)

    Returns:
        Configured aiohttp application
    """
    container = build_container(config)

    app = web.Application(
        middlewares=[
            create_error_middleware(
                debug=config.app.debug,
                templates=container.get(TemplateRenderer),
            ),
        ],
    )
    app[config_key] = config
    app[container_key] = container

    app.router.add_routes(create_route_defs(ROUTES if routes is None else routes))

    if config.app.api_key is None:
        logger.warning("API_KEY is not set; /api routes will reject every request")

    return app


def run_server(config: Config) -> None:
    """Run the server."""
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
