"""HTML page controllers."""

from aiohttp import web

from flatsite.config import Config
from flatsite.controllers.caching import cache_headers, compute_etag, is_not_modified
from flatsite.core.pages import ContentRepository
from flatsite.core.renderer import MarkdownParser
from flatsite.core.templates import TemplateRenderer


class HomeController:
    """Lists every page on the home page."""

    def __init__(self, repository: ContentRepository, templates: TemplateRenderer, config: Config) -> None:
        self._repository = repository
        self._templates = templates
        self._site_title = config.content.site_title

    async def index(self, request: web.Request) -> web.Response:
        html = self._templates.render(
            "home.html",
            {"site_title": self._site_title, "pages": self._repository.list_pages()},
        )
        return web.Response(text=html, content_type="text/html")


class PageController:
    """Renders a single markdown page."""

    def __init__(
        self,
        repository: ContentRepository,
        markdown: MarkdownParser,
        templates: TemplateRenderer,
        config: Config,
    ) -> None:
        self._repository = repository
        self._markdown = markdown
        self._templates = templates
        self._site_title = config.content.site_title

    async def show(self, request: web.Request) -> web.Response:
        page = self._repository.get(request.match_info["slug"])
        if page is None:
            raise web.HTTPNotFound()

        html = self._templates.render(
            "page.html",
            {
                "site_title": self._site_title,
                "page": page,
                "content": self._markdown.to_html(page.body),
            },
        )

        etag = compute_etag(html)
        headers = cache_headers(etag, page.modified)
        if is_not_modified(request, etag):
            return web.Response(status=304, headers=headers)

        return web.Response(
            text=html,
            content_type="text/html",
            headers=headers,
        )
