"""JSON page API.

Every response carries a ``success`` flag; failures add a ``message``.
"""

import json

from aiohttp import web

from flatsite.controllers.caching import cache_headers, compute_etag, is_not_modified
from flatsite.core.pages import ContentRepository
from flatsite.core.renderer import MarkdownParser


class ApiPageController:
    def __init__(self, repository: ContentRepository, markdown: MarkdownParser) -> None:
        self._repository = repository
        self._markdown = markdown

    async def index(self, request: web.Request) -> web.Response:
        pages = self._repository.list_pages()
        return web.json_response({"success": True, "data": [page.summary() for page in pages]})

    async def show(self, request: web.Request) -> web.Response:
        slug = request.match_info["slug"]
        page = self._repository.get(slug)
        if page is None:
            return web.json_response(
                {"success": False, "message": "Page not found"},
                status=404,
            )

        data = {**page.to_dict(), "content": self._markdown.to_html(page.body)}
        body = json.dumps({"success": True, "data": data})

        etag = compute_etag(body)
        headers = cache_headers(etag, page.modified)
        if is_not_modified(request, etag):
            return web.Response(status=304, headers=headers)

        return web.Response(
            text=body,
            content_type="application/json",
            headers=headers,
        )
