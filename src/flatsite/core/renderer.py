"""Markdown to HTML conversion.

Thin wrapper over mistune so controllers depend on a protocol rather than
the parser library.
"""

import logging
from typing import Protocol

import mistune

logger = logging.getLogger(__name__)

DEFAULT_PLUGINS = ["strikethrough", "table", "url"]


class MarkdownParser(Protocol):
    """Converts markdown text to HTML."""

    def to_html(self, markdown_text: str) -> str: ...


class MistuneMarkdownParser:
    """Convert markdown with mistune's HTML renderer.

    Raw HTML in the markdown source is escaped unless ``escape`` is False.
    """

    def __init__(self, *, escape: bool = True, plugins: list[str] | None = None) -> None:
        self._markdown = mistune.create_markdown(
            escape=escape,
            plugins=plugins if plugins is not None else DEFAULT_PLUGINS,
        )

    def to_html(self, markdown_text: str) -> str:
        logger.debug(f"Converting {len(markdown_text)} characters of markdown")
        html = self._markdown(markdown_text)
        return html if isinstance(html, str) else ""
