"""Jinja2 template rendering with per-site override support."""

from pathlib import Path
from typing import Any, Protocol

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape


class TemplateRenderer(Protocol):
    """Renders a named template with a context."""

    def render(self, template_name: str, context: dict[str, Any]) -> str: ...


class JinjaTemplateRenderer:
    """Render packaged HTML templates, letting a site directory override them.

    Templates found in ``templates_dir`` win over the ones shipped in
    ``flatsite/templates`` with the same name.
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        loaders: list[BaseLoader] = []
        if templates_dir is not None:
            loaders.append(FileSystemLoader(str(templates_dir)))
        loaders.append(PackageLoader("flatsite", "templates"))

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html"]),
        )

    @property
    def environment(self) -> Environment:
        return self._env

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        return self._env.get_template(template_name).render(**context)
