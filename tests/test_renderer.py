"""Tests for markdown and template rendering."""

from pathlib import Path

import pytest
from flatsite.core.renderer import MistuneMarkdownParser
from flatsite.core.templates import JinjaTemplateRenderer
from jinja2 import TemplateNotFound


class TestMistuneMarkdownParser:
    """Tests for MistuneMarkdownParser.to_html()."""

    def test__simple_markdown__renders_to_html(self) -> None:
        """Render headings and emphasis."""
        html = MistuneMarkdownParser().to_html("# Guide\n\nThis is **bold**.")

        assert "<h1>Guide</h1>" in html
        assert "<strong>bold</strong>" in html

    def test__table__renders_with_plugin(self) -> None:
        """Tables are enabled by default."""
        html = MistuneMarkdownParser().to_html("| a | b |\n|---|---|\n| 1 | 2 |\n")

        assert "<table>" in html
        assert "<td>1</td>" in html

    def test__strikethrough__renders_with_plugin(self) -> None:
        """Strikethrough is enabled by default."""
        html = MistuneMarkdownParser().to_html("~~gone~~")

        assert "<del>gone</del>" in html

    def test__raw_html__is_escaped_by_default(self) -> None:
        """Raw HTML in markdown is escaped."""
        html = MistuneMarkdownParser().to_html("<script>alert(1)</script>")

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test__escape_disabled__keeps_raw_html(self) -> None:
        """Raw HTML passes through when escaping is off."""
        html = MistuneMarkdownParser(escape=False).to_html("<div class=\"x\">hi</div>\n")

        assert '<div class="x">hi</div>' in html

    def test__empty_input__returns_empty_string(self) -> None:
        assert MistuneMarkdownParser().to_html("") == ""


class TestJinjaTemplateRenderer:
    """Tests for JinjaTemplateRenderer.render()."""

    def test__packaged_template__renders(self) -> None:
        """Render a bundled template."""
        html = JinjaTemplateRenderer().render("home.html", {"site_title": "Site", "pages": []})

        assert "<title>Site</title>" in html
        assert "No pages yet." in html

    def test__context_values__are_autoescaped(self) -> None:
        """Values are HTML-escaped in .html templates."""
        html = JinjaTemplateRenderer().render("home.html", {"site_title": "<b>x</b>", "pages": []})

        assert "<b>x</b>" not in html
        assert "&lt;b&gt;x&lt;/b&gt;" in html

    def test__override_directory__wins(self, tmp_path: Path) -> None:
        """Templates in templates_dir shadow packaged ones."""
        (tmp_path / "home.html").write_text("custom {{ site_title }}")

        html = JinjaTemplateRenderer(tmp_path).render("home.html", {"site_title": "Site", "pages": []})

        assert html == "custom Site"

    def test__override_directory__falls_back_to_package(self, tmp_path: Path) -> None:
        """Templates missing from templates_dir come from the package."""
        html = JinjaTemplateRenderer(tmp_path).render("home.html", {"site_title": "Site", "pages": []})

        assert "No pages yet." in html

    def test__unknown_template__raises(self) -> None:
        with pytest.raises(TemplateNotFound):
            JinjaTemplateRenderer().render("missing.html", {})
