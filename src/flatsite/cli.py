"""CLI interface for flatsite."""

import logging
from pathlib import Path

import click

from flatsite.config import APP_ENVIRONMENTS, Config
from flatsite.core.frontmatter import ContentError
from flatsite.core.pages import FilesystemContentRepository

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Path to configuration file (default: auto-discover flatsite.toml)",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """flatsite - markdown pages served from flat files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@config_option
@click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Content source directory (overrides config)",
)
@click.option(
    "--templates-dir",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Directory with template overrides (overrides config)",
)
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option("--port", "-p", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--env",
    type=click.Choice(APP_ENVIRONMENTS),
    default=None,
    help="Application environment (overrides APP_ENV)",
)
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    templates_dir: Path | None,
    host: str | None,
    port: int | None,
    env: str | None,
) -> None:
    """Start the site server."""
    from flatsite.server import run_server

    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        source_dir=source_dir,
        templates_dir=templates_dir,
        env=env,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Content directory: {config.content.source_dir}")
    if config.content.templates_dir:
        click.echo(f"Template overrides: {config.content.templates_dir}")
    click.echo(f"Environment: {config.app.env}")
    if not config.app.api_key:
        click.echo(click.style("Warning: API_KEY is not set, the API will reject all requests", fg="yellow"))

    run_server(config)


@cli.command()
def routes() -> None:
    """List the route table."""
    from flatsite.routes import ROUTES

    for route in ROUTES:
        filter_tag = route.filter_tag or "-"
        click.echo(f"{route.method:<6} {route.path:<20} {route.handler_name:<28} {filter_tag}")


@cli.command()
@config_option
@click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Content source directory (overrides config)",
)
def pages(config_path: Path | None, source_dir: Path | None) -> None:
    """List content pages."""
    config = _load_config(config_path).with_overrides(source_dir=source_dir)
    repository = FilesystemContentRepository(config.content.source_dir)

    try:
        found = repository.list_pages()
    except ContentError as e:
        raise click.ClickException(str(e)) from e

    if not found:
        click.echo(f"No pages in {config.content.source_dir}")
        return

    for page in found:
        click.echo(f"{page.slug:<24} {page.title}")


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e
