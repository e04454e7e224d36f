"""CLI interface for JsonSite.

Command-line tool for serving and checking a JSON-described website.
This is the single place where startup errors terminate the process.
"""

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn

import click

from jsonsite import __version__
from jsonsite.config import Config
from jsonsite.core.navigation import build_menu, menu_items
from jsonsite.core.site import load_site
from jsonsite.errors import JsonSiteError
from jsonsite.log import configure_logging


@click.group()
@click.version_option(__version__, prog_name="jsonsite")
def cli() -> None:
    """JsonSite - a website described by a single JSON file."""


def site_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that reads the site description."""
    options = [
        click.option(
            "--config",
            "-c",
            "config_file",
            type=click.Path(path_type=Path, dir_okay=False),
            default=None,
            help="Site description file (default: $JSONSITE_CONFIG or config.json)",
        ),
        click.option(
            "--schema",
            default=None,
            help="JSON Schema URL or path (default: $JSONSITE_SCHEMA or bundled schema)",
        ),
        click.option(
            "--templates",
            "-t",
            "templates_dir",
            type=click.Path(exists=True, path_type=Path, file_okay=False),
            default=None,
            help="Templates directory (default: $JSONSITE_TEMPLATES or bundled templates)",
        ),
        click.option(
            "--log-file",
            "log_sink",
            default=None,
            help="Log sink: stdout, stderr, DISCARD or a file name (default: $LOG_FILE or stderr)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.command()
@site_options
@click.option(
    "--favicon",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Favicon file served at /favicon.ico (default: favicon.ico)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (default: $PORT or 8888)",
)
def serve(
    config_file: Path | None,
    schema: str | None,
    templates_dir: Path | None,
    log_sink: str | None,
    favicon: Path | None,
    host: str | None,
    port: int | None,
) -> None:
    """Start the web server."""
    from jsonsite.server import run_server

    try:
        config = Config.load().with_overrides(
            host=host,
            port=port,
            config_file=config_file,
            schema=schema,
            templates_dir=templates_dir,
            favicon=favicon,
            log_sink=log_sink,
        )
        configure_logging(config.log.sink)

        click.echo(f"Starting server on {config.server.host}:{config.server.port}")
        click.echo(f"Site description: {config.files.config_file}")
        click.echo(f"Templates: {config.files.templates_dir or 'bundled'}")

        run_server(config)
    except JsonSiteError as e:
        _fail(e)


@cli.command()
@site_options
def check(
    config_file: Path | None,
    schema: str | None,
    templates_dir: Path | None,
    log_sink: str | None,
) -> None:
    """Validate the site description and assemble every template."""
    from jsonsite.server import assemble_site

    try:
        config = Config.load().with_overrides(
            config_file=config_file,
            schema=schema,
            templates_dir=templates_dir,
            log_sink=log_sink,
        )
        configure_logging(config.log.sink)
        site, templates = assemble_site(config)
    except JsonSiteError as e:
        _fail(e)

    click.echo(f"Site: {site.title}")
    for key in templates.page_keys():
        click.echo(f"  cached {key}")
    click.echo(
        click.style(
            f"\nOK: {len(templates.page_keys())} page templates assembled",
            fg="green",
            bold=True,
        ),
    )


@cli.command()
@site_options
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the route table and menu as JSON",
)
def routes(
    config_file: Path | None,
    schema: str | None,
    templates_dir: Path | None,
    log_sink: str | None,
    as_json: bool,
) -> None:
    """List served routes and the navigation menu."""
    try:
        config = Config.load().with_overrides(
            config_file=config_file,
            schema=schema,
            templates_dir=templates_dir,
            log_sink=log_sink,
        )
        configure_logging(config.log.sink)
        site = load_site(config.files.config_file, config.files.schema)
    except JsonSiteError as e:
        _fail(e)

    table = [
        {
            "method": page.parsed_route.method,
            "path": page.parsed_route.path,
            "source": "custom_content" if page.uses_blocks else page.template or "-",
        }
        for page in site.serving_pages()
    ]
    menu = menu_items(build_menu(site.pages))

    if as_json:
        click.echo(json.dumps({"routes": table, "menu": [item.to_dict() for item in menu]}, indent=2))
        return

    for row in table:
        click.echo(f"{row['method']:<8}{row['path']:<32}{row['source']}")
    click.echo("\nMenu:")
    for item in menu:
        click.echo(f"{item.order:>5}  {item.title} ({item.path})")


def _fail(error: JsonSiteError) -> NoReturn:
    click.echo(click.style(f"Error: {error}", fg="red"), err=True)
    sys.exit(1)
