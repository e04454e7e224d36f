"""aiohttp server for JsonSite.

Application factory and route registration. Startup runs in two strictly
separated phases: assembly (load the site, build every template) and
serving. Nothing is bound to a port until assembly has succeeded.
"""

import logging
from pathlib import Path

from aiohttp import web

from jsonsite import __version__
from jsonsite.api.errors import error_middleware
from jsonsite.api.health import create_health_routes
from jsonsite.api.pages import create_pages_routes
from jsonsite.api.theme import create_theme_routes
from jsonsite.app_keys import favicon_key, menu_key, site_key, templates_key
from jsonsite.assets import get_templates_dir
from jsonsite.config import Config
from jsonsite.core.navigation import build_menu
from jsonsite.core.site import SiteConfig, load_site
from jsonsite.core.templates import TemplateAssembler, TemplateCache

logger = logging.getLogger(__name__)

IDLE_TIMEOUT = 120.0
SHUTDOWN_TIMEOUT = 10.0


def assemble_site(config: Config) -> tuple[SiteConfig, TemplateCache]:
    """Load the site description and build the template cache.

    Args:
        config: Application configuration

    Returns:
        The site configuration and its assembled template cache

    Raises:
        ConfigurationError: If the site description is invalid
        AssemblyError: If any template cannot be built
    """
    site = load_site(config.files.config_file, config.files.schema)
    templates_dir = config.files.templates_dir or get_templates_dir()
    templates = TemplateAssembler(templates_dir).assemble(site)
    return site, templates


def create_app(
    site: SiteConfig,
    templates: TemplateCache,
    *,
    favicon: Path | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        site: Validated site configuration
        templates: Template cache built from the same site
        favicon: Favicon file served at /favicon.ico

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[error_middleware])

    menu = build_menu(site.pages)

    app[site_key] = site
    app[templates_key] = templates
    app[menu_key] = menu
    app[favicon_key] = favicon or Path("favicon.ico")

    # Built-in routes are registered first; subtree page routes must stay last
    app.router.add_get("/favicon.ico", _serve_favicon)
    app.router.add_routes(create_theme_routes())
    app.router.add_routes(create_health_routes())
    app.router.add_routes(create_pages_routes(site, templates, menu))

    return app


async def _serve_favicon(request: web.Request) -> web.FileResponse:
    """Serve the configured favicon file."""
    favicon_path = request.app[favicon_key]
    if not favicon_path.is_file():
        raise web.HTTPNotFound()
    return web.FileResponse(favicon_path)


def run_server(config: Config) -> None:
    """Assemble the site and run the server until interrupted.

    Args:
        config: Application configuration

    Raises:
        ConfigurationError: If the site description is invalid
        AssemblyError: If any template cannot be built
    """
    logger.info(f"Starting jsonsite version {__version__}")
    site, templates = assemble_site(config)
    app = create_app(site, templates, favicon=config.files.favicon)

    logger.info(f"Server starting on http://{config.server.host}:{config.server.port}")
    web.run_app(
        app,
        host=config.server.host,
        port=config.server.port,
        keepalive_timeout=IDLE_TIMEOUT,
        shutdown_timeout=SHUTDOWN_TIMEOUT,
        print=None,
    )
