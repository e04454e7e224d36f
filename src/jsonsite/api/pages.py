"""Page routes.

Registers one request handler per served page. Each handler carries its
page, parsed route, route key and the shared menu snapshot, and renders
the page's cached template on every request.
"""

import logging
from collections.abc import Awaitable, Callable

from aiohttp import web

from jsonsite.api.errors import render_internal_error, render_not_found
from jsonsite.core.context import PageData
from jsonsite.core.site import Page, SiteConfig
from jsonsite.core.templates import TemplateCache
from jsonsite.core.theme import THEME_COOKIE, resolve_theme
from jsonsite.errors import RenderExecutionError

logger = logging.getLogger(__name__)

PageHandler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def create_pages_routes(
    site: SiteConfig,
    templates: TemplateCache,
    menu: tuple[Page, ...],
) -> list[web.RouteDef]:
    """Create route definitions for every served page.

    Exact paths come first. Paths ending in ``/`` also match their whole
    subtree and are ordered after the exact ones, longest first, so that
    ``GET /`` only receives requests no other route claims.

    Args:
        site: Site configuration
        templates: Assembled template cache
        menu: Menu snapshot shared by all handlers

    Returns:
        Route definitions for aiohttp
    """
    exact: list[web.RouteDef] = []
    subtree: list[tuple[str, web.RouteDef]] = []

    for page in site.serving_pages():
        route = page.parsed_route
        handler = make_page_handler(page, site, templates, menu)
        if route.path.endswith("/"):
            subtree.append((route.path, _route_def(route.method, route.path + "{tail:.*}", handler)))
        else:
            exact.append(_route_def(route.method, route.path, handler))
        logger.info(f"Registered handler for {route}")

    subtree.sort(key=lambda item: len(item[0]), reverse=True)
    return exact + [definition for _, definition in subtree]


def _route_def(method: str, path: str, handler: PageHandler) -> web.RouteDef:
    if method == "GET":
        return web.get(path, handler)
    return web.route(method, path, handler)


def make_page_handler(
    page: Page,
    site: SiteConfig,
    templates: TemplateCache,
    menu: tuple[Page, ...],
) -> PageHandler:
    """Create the request handler for one page.

    Per request: the path must equal the page path exactly (otherwise not
    found), the template must be in the cache (otherwise internal error),
    and rendering must succeed (otherwise internal error).
    """
    route = page.parsed_route
    key = page.route_key

    async def handle_page(request: web.Request) -> web.StreamResponse:
        data = PageData(
            site=site,
            page=page,
            theme=resolve_theme(request.cookies.get(THEME_COOKIE)),
            menu_pages=menu,
        )

        if request.path != route.path:
            logger.info(f"requested path {request.path} is not handled by '{key}'")
            return render_not_found(request, templates, data)

        template = templates.get(key)
        if template is None:
            err = LookupError(f"template for route '{key}' not found in cache")
            return render_internal_error(request, templates, data, err)

        try:
            html = template.render(data.context())
        except Exception as e:
            logger.exception(f"error in template execution for {key}")
            return render_internal_error(request, templates, data, RenderExecutionError(key, e))

        return web.Response(text=html, content_type="text/html")

    return handle_page
