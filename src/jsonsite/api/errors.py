"""Content-negotiated error responses.

Clients sending ``Accept: application/json`` get a compact JSON body
``{"error": "..."}``. Everyone else gets the cached error template,
rendered through the same layout as normal pages so the header, footer
and theme are preserved.
"""

import functools
import json
import logging

from aiohttp import hdrs, web
from aiohttp.typedefs import Handler

from jsonsite.app_keys import menu_key, site_key, templates_key
from jsonsite.core.context import ErrorInfo, PageData
from jsonsite.core.templates import TemplateCache
from jsonsite.core.theme import THEME_COOKIE, resolve_theme
from jsonsite.core.types import INTERNAL_ERROR_KEY, NOT_FOUND_KEY, RouteKey

logger = logging.getLogger(__name__)

_compact_dumps = functools.partial(json.dumps, separators=(",", ":"))


def wants_json(request: web.Request) -> bool:
    """Check if the client asked for a JSON response."""
    return "application/json" in request.headers.get(hdrs.ACCEPT, "")


def render_not_found(
    request: web.Request,
    templates: TemplateCache,
    data: PageData,
) -> web.Response:
    """Render the 404 response for a request."""
    logger.info(f"Path not found: {request.method} {request.path}")
    if wants_json(request):
        return _json_error("not found", 404)
    error = ErrorInfo(
        status=404,
        title="Not Found",
        message=f"the resource '{request.path}' was not found.",
    )
    return _render_error_page(templates, NOT_FOUND_KEY, data, error)


def render_method_not_allowed(
    request: web.Request,
    templates: TemplateCache,
    data: PageData,
    allowed: set[str],
) -> web.Response:
    """Render the 405 response, reusing the not-found page layout."""
    logger.info(f"Method not allowed: {request.method} {request.path}")
    if wants_json(request):
        response = _json_error("method not allowed", 405)
    else:
        error = ErrorInfo(
            status=405,
            title="Method Not Allowed",
            message=f"the method {request.method} is not allowed for '{request.path}'.",
        )
        response = _render_error_page(templates, NOT_FOUND_KEY, data, error)
    response.headers[hdrs.ALLOW] = ", ".join(sorted(allowed))
    return response


def render_internal_error(
    request: web.Request,
    templates: TemplateCache,
    data: PageData,
    exc: Exception,
) -> web.Response:
    """Render the 500 response.

    The failure detail is included in JSON bodies; HTML pages show a
    generic message and the detail goes to the log only.
    """
    route = data.page.route if data.page is not None else request.path
    logger.error(f"error in {route} was: {exc}")
    if wants_json(request):
        return _json_error(str(exc), 500)
    error = ErrorInfo(
        status=500,
        title="Internal Server Error",
        message="The server could not render this page. The error has been logged.",
    )
    return _render_error_page(templates, INTERNAL_ERROR_KEY, data, error)


def _json_error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status, dumps=_compact_dumps)


def _render_error_page(
    templates: TemplateCache,
    key: RouteKey,
    data: PageData,
    error: ErrorInfo,
) -> web.Response:
    status = error.status

    template = templates.get(key)
    if template is None:
        logger.error(f"error template '{key}' is missing from the cache")
        return web.Response(
            text=f"Critical Error: {status} {error.title} template is missing",
            status=status,
        )

    try:
        html = template.render(data.with_error(error).context())
    except Exception:
        logger.exception(f"error rendering error template '{key}'")
        return web.Response(text=f"{status} {error.title}", status=status)

    return web.Response(text=html, status=status, content_type="text/html")


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Turn router-level 404 and 405 errors into negotiated error pages."""
    try:
        return await handler(request)
    except web.HTTPNotFound:
        return render_not_found(request, request.app[templates_key], _base_page_data(request))
    except web.HTTPMethodNotAllowed as e:
        return render_method_not_allowed(
            request,
            request.app[templates_key],
            _base_page_data(request),
            e.allowed_methods,
        )


def _base_page_data(request: web.Request) -> PageData:
    return PageData(
        site=request.app[site_key],
        page=None,
        theme=resolve_theme(request.cookies.get(THEME_COOKIE)),
        menu_pages=request.app[menu_key],
    )
