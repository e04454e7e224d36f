"""Health check endpoint."""

from aiohttp import web

from jsonsite import __version__
from jsonsite.app_keys import templates_key


def create_health_routes() -> list[web.RouteDef]:
    return [web.get("/health", get_health)]


async def get_health(request: web.Request) -> web.Response:
    """Health check endpoint for monitoring and container probes."""
    templates = request.app[templates_key]
    return web.json_response(
        {
            "status": "ok",
            "version": __version__,
            "routes": len(templates.page_keys()),
        }
    )
