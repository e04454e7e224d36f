"""Theme toggle endpoint."""

from aiohttp import hdrs, web

from jsonsite.core.theme import THEME_COOKIE, THEME_COOKIE_MAX_AGE, resolve_theme


def create_theme_routes() -> list[web.RouteDef]:
    return [
        web.get("/set-theme", toggle_theme),
        web.post("/set-theme", toggle_theme),
    ]


async def toggle_theme(request: web.Request) -> web.Response:
    """Flip the theme cookie and redirect back to the referring page."""
    theme = resolve_theme(request.cookies.get(THEME_COOKIE)).toggled()
    location = request.headers.get(hdrs.REFERER) or "/"

    response = web.Response(status=303, headers={hdrs.LOCATION: location})
    response.set_cookie(
        THEME_COOKIE,
        theme.value,
        path="/",
        max_age=THEME_COOKIE_MAX_AGE,
        samesite="Lax",
    )
    return response
