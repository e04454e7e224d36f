"""Light/dark theme preference.

The preference lives only in the client's ``theme`` cookie; there is no
server-side session state.
"""

from enum import StrEnum

THEME_COOKIE = "theme"
THEME_COOKIE_MAX_AGE = 365 * 24 * 60 * 60


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "Theme":
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT


DEFAULT_THEME = Theme.LIGHT


def resolve_theme(cookie_value: str | None) -> Theme:
    """Resolve the theme from a cookie value.

    Any missing or unknown value resolves to the default light theme.
    """
    if cookie_value == Theme.DARK:
        return Theme.DARK
    return DEFAULT_THEME
