"""Per-request template context."""

from dataclasses import dataclass, replace
from typing import Any

from jsonsite.core.site import Page, SiteConfig
from jsonsite.core.theme import Theme


@dataclass(frozen=True)
class ErrorInfo:
    """Error payload shown by the error page templates."""

    status: int
    title: str
    message: str


@dataclass(frozen=True)
class PageData:
    """View passed to templates: site, page, theme and menu.

    Built fresh for every request and discarded after the response.
    ``page`` is None when no page route matched the request.
    """

    site: SiteConfig
    page: Page | None
    theme: Theme
    menu_pages: tuple[Page, ...]
    error: ErrorInfo | None = None

    def with_error(self, error: ErrorInfo) -> "PageData":
        return replace(self, error=error)

    def context(self) -> dict[str, Any]:
        """Template variables for rendering."""
        return {
            "site": self.site,
            "page": self.page,
            "theme": self.theme,
            "menu_pages": self.menu_pages,
            "error": self.error,
        }
