"""Navigation menu builder.

Derives the ordered menu from the site's page list. The menu is a view
over the page list: it never owns or alters pages.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from jsonsite.core.site import Page


@dataclass(frozen=True)
class MenuItem:
    """Navigation entry for JSON output."""

    title: str
    path: str
    order: int

    def to_dict(self) -> dict[str, str | int]:
        """Convert to dictionary for JSON serialization."""
        return {"title": self.title, "path": self.path, "order": self.order}


def build_menu(pages: Iterable[Page]) -> tuple[Page, ...]:
    """Build the menu page list.

    Keeps pages that are not drafts and are marked visible in navigation,
    sorted by ascending menu order. The sort is stable: pages sharing an
    order keep their configuration order.

    Args:
        pages: Pages in configuration order

    Returns:
        Filtered, sorted pages
    """
    visible = [page for page in pages if not page.draft and page.show_in_menu]
    return tuple(sorted(visible, key=lambda page: page.menu_order))


def menu_items(menu: Iterable[Page]) -> list[MenuItem]:
    return [MenuItem(title=page.title, path=page.path, order=page.menu_order) for page in menu]
