"""Site description model.

The site description is a JSON document holding site-wide metadata and an
ordered list of pages. It is decoded once at startup into frozen
dataclasses and shared read-only by every request handler afterwards.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from jsonsite.core.schema import SchemaSource, validate_document
from jsonsite.core.types import RouteKey
from jsonsite.errors import ConfigurationError

logger = logging.getLogger(__name__)

HTTP_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})
DEFAULT_LAYOUT = "base_layout"


@dataclass(frozen=True)
class Route:
    """Parsed HTTP route (method and path)."""

    method: str
    path: str

    @classmethod
    def parse(cls, text: str) -> "Route":
        """Parse a route string like ``"GET /about"``.

        Args:
            text: Route string with exactly two whitespace-separated tokens

        Returns:
            Route instance with an upper-cased method

        Raises:
            ConfigurationError: If the route string is malformed
        """
        parts = text.split()
        if len(parts) != 2:
            raise ConfigurationError(
                f"route '{text}' must have the form 'METHOD /path'",
            )
        method, path = parts[0].upper(), parts[1]
        if method not in HTTP_METHODS:
            raise ConfigurationError(f"route '{text}' uses unknown HTTP method '{parts[0]}'")
        if not path.startswith("/"):
            raise ConfigurationError(f"route '{text}' path must start with '/'")
        return cls(method=method, path=path)

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


# Served by the application itself; pages may not claim them
RESERVED_ROUTES = frozenset(
    {
        Route("GET", "/favicon.ico"),
        Route("GET", "/set-theme"),
        Route("POST", "/set-theme"),
        Route("GET", "/health"),
    }
)


@dataclass(frozen=True)
class Author:
    """Site author."""

    name: str = ""
    email: str = ""


@dataclass(frozen=True)
class ContentBlock:
    """Typed unit of structured content within a page."""

    type: str
    key_values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class Page:
    """One configured site entry mapping a route to content."""

    route: str
    title: str
    description: str = ""
    draft: bool = False
    create_handler: bool = False
    show_in_menu: bool = False
    menu_order: int = 0
    content: str = ""
    custom_content: tuple[ContentBlock, ...] | None = None
    template: str = ""
    layout: str = DEFAULT_LAYOUT

    @property
    def parsed_route(self) -> Route:
        return Route.parse(self.route)

    @property
    def route_key(self) -> RouteKey:
        """Template cache key, the normalized route string."""
        return RouteKey(str(self.parsed_route))

    @property
    def path(self) -> str:
        """URL path of the page, used for navigation links."""
        return self.parsed_route.path

    @property
    def serves(self) -> bool:
        """Whether a request handler is registered for this page."""
        return self.create_handler and not self.draft

    @property
    def uses_blocks(self) -> bool:
        return self.custom_content is not None


@dataclass(frozen=True)
class SiteConfig:
    """Whole-site configuration and page list."""

    title: str
    base_url: str = ""
    language: str = "en"
    description: str = ""
    author: Author = field(default_factory=Author)
    social: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    footer: str = ""
    pages: tuple[Page, ...] = ()

    def serving_pages(self) -> list[Page]:
        """Pages that get a request handler, in configuration order."""
        return [page for page in self.pages if page.serves]

    @classmethod
    def from_dict(cls, data: object) -> "SiteConfig":
        """Decode a site description document.

        Args:
            data: Parsed JSON document

        Returns:
            SiteConfig instance

        Raises:
            ConfigurationError: If the document is invalid
        """
        if not isinstance(data, dict):
            raise ConfigurationError("site description must be a JSON object")

        title = _require_str(data, "title", "site")
        pages_raw = data.get("pages", [])
        if not isinstance(pages_raw, list):
            raise ConfigurationError("site.pages must be an array")
        pages = tuple(cls._parse_page(item, i) for i, item in enumerate(pages_raw))

        site = cls(
            title=title,
            base_url=_optional_str(data, "baseURL", "site"),
            language=_optional_str(data, "language", "site") or "en",
            description=_optional_str(data, "description", "site"),
            author=cls._parse_author(data.get("author")),
            social=cls._parse_social(data.get("social")),
            footer=_optional_str(data, "footer", "site"),
            pages=pages,
        )
        _check_routes(site)
        return site

    @classmethod
    def _parse_author(cls, data: object) -> Author:
        if data is None:
            return Author()
        if not isinstance(data, dict):
            raise ConfigurationError("site.author must be an object")
        return Author(
            name=_optional_str(data, "name", "site.author"),
            email=_optional_str(data, "email", "site.author"),
        )

    @classmethod
    def _parse_social(cls, data: object) -> Mapping[str, str]:
        if data is None:
            return MappingProxyType({})
        if not isinstance(data, dict):
            raise ConfigurationError("site.social must be an object")
        for name, url in data.items():
            if not isinstance(url, str):
                raise ConfigurationError(f"site.social.{name} must be a string")
        return MappingProxyType(dict(data))

    @classmethod
    def _parse_page(cls, data: object, index: int) -> Page:
        """Decode one page entry.

        Args:
            data: Raw page object
            index: Position in the pages array (for error messages)

        Returns:
            Page instance
        """
        where = f"pages[{index}]"
        if not isinstance(data, dict):
            raise ConfigurationError(f"{where} must be an object")

        route = _require_str(data, "route", where)
        Route.parse(route)

        menu_order = data.get("menuOrder", 0)
        if not isinstance(menu_order, int) or isinstance(menu_order, bool):
            raise ConfigurationError(f"{where}.menuOrder must be an integer")

        custom_raw = data.get("custom_content")
        custom_content: tuple[ContentBlock, ...] | None = None
        if custom_raw is not None:
            if not isinstance(custom_raw, list):
                raise ConfigurationError(f"{where}.custom_content must be an array")
            custom_content = tuple(
                cls._parse_block(block, f"{where}.custom_content[{i}]")
                for i, block in enumerate(custom_raw)
            )

        return Page(
            route=route,
            title=_require_str(data, "title", where),
            description=_optional_str(data, "description", where),
            draft=_optional_bool(data, "draft", where),
            create_handler=_optional_bool(data, "create_handler", where),
            show_in_menu=_optional_bool(data, "showInMenu", where),
            menu_order=menu_order,
            content=_optional_str(data, "content", where),
            custom_content=custom_content,
            template=_optional_str(data, "template", where).strip(),
            layout=_optional_str(data, "layout", where).strip() or DEFAULT_LAYOUT,
        )

    @classmethod
    def _parse_block(cls, data: object, where: str) -> ContentBlock:
        if not isinstance(data, dict):
            raise ConfigurationError(f"{where} must be an object")
        block_type = _require_str(data, "type", where)
        key_values = data.get("keyValues") or {}
        if not isinstance(key_values, dict):
            raise ConfigurationError(f"{where}.keyValues must be an object")
        return ContentBlock(type=block_type, key_values=MappingProxyType(dict(key_values)))


def load_site(config_path: Path, schema: SchemaSource = None) -> SiteConfig:
    """Read, validate and decode the site description file.

    Args:
        config_path: Path to the JSON site description
        schema: JSON Schema location (URL or path); None uses the bundled schema

    Returns:
        SiteConfig instance

    Raises:
        ConfigurationError: If the file is unreadable, not JSON, or invalid
    """
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"cannot read site description {config_path}: {e}") from e

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"site description {config_path} is not valid JSON: {e}") from e

    validate_document(document, schema)
    site = SiteConfig.from_dict(document)
    logger.info(f"Loaded site '{site.title}' with {len(site.pages)} pages from {config_path}")
    return site


def _check_routes(site: SiteConfig) -> None:
    """Reject served routes that clash with each other or with built-in routes.

    ``GET`` routes also answer ``HEAD``, so the two methods share one slot
    per path.
    """
    seen: dict[Route, Route] = {}
    for page in site.serving_pages():
        route = page.parsed_route
        slot = _route_slot(route)
        if slot in RESERVED_ROUTES:
            raise ConfigurationError(f"route '{route}' is reserved by the server")
        if slot in seen:
            other = seen[slot]
            if other == route:
                raise ConfigurationError(f"route '{route}' is declared by more than one page")
            raise ConfigurationError(f"route '{route}' clashes with '{other}': GET routes also answer HEAD")
        seen[slot] = route


def _route_slot(route: Route) -> Route:
    if route.method == "HEAD":
        return Route("GET", route.path)
    return route


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ConfigurationError(f"{where}.{key} must be a string")
    return value


def _optional_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigurationError(f"{where}.{key} must be a string")
    return value


def _optional_bool(data: dict[str, Any], key: str, where: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{where}.{key} must be a boolean")
    return value
