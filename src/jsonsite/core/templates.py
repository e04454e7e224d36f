"""Template assembly.

Builds one executable Jinja2 template per served route at startup.

Every route template starts from the same master set (layouts, header,
footer, error pages, component fragments) and adds its own ``main.html``
fragment: either the page's static template file, or a fixed block
template that dispatches each content block to its registered fragment.
Each route is compiled in its own ``Environment.overlay()`` so no route
can see another route's ``main.html``.

Template directory layout:
    templates/
    ├── base_layout.html        # Default layout, includes header/main/footer
    ├── header.html
    ├── footer.html
    ├── errors/
    │   ├── error_404.html
    │   └── error_500.html
    ├── components/
    │   └── <fragment>.html     # One per registered block type
    └── pages/
        └── <page>.html         # Static page templates
"""

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
)

from jsonsite.core.components import component_template, registered_fragments
from jsonsite.core.site import DEFAULT_LAYOUT, Page, SiteConfig
from jsonsite.core.types import INTERNAL_ERROR_KEY, NOT_FOUND_KEY, RouteKey
from jsonsite.errors import AssemblyError, ConfigurationError

logger = logging.getLogger(__name__)

MAIN_FRAGMENT = "main.html"

SHARED_TEMPLATES = (
    f"{DEFAULT_LAYOUT}.html",
    "header.html",
    "footer.html",
    "errors/error_404.html",
    "errors/error_500.html",
)

ERROR_FRAGMENTS: Mapping[RouteKey, str] = MappingProxyType(
    {
        NOT_FOUND_KEY: "errors/error_404.html",
        INTERNAL_ERROR_KEY: "errors/error_500.html",
    }
)

BLOCKS_MAIN_TEMPLATE = """\
<main class="container">
  <h1>{{ page.title }}</h1>
  {% for block in page.custom_content %}
  {% set fragment = component_template(block.type) %}
  {% if fragment %}
  {% include fragment %}
  {% else %}
  <article class="unsupported-component">
    <header><strong>Unsupported Component</strong></header>
    <p>Error: The component type '{{ block.type }}' is not supported.</p>
  </article>
  {% endif %}
  {% endfor %}
</main>
"""


class TemplateCache(Mapping[RouteKey, Template]):
    """Immutable mapping from route key to assembled template.

    Built once by TemplateAssembler and read concurrently by all request
    handlers; it exposes no mutating operations.
    """

    __slots__ = ("_templates",)

    def __init__(self, templates: Mapping[RouteKey, Template]) -> None:
        self._templates = MappingProxyType(dict(templates))

    def __getitem__(self, key: RouteKey) -> Template:
        return self._templates[key]

    def __iter__(self) -> Iterator[RouteKey]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def page_keys(self) -> list[RouteKey]:
        """Route keys of page templates, excluding the reserved error entries."""
        return [key for key in self._templates if key not in ERROR_FRAGMENTS]


class TemplateAssembler:
    """Assembles the per-route template cache from a templates directory."""

    def __init__(self, templates_dir: Path) -> None:
        """Initialize assembler.

        Args:
            templates_dir: Directory holding layouts, partials, error pages,
                           component fragments and static page templates
        """
        self._templates_dir = templates_dir
        self._loader = FileSystemLoader(templates_dir)
        self._env = Environment(
            loader=self._loader,
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        self._env.globals["component_template"] = component_template

    def assemble(self, site: SiteConfig) -> TemplateCache:
        """Build the template cache for every served page plus the error pages.

        Args:
            site: Validated site configuration

        Returns:
            TemplateCache with one entry per served page and two error entries

        Raises:
            AssemblyError: If any shared or page template fails to load or parse
            ConfigurationError: If a served page has no renderable content
        """
        logger.info(f"Caching templates from {self._templates_dir}")
        self._parse_master()

        templates: dict[RouteKey, Template] = {}
        for page in site.serving_pages():
            templates[page.route_key] = self._build_page(page)
            logger.info(f"Template cached for route: {page.route_key}")

        for key, fragment in ERROR_FRAGMENTS.items():
            templates[key] = self._build(key, self._read_source(fragment, key), fragment)
            logger.info(f"Template cached for: {key}")

        return TemplateCache(templates)

    def _parse_master(self) -> None:
        """Parse every shared template once so broken files fail startup."""
        for name in (*SHARED_TEMPLATES, *registered_fragments()):
            try:
                self._env.get_template(name)
            except TemplateNotFound as e:
                raise AssemblyError("shared template not found", file=name) from e
            except TemplateSyntaxError as e:
                raise AssemblyError(
                    f"error parsing shared template: {e.message} (line {e.lineno})",
                    file=name,
                ) from e

    def _build_page(self, page: Page) -> Template:
        key = page.route_key
        if page.uses_blocks:
            return self._build(key, BLOCKS_MAIN_TEMPLATE, "custom content", layout=page.layout)
        if page.template:
            source = self._read_source(page.template, key)
            return self._build(key, source, page.template, layout=page.layout)
        raise ConfigurationError(
            f"page '{page.route}' declares neither 'template' nor 'custom_content'",
        )

    def _read_source(self, name: str, key: RouteKey) -> str:
        try:
            source, _, _ = self._loader.get_source(self._env, name)
        except TemplateNotFound as e:
            raise AssemblyError("template not found", route=key, file=name) from e
        return source

    def _build(
        self,
        key: RouteKey,
        main_source: str,
        main_name: str,
        *,
        layout: str = DEFAULT_LAYOUT,
    ) -> Template:
        """Compile a layout in an overlay environment with its own main fragment.

        Args:
            key: Route key being built (for error messages)
            main_source: Template source for the main fragment
            main_name: Where main_source came from (for error messages)
            layout: Layout name without extension

        Returns:
            Compiled layout template bound to the overlay environment
        """
        env = self._env.overlay(
            loader=ChoiceLoader([DictLoader({MAIN_FRAGMENT: main_source}), self._loader]),
        )
        layout_name = f"{layout}.html"
        try:
            env.get_template(MAIN_FRAGMENT)
            return env.get_template(layout_name)
        except TemplateNotFound as e:
            raise AssemblyError("layout not found", route=key, file=layout_name) from e
        except TemplateSyntaxError as e:
            file = main_name if e.name == MAIN_FRAGMENT else e.name
            raise AssemblyError(
                f"error parsing template: {e.message} (line {e.lineno})",
                route=key,
                file=file,
            ) from e
