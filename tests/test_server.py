"""Tests for the aiohttp application and built-in routes."""

from pathlib import Path
from unittest.mock import patch

import pytest
from jsonsite import __version__
from jsonsite.config import Config
from jsonsite.core.site import SiteConfig
from jsonsite.core.templates import TemplateCache
from jsonsite.errors import AssemblyError, ConfigurationError
from jsonsite.server import assemble_site, create_app, run_server

from tests.conftest import make_site_data, write_site


def _config(site_file: Path, templates_dir: Path | None = None) -> Config:
    return Config.load({}).with_overrides(config_file=site_file, templates_dir=templates_dir)


class TestAssembleSite:
    """Tests for assemble_site()."""

    def test__valid_site__returns_site_and_cache(self, site_file: Path) -> None:
        """The site and its template cache are built together."""
        site, templates = assemble_site(_config(site_file))

        assert site.title == "Test Site"
        assert sorted(templates.page_keys()) == ["GET /", "GET /about", "GET /faq"]

    def test__custom_templates_dir__is_used(self, site_file: Path, templates_dir: Path) -> None:
        """Templates are read from the configured directory."""
        (templates_dir / "pages" / "page.html").write_text("<p>custom about</p>")

        site, templates = assemble_site(_config(site_file, templates_dir))

        about = next(page for page in site.pages if page.route == "GET /about")
        html = templates[about.route_key].render(
            site=site, page=about, theme="light", menu_pages=(), error=None
        )
        assert "custom about" in html

    def test__missing_site_file__raises(self, tmp_path: Path) -> None:
        """An unreadable site description is a configuration error."""
        with pytest.raises(ConfigurationError, match="cannot read"):
            assemble_site(_config(tmp_path / "missing.json"))


class TestRunServer:
    """Tests for run_server()."""

    def test__valid_site__starts_serving(self, site_file: Path) -> None:
        """The app is handed to aiohttp with the configured address."""
        config = Config.load({"PORT": "9123"}).with_overrides(config_file=site_file)

        with patch("jsonsite.server.web.run_app") as run_app:
            run_server(config)

        run_app.assert_called_once()
        assert run_app.call_args.kwargs["port"] == 9123
        assert run_app.call_args.kwargs["host"] == "0.0.0.0"

    def test__assembly_failure__never_binds(self, tmp_path: Path) -> None:
        """A broken template stops startup before the server is bound."""
        page = {"route": "GET /x", "title": "X", "create_handler": True, "template": "pages/nope.html"}
        site_file = write_site(tmp_path / "config.json", make_site_data([page]))

        with patch("jsonsite.server.web.run_app") as run_app:
            with pytest.raises(AssemblyError):
                run_server(_config(site_file))

        run_app.assert_not_called()


class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test__health__reports_status(
        self,
        site: SiteConfig,
        templates: TemplateCache,
        aiohttp_client,
    ) -> None:
        """Health returns status, version and the served route count."""
        client = await aiohttp_client(create_app(site, templates))

        response = await client.get("/health")

        assert response.status == 200
        assert await response.json() == {"status": "ok", "version": __version__, "routes": 3}


class TestFavicon:
    """Tests for GET /favicon.ico."""

    @pytest.mark.asyncio
    async def test__existing_file__is_served(
        self,
        tmp_path: Path,
        site: SiteConfig,
        templates: TemplateCache,
        aiohttp_client,
    ) -> None:
        """The favicon file is returned as-is."""
        favicon = tmp_path / "favicon.ico"
        favicon.write_bytes(b"\x00\x00\x01\x00icon")
        client = await aiohttp_client(create_app(site, templates, favicon=favicon))

        response = await client.get("/favicon.ico")

        assert response.status == 200
        assert await response.read() == b"\x00\x00\x01\x00icon"

    @pytest.mark.asyncio
    async def test__missing_file__returns_not_found(
        self,
        tmp_path: Path,
        site: SiteConfig,
        templates: TemplateCache,
        aiohttp_client,
    ) -> None:
        """A missing favicon is a negotiated 404."""
        client = await aiohttp_client(create_app(site, templates, favicon=tmp_path / "none.ico"))

        response = await client.get("/favicon.ico", headers={"Accept": "application/json"})

        assert response.status == 404
        assert await response.text() == '{"error":"not found"}'


class TestSetTheme:
    """Tests for /set-theme."""

    @pytest.mark.asyncio
    async def test__no_cookie__sets_dark_and_redirects_to_referer(
        self,
        site: SiteConfig,
        templates: TemplateCache,
        aiohttp_client,
    ) -> None:
        """The first toggle switches to dark and returns to the referring page."""
        client = await aiohttp_client(create_app(site, templates))

        response = await client.post(
            "/set-theme",
            headers={"Referer": "/about"},
            allow_redirects=False,
        )

        assert response.status == 303
        assert response.headers["Location"] == "/about"
        cookie = response.cookies["theme"]
        assert cookie.value == "dark"
        assert cookie["path"] == "/"
        assert cookie["max-age"] == "31536000"
        assert cookie["samesite"] == "Lax"

    @pytest.mark.asyncio
    async def test__dark_cookie__toggles_to_light(
        self,
        site: SiteConfig,
        templates: TemplateCache,
        aiohttp_client,
    ) -> None:
        """A dark theme toggles back to light."""
        client = await aiohttp_client(create_app(site, templates))

        response = await client.get(
            "/set-theme",
            headers={"Cookie": "theme=dark"},
            allow_redirects=False,
        )

        assert response.status == 303
        assert response.cookies["theme"].value == "light"

    @pytest.mark.asyncio
    async def test__invalid_cookie__is_treated_as_light(
        self,
        site: SiteConfig,
        templates: TemplateCache,
        aiohttp_client,
    ) -> None:
        """Unknown cookie values count as light, so toggling gives dark."""
        client = await aiohttp_client(create_app(site, templates))

        response = await client.get(
            "/set-theme",
            headers={"Cookie": "theme=blue"},
            allow_redirects=False,
        )

        assert response.cookies["theme"].value == "dark"

    @pytest.mark.asyncio
    async def test__no_referer__redirects_to_root(
        self,
        site: SiteConfig,
        templates: TemplateCache,
        aiohttp_client,
    ) -> None:
        """Without a Referer the client is sent home."""
        client = await aiohttp_client(create_app(site, templates))

        response = await client.post("/set-theme", allow_redirects=False)

        assert response.headers["Location"] == "/"
