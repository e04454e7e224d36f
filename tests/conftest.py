"""Shared test fixtures."""

import json
import shutil
from pathlib import Path
from typing import Any

import pytest
from jsonsite.assets import get_templates_dir
from jsonsite.core.site import SiteConfig
from jsonsite.core.templates import TemplateAssembler, TemplateCache


def make_site_data(pages: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Build a site description document with sensible defaults."""
    return {
        "title": "Test Site",
        "baseURL": "http://localhost:8888",
        "language": "en",
        "description": "A site for tests.",
        "author": {"name": "Tester", "email": "tester@example.com"},
        "social": {"github": "https://github.com/example"},
        "footer": "Test footer",
        "pages": pages if pages is not None else default_pages(),
    }


def default_pages() -> list[dict[str, Any]]:
    return [
        {
            "route": "GET /",
            "title": "Home",
            "create_handler": True,
            "showInMenu": True,
            "menuOrder": 1,
            "content": "Welcome home.",
            "template": "pages/home.html",
        },
        {
            "route": "GET /about",
            "title": "About",
            "create_handler": True,
            "showInMenu": True,
            "menuOrder": 2,
            "content": "About us.",
            "template": "pages/page.html",
        },
        {
            "route": "GET /faq",
            "title": "FAQ",
            "create_handler": True,
            "showInMenu": True,
            "menuOrder": 3,
            "custom_content": [
                {
                    "type": "AccordionCard",
                    "keyValues": {"title": "First question", "content": "First answer"},
                },
                {"type": "Foo", "keyValues": {}},
            ],
        },
        {
            "route": "GET /draft",
            "title": "Draft",
            "draft": True,
            "create_handler": True,
            "showInMenu": True,
            "template": "pages/page.html",
        },
        {
            "route": "GET /hidden",
            "title": "Hidden",
            "create_handler": False,
            "showInMenu": False,
            "template": "pages/page.html",
        },
    ]


def write_site(path: Path, data: dict[str, Any]) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def site_data() -> dict[str, Any]:
    return make_site_data()


@pytest.fixture
def site(site_data: dict[str, Any]) -> SiteConfig:
    return SiteConfig.from_dict(site_data)


@pytest.fixture
def site_file(tmp_path: Path, site_data: dict[str, Any]) -> Path:
    """Write the default site description to tmp_path/config.json."""
    return write_site(tmp_path / "config.json", site_data)


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Copy the bundled templates into tmp_path so tests can edit them."""
    target = tmp_path / "templates"
    shutil.copytree(get_templates_dir(), target)
    return target


@pytest.fixture
def templates(site: SiteConfig) -> TemplateCache:
    """Template cache assembled from the bundled templates."""
    return TemplateAssembler(get_templates_dir()).assemble(site)
