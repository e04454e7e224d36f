"""Application keys for type-safe app configuration access."""

from pathlib import Path

from aiohttp import web

from jsonsite.core.site import Page, SiteConfig
from jsonsite.core.templates import TemplateCache

site_key = web.AppKey("site", SiteConfig)
templates_key = web.AppKey("templates", TemplateCache)
menu_key = web.AppKey("menu", tuple[Page, ...])
favicon_key = web.AppKey("favicon", Path)
