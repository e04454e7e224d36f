"""Core type definitions."""

from typing import NewType

# Template cache lookup key: a page route string ("GET /about") or a reserved error key
RouteKey = NewType("RouteKey", str)

NOT_FOUND_KEY = RouteKey("error_404")
INTERNAL_ERROR_KEY = RouteKey("error_500")
