"""JsonSite - a small website served entirely from a JSON site description."""

__version__ = "0.3.0"
