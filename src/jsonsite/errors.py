"""JsonSite exception hierarchy.

Startup errors (configuration and template assembly) abort the process
before the listener binds. Request-time errors never escape a handler.
"""


class JsonSiteError(Exception):
    """Base for all jsonsite-specific errors."""


class ConfigurationError(JsonSiteError):
    """Raised when the site description or process configuration is invalid.

    Covers malformed route strings, duplicate routes, schema violations
    and invalid environment values.
    """


class AssemblyError(JsonSiteError):
    """Raised when a template set cannot be built at startup."""

    def __init__(self, message: str, *, route: str | None = None, file: str | None = None) -> None:
        self.route = route
        self.file = file
        where = []
        if route is not None:
            where.append(f"route '{route}'")
        if file is not None:
            where.append(f"file '{file}'")
        if where:
            message = f"{message} ({', '.join(where)})"
        super().__init__(message)


class RenderExecutionError(JsonSiteError):
    """Raised when a cached template fails while rendering a request."""

    def __init__(self, route: str, cause: Exception) -> None:
        self.route = route
        self.cause = cause
        super().__init__(f"template execution failed for {route}: {cause}")
