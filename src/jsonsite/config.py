"""Process configuration for JsonSite.

Values come from the environment and may be overridden on the command
line. The site description itself is loaded separately, see
``jsonsite.core.site``.

Environment variables:
    PORT                 listening port, 1..65535 (default 8888)
    LOG_FILE             stdout, stderr, DISCARD or a file name (default stderr)
    JSONSITE_CONFIG      site description file (default config.json)
    JSONSITE_SCHEMA      JSON Schema URL or path (default: bundled schema)
    JSONSITE_TEMPLATES   templates directory (default: bundled templates)
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from jsonsite.errors import ConfigurationError

DEFAULT_PORT = 8888
DEFAULT_LOG_SINK = "stderr"
MIN_LOG_SINK_LENGTH = 5


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT


@dataclass(frozen=True)
class SiteFilesConfig:
    """Locations of the site description and its supporting files."""

    config_file: Path = field(default_factory=lambda: Path("config.json"))
    schema: str | None = None
    templates_dir: Path | None = None
    favicon: Path = field(default_factory=lambda: Path("favicon.ico"))


@dataclass(frozen=True)
class LogConfig:
    """Log sink configuration."""

    sink: str = DEFAULT_LOG_SINK


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    server: ServerConfig
    files: SiteFilesConfig
    log: LogConfig

    @classmethod
    def load(cls, environ: Mapping[str, str] | None = None) -> "Config":
        """Load configuration from the environment.

        Args:
            environ: Environment mapping, defaults to os.environ

        Returns:
            Config instance with defaults for unset variables

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ

        server = ServerConfig(port=cls._parse_port(env.get("PORT")))

        files = SiteFilesConfig()
        if env.get("JSONSITE_CONFIG"):
            files = replace(files, config_file=Path(env["JSONSITE_CONFIG"]))
        if env.get("JSONSITE_SCHEMA"):
            files = replace(files, schema=env["JSONSITE_SCHEMA"])
        if env.get("JSONSITE_TEMPLATES"):
            files = replace(files, templates_dir=Path(env["JSONSITE_TEMPLATES"]))

        log = LogConfig(sink=cls._parse_log_sink(env.get("LOG_FILE")))

        return cls(server=server, files=files, log=log)

    @classmethod
    def _parse_port(cls, value: str | int | None) -> int:
        """Parse and range-check a listening port.

        Args:
            value: Raw port value, None for the default

        Returns:
            Port number between 1 and 65535
        """
        if value is None:
            return DEFAULT_PORT
        try:
            port = int(value)
        except ValueError as e:
            raise ConfigurationError(f"PORT should contain a valid integer, got '{value}'") from e
        if port < 1 or port > 65535:
            raise ConfigurationError(f"PORT should contain an integer between 1 and 65535, got {port}")
        return port

    @classmethod
    def _parse_log_sink(cls, value: str | None) -> str:
        if value is None:
            return DEFAULT_LOG_SINK
        if len(value) < MIN_LOG_SINK_LENGTH:
            raise ConfigurationError(
                f"LOG_FILE should contain at least {MIN_LOG_SINK_LENGTH} characters, got '{value}'",
            )
        return value

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        config_file: Path | None = None,
        schema: str | None = None,
        templates_dir: Path | None = None,
        favicon: Path | None = None,
        log_sink: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config; the original
        Config is not modified.

        Returns:
            New Config instance with overrides applied

        Raises:
            ConfigurationError: If an override is out of range
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=self._parse_port(port) if port is not None else self.server.port,
            )

        files = self.files
        if config_file is not None:
            files = replace(files, config_file=config_file)
        if schema is not None:
            files = replace(files, schema=schema)
        if templates_dir is not None:
            files = replace(files, templates_dir=templates_dir)
        if favicon is not None:
            files = replace(files, favicon=favicon)

        log = self.log
        if log_sink is not None:
            log = replace(self.log, sink=self._parse_log_sink(log_sink))

        return replace(self, server=server, files=files, log=log)
