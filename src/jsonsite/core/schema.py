"""JSON Schema validation of the site description.

The schema can come from a remote URL, a local file, or the copy bundled
with the package. A local schema path that does not exist is tolerated:
validation is skipped with a warning and decoding still checks types.
"""

import json
import logging
from importlib.resources import files
from pathlib import Path
from typing import Any

import httpx
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from jsonsite.errors import ConfigurationError

logger = logging.getLogger(__name__)

SchemaSource = str | Path | None

SCHEMA_FETCH_TIMEOUT = 10.0


def load_schema(source: SchemaSource) -> dict[str, Any] | None:
    """Load a JSON Schema document.

    Args:
        source: URL, filesystem path, or None for the bundled schema

    Returns:
        Parsed schema, or None when a local schema file is missing

    Raises:
        ConfigurationError: If the schema cannot be fetched or parsed
    """
    if source is None:
        bundled = files("jsonsite").joinpath("schema", "config.schema.json")
        return json.loads(bundled.read_text(encoding="utf-8"))

    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return _fetch_remote_schema(source)

    path = Path(source)
    if not path.exists():
        logger.warning(f"Local JSON schema file not found at '{path}'. Skipping validation.")
        return None

    logger.info(f"Loading local JSON schema from: {path.resolve()}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"cannot load JSON schema {path}: {e}") from e


def _fetch_remote_schema(url: str) -> dict[str, Any]:
    logger.info(f"Attempting to load remote JSON schema from: {url}")
    try:
        response = httpx.get(url, timeout=SCHEMA_FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPError as e:
        raise ConfigurationError(f"cannot fetch JSON schema {url}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"JSON schema at {url} is not valid JSON: {e}") from e


def validate_document(document: object, source: SchemaSource = None) -> None:
    """Validate a site description against its JSON Schema.

    Args:
        document: Parsed JSON site description
        source: Schema location, see load_schema()

    Raises:
        ConfigurationError: If the document violates the schema, listing every error
    """
    schema = load_schema(source)
    if schema is None:
        return

    validator_cls = validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as e:
        raise ConfigurationError(f"JSON schema is itself invalid: {e.message}") from e

    validator = validator_cls(schema)
    errors = sorted(validator.iter_errors(document), key=lambda err: err.json_path)
    if errors:
        lines = ["Configuration file is invalid. Please fix the following errors:"]
        lines.extend(f"- {err.json_path}: {err.message}" for err in errors)
        raise ConfigurationError("\n".join(lines))

    logger.info("Configuration file validated successfully against schema.")
