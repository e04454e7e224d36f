"""Bundled default assets.

Locates the templates shipped inside the jsonsite package. Sites with
their own look pass a templates directory instead.
"""

from importlib.resources import files
from pathlib import Path


def get_templates_dir() -> Path:
    """Return path to the bundled templates.

    Returns:
        Path to the templates directory containing layouts and fragments.

    Raises:
        FileNotFoundError: If templates are not bundled.
    """
    templates = files("jsonsite").joinpath("templates")
    if not templates.is_dir():
        msg = "Bundled templates not found. Reinstall the jsonsite package."
        raise FileNotFoundError(msg)
    return Path(str(templates))
