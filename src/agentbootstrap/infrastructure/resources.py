"""Package resource access for bundled templates.

Provides a unified API for accessing template files that works correctly
whether running from source or from an installed package.
"""

from __future__ import annotations

from importlib.resources import files
from pathlib import Path

__all__ = [
    "ResourceError",
    "get_project_templates_dir",
]


class ResourceError(Exception):
    """Raised when package resources cannot be accessed."""


def _get_templates_dir() -> Path:
    """Get the templates directory from package resources.

    Returns:
        Path to the templates directory.

    Raises:
        ResourceError: If the templates directory cannot be accessed.
    """
    try:
        templates_ref = files("agentbootstrap.templates")
        templates_path = Path(str(templates_ref))

        if not templates_path.exists():
            raise ResourceError(
                f"Templates directory not found at package location: {templates_path}"
            )

        return templates_path

    except ModuleNotFoundError as e:
        raise ResourceError(
            "Cannot access package templates. "
            "Ensure agentbootstrap is installed correctly."
        ) from e
    except TypeError as e:
        # files() returned something that can't be converted to Path
        raise ResourceError(f"Cannot resolve templates path: {e}") from e


def get_project_templates_dir() -> Path:
    """Get the project template tree copied by ``agentbootstrap init``.

    Returns:
        Path to the templates/project directory.

    Raises:
        ResourceError: If the directory cannot be accessed or doesn't exist.
    """
    project_dir = _get_templates_dir() / "project"

    if not project_dir.is_dir():
        raise ResourceError(f"Project templates directory not found: {project_dir}")

    return project_dir
