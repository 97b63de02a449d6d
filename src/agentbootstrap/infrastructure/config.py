"""Global configuration persistence.

Handles reading and writing config.json with schema versioning
and atomic write operations.
"""

from __future__ import annotations

import json
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import structlog

from agentbootstrap.infrastructure.fetchers import DEFAULT_TEMPLATE_BASE_URL
from agentbootstrap.infrastructure.npx import DEFAULT_AGENT
from agentbootstrap.infrastructure.paths import PathResolver, default_resolver

__all__ = [
    "DEFAULT_PLUGINS",
    "DEFAULT_SKILL_SOURCES",
    "BootstrapConfig",
    "ConfigError",
    "load_config",
    "save_config",
]

logger = structlog.get_logger()

# Current schema version - increment when making breaking changes
# v1: template_base_url, plugins, skill_sources, skills_agent
SCHEMA_VERSION = "1"

# Maximum config file size (1MB)
MAX_CONFIG_SIZE = 1 * 1024 * 1024

DEFAULT_PLUGINS: tuple[str, ...] = (
    "superpowers@claude-plugins-official",
    "figma@claude-plugins-official",
    "claude-md-management@claude-plugins-official",
    "vercel@claude-plugins-official",
    "stripe@claude-plugins-official",
    "playground@claude-plugins-official",
    "posthog@claude-plugins-official",
    "supabase@claude-plugins-official",
    "claude-code-setup@claude-plugins-official",
    "product-management@knowledge-work-plugins",
    "data@knowledge-work-plugins",
)

DEFAULT_SKILL_SOURCES: tuple[str, ...] = (
    "supabase/agent-skills",
    "vercel-labs/agent-skills",
)


class ConfigError(Exception):
    """Raised when configuration operations fail."""


@dataclass(frozen=True)
class BootstrapConfig:
    """Immutable configuration for agentbootstrap.

    Attributes:
        template_base_url: Base URL remote templates are downloaded from.
        plugins: Plugins to register, in ``name@marketplace`` form.
        skill_sources: Skill bundles (owner/repo) fetched with npx.
        skills_agent: Agent target passed to the skills CLI.
    """

    template_base_url: str = DEFAULT_TEMPLATE_BASE_URL
    plugins: tuple[str, ...] = field(default=DEFAULT_PLUGINS)
    skill_sources: tuple[str, ...] = field(default=DEFAULT_SKILL_SOURCES)
    skills_agent: str = DEFAULT_AGENT


def save_config(config: BootstrapConfig, resolver: PathResolver | None = None) -> None:
    """Save configuration to a JSON file.

    Uses atomic write (temp file + rename) to prevent corruption.

    Args:
        config: Configuration to save.
        resolver: Path resolver (defaults to default_resolver).

    Raises:
        ConfigError: If saving fails.
    """
    if resolver is None:
        resolver = default_resolver

    path = resolver.global_config()
    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as tmp:
            json.dump(data, tmp, indent=2)
            tmp_path = Path(tmp.name)

        tmp_path.replace(path)

        logger.debug("config_saved", path=str(path))

    except OSError as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise ConfigError(f"Failed to save config: {e}") from e


def load_config(resolver: PathResolver | None = None) -> BootstrapConfig:
    """Load configuration from a JSON file.

    Gracefully handles missing files, invalid JSON, and oversized files.
    Returns default config if file doesn't exist or is invalid.

    Args:
        resolver: Path resolver (defaults to default_resolver).

    Returns:
        BootstrapConfig instance (uses defaults if file missing or invalid).
    """
    if resolver is None:
        resolver = default_resolver

    path = resolver.global_config()

    if not path.exists():
        logger.debug("config_not_found", path=str(path))
        return BootstrapConfig()

    try:
        file_size = path.stat().st_size
        if file_size > MAX_CONFIG_SIZE:
            logger.warning(
                "config_too_large",
                path=str(path),
                size=file_size,
                max_size=MAX_CONFIG_SIZE,
            )
            return BootstrapConfig()

        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise TypeError("config root must be an object")

        version = data.get("version")
        if version and version != SCHEMA_VERSION:
            logger.warning(
                "config_version_mismatch",
                path=str(path),
                expected=SCHEMA_VERSION,
                found=version,
            )

        return _dict_to_config(data)

    except json.JSONDecodeError as e:
        logger.warning("config_invalid_json", path=str(path), error=str(e))
        return BootstrapConfig()
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("config_parse_error", path=str(path), error=str(e))
        return BootstrapConfig()
    except OSError as e:
        logger.warning("config_read_error", path=str(path), error=str(e))
        return BootstrapConfig()


def _config_to_dict(config: BootstrapConfig) -> dict[str, Any]:
    data = asdict(config)
    data["plugins"] = list(config.plugins)
    data["skill_sources"] = list(config.skill_sources)
    data["version"] = SCHEMA_VERSION
    return data


def _string_tuple(data: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Read an optional list of strings.

    Raises:
        TypeError: If the value is present but not a list of strings.
    """
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"'{key}' must be a list of strings")
    return tuple(value)


def _dict_to_config(data: dict[str, Any]) -> BootstrapConfig:
    """Convert dict to BootstrapConfig.

    Raises:
        TypeError: If a field has an invalid type.
    """
    base_url = data.get("template_base_url", DEFAULT_TEMPLATE_BASE_URL)
    agent = data.get("skills_agent", DEFAULT_AGENT)
    if not isinstance(base_url, str) or not isinstance(agent, str):
        raise TypeError("'template_base_url' and 'skills_agent' must be strings")

    return BootstrapConfig(
        template_base_url=base_url,
        plugins=_string_tuple(data, "plugins", DEFAULT_PLUGINS),
        skill_sources=_string_tuple(data, "skill_sources", DEFAULT_SKILL_SOURCES),
        skills_agent=agent,
    )
