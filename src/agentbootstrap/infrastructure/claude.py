"""Claude Code plugin operations via subprocess."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path  # noqa: TC003 - used at runtime for cwd

import structlog

__all__ = [
    "ALREADY_INSTALLED_MARKER",
    "ClaudeAlreadyInstalledError",
    "ClaudeError",
    "ClaudeNotFoundError",
    "ClaudeTimeoutError",
    "is_already_installed_message",
    "plugin_install",
    "plugin_install_command",
]

logger = structlog.get_logger()

# Wording printed by `claude plugin install` when the plugin is registered.
# There is no dedicated exit code for this case.
ALREADY_INSTALLED_MARKER = "already installed"

VALID_SCOPES = ("project", "user", "local")

# Plugin installs may clone a marketplace on first use
DEFAULT_TIMEOUT = 300

_PLUGIN_REF_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*@[A-Za-z0-9][A-Za-z0-9._-]*$")


class ClaudeError(Exception):
    """Raised when a Claude Code operation fails."""

    def __init__(self, message: str, returncode: int, output: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class ClaudeNotFoundError(ClaudeError):
    """Raised when Claude Code is not installed."""

    def __init__(self) -> None:
        super().__init__(
            "Claude Code not found. Install from: "
            "https://docs.anthropic.com/en/docs/claude-code/overview",
            returncode=-1,
        )


class ClaudeTimeoutError(ClaudeError):
    """Raised when a Claude Code operation times out."""

    def __init__(self, message: str, timeout: float) -> None:
        super().__init__(
            message, returncode=-1, output=f"Operation timed out after {timeout}s"
        )
        self.timeout = timeout


class ClaudeAlreadyInstalledError(ClaudeError):
    """Raised when the plugin is already registered for the requested scope."""


def is_already_installed_message(text: str) -> bool:
    """Check whether tool output reports an existing installation.

    Args:
        text: Combined stdout/stderr or an error message.

    Returns:
        True if the text carries the "already installed" wording.
    """
    return ALREADY_INSTALLED_MARKER in text.lower()


def plugin_install_command(plugin_ref: str, scope: str = "project") -> list[str]:
    """Build the argv for installing a plugin.

    Args:
        plugin_ref: Plugin reference in ``name@marketplace`` form.
        scope: Installation scope (project, user or local).

    Returns:
        Command argument list.

    Raises:
        ValueError: If the reference or scope is malformed.
    """
    if not _PLUGIN_REF_PATTERN.match(plugin_ref):
        raise ValueError(
            f"Invalid plugin reference: {plugin_ref}. Expected name@marketplace"
        )
    if scope not in VALID_SCOPES:
        raise ValueError(
            f"Invalid scope: {scope}. Expected one of: {', '.join(VALID_SCOPES)}"
        )
    return ["claude", "plugin", "install", plugin_ref, "--scope", scope]


def plugin_install(
    plugin_ref: str,
    *,
    scope: str = "project",
    cwd: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Register a plugin with Claude Code.

    Args:
        plugin_ref: Plugin reference in ``name@marketplace`` form.
        scope: Installation scope.
        cwd: Project directory (matters for project scope).
        timeout: Maximum time in seconds to wait.

    Returns:
        Combined command output.

    Raises:
        ClaudeNotFoundError: If Claude Code is not installed.
        ClaudeTimeoutError: If the command times out.
        ClaudeAlreadyInstalledError: If the plugin is already installed.
        ClaudeError: If the install fails for any other reason.
    """
    cmd = plugin_install_command(plugin_ref, scope)
    logger.info("plugin_install", plugin=plugin_ref, scope=scope)

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise ClaudeNotFoundError() from e
    except subprocess.TimeoutExpired as e:
        raise ClaudeTimeoutError(
            f"Plugin install timed out: {plugin_ref}", timeout=timeout
        ) from e
    except OSError as e:
        raise ClaudeError(f"Failed to run Claude Code: {e}", returncode=-1) from e

    output = (result.stdout or "").strip()

    if result.returncode != 0:
        if is_already_installed_message(output):
            raise ClaudeAlreadyInstalledError(
                output or f"{plugin_ref} already installed",
                returncode=result.returncode,
                output=output,
            )
        logger.debug(
            "plugin_install_failed",
            plugin=plugin_ref,
            returncode=result.returncode,
            output=output,
        )
        raise ClaudeError(
            output or f"claude plugin install failed for {plugin_ref}",
            returncode=result.returncode,
            output=output,
        )

    return output
