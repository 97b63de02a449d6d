"""npx skills operations via subprocess."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path  # noqa: TC003 - used at runtime for cwd
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger()

# Skill bundle sources are GitHub-style owner/repo identifiers
_SOURCE_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*/[A-Za-z0-9][A-Za-z0-9._-]*$")

# Fetching a bundle clones a repository, so allow plenty of time
DEFAULT_TIMEOUT = 600

DEFAULT_AGENT = "claude-code"


class NpxError(Exception):
    """Raised when an npx operation fails."""

    def __init__(self, message: str, returncode: int, output: str) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class NpxTimeoutError(NpxError):
    """Raised when an npx operation times out."""

    def __init__(self, message: str, timeout: float) -> None:
        super().__init__(
            message, returncode=-1, output=f"Operation timed out after {timeout}s"
        )
        self.timeout = timeout


class NpxNotFoundError(NpxError):
    """Raised when npx is not installed."""

    def __init__(self) -> None:
        super().__init__(
            "npx not found. Install Node.js: https://nodejs.org/",
            returncode=-1,
            output="npx command not found",
        )


def _run_npx(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> subprocess.CompletedProcess[str]:
    """Run an npx command and return the result.

    Args:
        args: npx arguments (without 'npx' prefix).
        cwd: Working directory for the command.
        timeout: Maximum time in seconds to wait for the command.

    Returns:
        CompletedProcess with combined output in stdout.

    Raises:
        NpxError: If the command exits non-zero or cannot be started.
        NpxTimeoutError: If the command times out.
        NpxNotFoundError: If npx is not installed.
    """
    cmd = ["npx", *args]
    logger.debug("npx_command", cmd=cmd, cwd=str(cwd) if cwd else None)

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
        raise NpxNotFoundError() from e
    except subprocess.TimeoutExpired as e:
        raise NpxTimeoutError(
            f"npx command timed out: {' '.join(cmd)}",
            timeout=timeout,
        ) from e
    except OSError as e:
        raise NpxError(f"Failed to run npx: {e}", returncode=-1, output="") from e

    if result.returncode != 0:
        output = (result.stdout or "").strip()
        raise NpxError(
            output or f"npx command failed: {' '.join(cmd)}",
            returncode=result.returncode,
            output=output,
        )

    return result


def skills_add_command(source: str, *, agent: str = DEFAULT_AGENT) -> list[str]:
    """Build the argv that adds every skill of a bundle for an agent.

    Args:
        source: Skill bundle identifier (owner/repo).
        agent: Agent target understood by the skills CLI.

    Returns:
        Command argument list, including the leading 'npx'.

    Raises:
        ValueError: If the source is not an owner/repo identifier.
    """
    if not _SOURCE_PATTERN.match(source):
        raise ValueError(
            f"Invalid skill source: {source}. Expected format: owner/repo"
        )
    return ["npx", "-y", "skills", "add", source, "--agent", agent, "--skill", "*", "-y"]


def skills_add(
    source: str,
    *,
    agent: str = DEFAULT_AGENT,
    cwd: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> None:
    """Install every skill from a bundle, non-interactively.

    Args:
        source: Skill bundle identifier (owner/repo).
        agent: Agent target understood by the skills CLI.
        cwd: Project directory to install into.
        timeout: Maximum time in seconds to wait.

    Raises:
        NpxError: If installation fails.
        ValueError: If the source is malformed.
    """
    cmd = skills_add_command(source, agent=agent)
    logger.info("skills_add", source=source, agent=agent)
    _run_npx(cmd[1:], cwd=cwd, timeout=timeout)
