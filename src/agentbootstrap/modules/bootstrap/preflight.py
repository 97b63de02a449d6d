"""Preflight checks run before anything touches the target directory."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 - used at runtime for is_dir
from typing import TYPE_CHECKING

import structlog

from agentbootstrap.modules.bootstrap.errors import (
    MissingDependencyError,
    OperatorAbortError,
)
from agentbootstrap.modules.bootstrap.reporting import NullReporter, ProgressReporter

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

__all__ = [
    "CLAUDE",
    "GCLOUD",
    "GEMINI_API_KEY",
    "NPX",
    "EnvRequirement",
    "PreflightResult",
    "ToolRequirement",
    "run_preflight",
]

logger = structlog.get_logger()

CONFIRM_ANSWERS = ("y", "Y")


@dataclass(frozen=True)
class ToolRequirement:
    """An executable the run depends on, with where to get it."""

    name: str
    hint: str


@dataclass(frozen=True)
class EnvRequirement:
    """An environment variable the generated configuration expects."""

    name: str
    purpose: str
    hint: str


CLAUDE = ToolRequirement(
    "claude", "https://docs.anthropic.com/en/docs/claude-code/overview"
)
GCLOUD = ToolRequirement(
    "gcloud",
    "Install it for GCP MCP server support: https://cloud.google.com/sdk/docs/install",
)
NPX = ToolRequirement(
    "npx", "Install Node.js to get agent skills: https://nodejs.org/"
)
GEMINI_API_KEY = EnvRequirement(
    "GEMINI_API_KEY",
    "the Gemini MCP server",
    "Get one at https://aistudio.google.com/apikey, "
    "then: export GEMINI_API_KEY=your-key-here",
)


@dataclass
class PreflightResult:
    """What preflight found.

    Attributes:
        tools: Resolved executable paths, by tool name.
        missing_optional: Optional tools that were not found.
        missing_env: Optional environment variables that are unset.
        overwrite_confirmed: Existing targets the operator agreed to overwrite.
    """

    tools: dict[str, str] = field(default_factory=dict)
    missing_optional: list[str] = field(default_factory=list)
    missing_env: list[str] = field(default_factory=list)
    overwrite_confirmed: list[Path] = field(default_factory=list)


def run_preflight(
    required_tools: Sequence[ToolRequirement],
    optional_tools: Sequence[ToolRequirement],
    overwrite_targets: Sequence[Path],
    *,
    optional_env: Sequence[EnvRequirement] = (),
    which: Callable[[str], str | None] = shutil.which,
    environ: Mapping[str, str] | None = None,
    confirm: Callable[[str], str] | None = None,
    assume_yes: bool = False,
    reporter: ProgressReporter | None = None,
) -> PreflightResult:
    """Check tools and ask before overwriting existing configuration.

    Required tools are checked first so a missing one stops the run
    before the operator is asked anything.

    Args:
        required_tools: Tools whose absence is fatal.
        optional_tools: Tools whose absence only warrants a warning.
        overwrite_targets: Directories that trigger a confirmation prompt
            when they already exist.
        optional_env: Environment variables to warn about when unset.
        which: Executable lookup (defaults to shutil.which).
        environ: Environment mapping (defaults to os.environ).
        confirm: Prompt callable returning the operator's raw answer.
            Without one, existing targets are treated as declined.
        assume_yes: Skip the prompt and proceed.
        reporter: Progress reporter.

    Returns:
        PreflightResult describing the environment.

    Raises:
        MissingDependencyError: If a required tool is not found.
        OperatorAbortError: If the operator declines to overwrite.
    """
    reporter = reporter or NullReporter()
    environ = os.environ if environ is None else environ
    result = PreflightResult()

    for tool in required_tools:
        path = which(tool.name)
        if path is None:
            logger.info("preflight_missing_required", tool=tool.name)
            raise MissingDependencyError(tool.name, tool.hint)
        result.tools[tool.name] = path
        reporter.tool_found(tool.name, path)

    for tool in optional_tools:
        path = which(tool.name)
        if path is None:
            result.missing_optional.append(tool.name)
            reporter.warning(f"'{tool.name}' CLI not found.", tool.hint)
        else:
            result.tools[tool.name] = path

    for var in optional_env:
        if not environ.get(var.name):
            result.missing_env.append(var.name)
            reporter.warning(f"{var.name} not set (needed for {var.purpose}).", var.hint)

    for target in overwrite_targets:
        if not target.is_dir():
            continue

        reporter.warning(f"{target.name}/ directory already exists in this project.")
        if assume_yes:
            answer = "y"
        elif confirm is None:
            answer = ""
        else:
            answer = confirm("Overwrite? (y/N)").strip()

        if answer not in CONFIRM_ANSWERS:
            logger.info("preflight_overwrite_declined", target=str(target))
            raise OperatorAbortError("Aborted.")
        result.overwrite_confirmed.append(target)

    logger.debug(
        "preflight_complete",
        tools=sorted(result.tools),
        missing_optional=result.missing_optional,
    )
    return result
