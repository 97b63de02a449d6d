"""Bootstrap CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from agentbootstrap.cli.context import CLIContext
from agentbootstrap.cli.formatters import (
    ConsoleReporter,
    console,
    print_error,
    print_info,
    print_next_steps,
    print_run_summary,
    print_success,
)
from agentbootstrap.infrastructure.gitignore import GitignoreError
from agentbootstrap.infrastructure.resources import ResourceError
from agentbootstrap.modules.bootstrap import (
    BootstrapService,
    MaterializationError,
    MissingDependencyError,
    OperatorAbortError,
)

__all__ = ["bootstrap", "init", "setup"]

BOOTSTRAP_NEXT_STEPS = [
    "Edit [cyan]CLAUDE.md[/cyan] with your project name, description, and architecture",
    "Edit/delete skills in [cyan].claude/skills/[/cyan] for your stack",
    "Edit [cyan].claude/agents/code-reviewer.md[/cyan] for your conventions",
    "Edit [cyan].claude/settings.json[/cyan] to remove plugins you don't need",
    "Add personal permission overrides to [cyan].claude/settings.local.json[/cyan]",
    "Set [cyan]GEMINI_API_KEY[/cyan] for the Gemini MCP server",
    "Run [cyan]gcloud auth login[/cyan] if you haven't already for the gcloud MCP server",
    "Run [cyan]npx skills list[/cyan] to see installed agent skills",
]

INIT_NEXT_STEPS = [
    "[cyan]CLAUDE.md[/cyan]: update project name, description, design and architecture rules",
    "[cyan].claude/skills/[/cyan]: update tokens and schemas, delete skills that don't apply",
    "[cyan].claude/agents/code-reviewer.md[/cyan]: update review rules for this project",
    "[cyan].claude/settings.json[/cyan]: remove plugins you don't need",
]

SETUP_NEXT_STEPS = [
    "cd into your project directory",
    "Run [cyan]agentbootstrap init[/cyan] or [cyan]agentbootstrap bootstrap[/cyan]",
    "Customize [cyan]CLAUDE.md[/cyan] and [cyan].claude/skills/[/cyan] for your project",
]

TargetOption = Annotated[
    Path | None,
    typer.Option(
        "--target",
        "-t",
        help="Project directory to configure (defaults to the current directory)",
        file_okay=False,
    ),
]

YesOption = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Overwrite an existing .claude/ without asking"),
]


def _confirm(question: str) -> str:
    return typer.prompt(question, default="", show_default=False)


def _service() -> BootstrapService:
    return BootstrapService(
        CLIContext.get().get_config(),
        confirm=_confirm,
        reporter=ConsoleReporter(),
    )


def _resolve_target(target: Path | None) -> Path:
    path = (target or Path.cwd()).resolve()
    if not path.is_dir():
        print_error(f"Target directory does not exist: {path}")
        raise typer.Exit(1)
    return path


def bootstrap(
    target: TargetOption = None,
    base_url: Annotated[
        str | None,
        typer.Option("--base-url", help="Download templates from this URL instead"),
    ] = None,
    yes: YesOption = False,
) -> None:
    """Download project configuration and install plugins and skills.

    Files you are expected to customize (CLAUDE.md, .mcp.json) are never
    overwritten. Plugins or skills that fail to install are reported with
    the command to retry them; they do not fail the run.

    \b
    Examples:
        agentbootstrap                               # Bootstrap the current directory
        agentbootstrap bootstrap -t ../my-app        # Bootstrap another directory
        agentbootstrap bootstrap -y                  # Don't ask before overwriting
    """
    path = _resolve_target(target)
    print_info(f"Setting up Claude Code configuration in: {path}")

    try:
        result = _service().bootstrap(path, base_url=base_url, assume_yes=yes)
    except OperatorAbortError:
        console.print("Aborted.")
        raise typer.Exit(0) from None
    except MissingDependencyError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except MaterializationError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except ValueError as e:
        print_error(f"Invalid configuration: {e}")
        raise typer.Exit(1) from e

    print_run_summary(result)
    console.print()
    print_success("Bootstrap complete!")
    print_next_steps(BOOTSTRAP_NEXT_STEPS)


def init(
    target: TargetOption = None,
    yes: YesOption = False,
) -> None:
    """Copy the bundled configuration templates into a project.

    Does not install plugins. An existing CLAUDE.md is kept, and
    .claude/settings.local.json is added to .gitignore.

    \b
    Examples:
        agentbootstrap init                 # Initialize the current directory
        agentbootstrap init -t ../my-app    # Initialize another directory
    """
    path = _resolve_target(target)
    print_info(f"Target directory: {path}")

    try:
        result = _service().init(path, assume_yes=yes)
    except OperatorAbortError:
        console.print("Aborted.")
        raise typer.Exit(0) from None
    except (ResourceError, MaterializationError, GitignoreError) as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    print_run_summary(result)
    console.print()
    print_success("Project init complete!")
    print_next_steps(INIT_NEXT_STEPS, title="Next Steps: customize for this project")


def setup() -> None:
    """Install the configured plugins at user scope (all projects).

    \b
    Examples:
        agentbootstrap setup
    """
    try:
        result = _service().setup(Path.cwd())
    except MissingDependencyError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except ValueError as e:
        print_error(f"Invalid configuration: {e}")
        raise typer.Exit(1) from e

    print_run_summary(result)
    console.print()
    print_success("Setup complete! Installed plugins are available in all your projects.")
    print_next_steps(SETUP_NEXT_STEPS)
