"""Rich console output formatting utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from agentbootstrap.cli.context import CLIContext
from agentbootstrap.modules.bootstrap.models import OutcomeKind

if TYPE_CHECKING:
    from pathlib import Path

    from agentbootstrap.infrastructure.config import BootstrapConfig
    from agentbootstrap.modules.bootstrap.models import (
        ExternalResourceSpec,
        InstallOutcome,
        ManifestEntry,
        RunSummary,
    )
    from agentbootstrap.modules.bootstrap.service import BootstrapResult

__all__ = [
    "ConsoleReporter",
    "print_config",
    "console",
    "error_console",
    "print_error",
    "print_info",
    "print_next_steps",
    "print_run_summary",
    "print_success",
    "print_warning",
]

# Shared console instance
console = Console()
error_console = Console(stderr=True)

_OUTCOME_STYLE = {
    OutcomeKind.INSTALLED: ("green", "installed"),
    OutcomeKind.ALREADY_PRESENT: ("cyan", "already installed"),
    OutcomeKind.FAILED: ("red", "failed"),
}


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message.

    Suppressed when --quiet flag is set.
    """
    if not CLIContext.get().quiet:
        console.print(f"[blue]i[/blue] {message}")


class ConsoleReporter:
    """Prints bootstrap progress line by line as the run proceeds."""

    def section(self, title: str) -> None:
        if CLIContext.get().quiet:
            return
        console.print()
        console.print(f"[bold]{escape(title)}...[/bold]")

    def tool_found(self, tool: str, path: str) -> None:
        print_info(f"Found {tool} CLI: {path}")

    def warning(self, message: str, hint: str | None = None) -> None:
        print_warning(escape(message))
        if hint:
            print_info(escape(hint))

    def entry_created(self, entry: ManifestEntry) -> None:
        print_success(f"Created {escape(entry.dest_path)}")

    def entry_skipped(self, entry: ManifestEntry) -> None:
        print_warning(f"{escape(entry.dest_path)} already exists, skipping (not overwritten)")

    def resource_started(self, spec: ExternalResourceSpec) -> None:
        print_info(f"Installing {escape(spec.ref)}...")

    def resource_finished(
        self, spec: ExternalResourceSpec, outcome: InstallOutcome
    ) -> None:
        if outcome.kind is OutcomeKind.INSTALLED:
            print_success(f"{escape(spec.name)}: registered")
        elif outcome.kind is OutcomeKind.ALREADY_PRESENT:
            print_success(f"{escape(spec.name)}: already registered")
        else:
            print_error(f"{escape(spec.name)}: FAILED: {escape(outcome.reason or '')}")
            if outcome.retry_command:
                print_info(f"Run manually later: {escape(outcome.retry_command)}")

    def plugin_copied(self, spec: ExternalResourceSpec, dest: Path) -> None:
        print_info(f"Copied to {escape(str(dest))}")


def print_run_summary(result: BootstrapResult) -> None:
    """Print the enumerated outcome of every manifest entry and resource.

    Args:
        result: Result of a bootstrap run.
    """
    if result.materialized is not None and result.materialized.entries:
        files = Table(title="Configuration files")
        files.add_column("#", style="dim", justify="right")
        files.add_column("File", style="cyan")
        files.add_column("Status")
        for i, (entry, status) in enumerate(result.materialized.entries, start=1):
            style = "green" if status.value == "created" else "yellow"
            files.add_row(str(i), entry.dest_path, f"[{style}]{status.value}[/{style}]")
        console.print()
        console.print(files)

    if len(result.summary):
        _print_resource_table(result.summary)

    if result.gitignore_updated:
        print_success("Added .claude/settings.local.json to .gitignore")


def _print_resource_table(summary: RunSummary) -> None:
    table = Table(title="Plugins and skills")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Resource", style="cyan")
    table.add_column("Kind", style="dim")
    table.add_column("Outcome")

    for i, (spec, outcome) in enumerate(summary.results, start=1):
        color, label = _OUTCOME_STYLE[outcome.kind]
        table.add_row(str(i), spec.ref, spec.kind.value, f"[{color}]{label}[/{color}]")

    console.print()
    console.print(table)

    counts = (
        f"{summary.count(OutcomeKind.INSTALLED)} installed, "
        f"{summary.count(OutcomeKind.ALREADY_PRESENT)} already installed, "
        f"{summary.count(OutcomeKind.FAILED)} failed"
    )
    if summary.failures:
        print_warning(counts)
        for spec, outcome in summary.failures:
            if outcome.retry_command:
                console.print(f"  [dim]{escape(spec.ref)}:[/dim] {escape(outcome.retry_command)}")
    else:
        print_success(counts)


def print_config(config: BootstrapConfig, path: Path, *, exists: bool) -> None:
    """Print the configuration in effect and where it comes from.

    Args:
        config: Loaded configuration.
        path: Config file location.
        exists: Whether the file exists (defaults are shown otherwise).
    """
    source = str(path) if exists else f"{path} (not found, using defaults)"
    print_info(f"Config file: {escape(source)}")

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("template_base_url", escape(config.template_base_url))
    table.add_row("plugins", escape("\n".join(config.plugins)) or "[dim]none[/dim]")
    table.add_row(
        "skill_sources", escape("\n".join(config.skill_sources)) or "[dim]none[/dim]"
    )
    table.add_row("skills_agent", escape(config.skills_agent))
    console.print(table)


def print_next_steps(steps: list[str], *, title: str = "Next Steps") -> None:
    """Print a numbered panel of follow-up actions.

    Suppressed when --quiet flag is set.

    Args:
        steps: Actions for the operator, in order.
        title: Panel title.
    """
    if CLIContext.get().quiet or not steps:
        return

    lines = [f"  {i + 1}. {step}" for i, step in enumerate(steps)]
    panel = Panel(
        "\n".join(lines),
        title=f"[blue]{title}[/blue]",
        border_style="blue",
    )
    console.print(panel)
