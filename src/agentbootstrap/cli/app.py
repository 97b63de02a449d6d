"""Main CLI application."""

from __future__ import annotations

import typer

from agentbootstrap import __version__
from agentbootstrap.cli import bootstrap as commands
from agentbootstrap.cli import config
from agentbootstrap.cli.context import CLIContext
from agentbootstrap.infrastructure.logging import configure_logging

app = typer.Typer(
    name="agentbootstrap",
    help="Bootstrap Claude Code configuration, plugins and skills into a project.",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("bootstrap")(commands.bootstrap)
app.command("init")(commands.init)
app.command("setup")(commands.setup)
app.add_typer(config.app, name="config")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"agentbootstrap {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(  # noqa: ARG001 - handled by callback
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug output.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only show results and errors.",
    ),
) -> None:
    """agentbootstrap: set up Claude Code configuration in a project.

    Run without a command to bootstrap the current directory.
    """
    configure_logging(debug=verbose)

    cli_ctx = CLIContext.get()
    cli_ctx.verbose = verbose
    cli_ctx.quiet = quiet

    if ctx.invoked_subcommand is None:
        commands.bootstrap(target=None, base_url=None, yes=False)
