"""Configuration CLI commands."""

from __future__ import annotations

from typing import Annotated

import typer

from agentbootstrap.cli.formatters import (
    print_config,
    print_error,
    print_info,
    print_success,
)
from agentbootstrap.infrastructure.config import (
    BootstrapConfig,
    ConfigError,
    load_config,
    save_config,
)
from agentbootstrap.infrastructure.paths import PathResolver, default_resolver

app = typer.Typer(
    name="config",
    help="Show or create the global configuration file.",
    no_args_is_help=True,
)

# Shared resolver instance
_resolver: PathResolver = default_resolver


@app.command("show")
def show() -> None:
    """Show the configuration in effect.

    \b
    Examples:
        agentbootstrap config show
    """
    path = _resolver.global_config()
    print_config(load_config(_resolver), path, exists=path.is_file())


@app.command("init")
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace an existing config file"),
    ] = False,
) -> None:
    """Write the default configuration so it can be edited.

    \b
    Examples:
        agentbootstrap config init
        agentbootstrap config init --force   # Reset to defaults
    """
    path = _resolver.global_config()
    if path.exists() and not force:
        print_error(f"Config file already exists: {path}")
        print_info("Use --force to replace it with the defaults.")
        raise typer.Exit(1)

    try:
        save_config(BootstrapConfig(), _resolver)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    print_success(f"Wrote default configuration to {path}")
    print_info("Edit plugins and skill_sources to change what gets installed.")
