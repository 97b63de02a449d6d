"""Tests for the config command group."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from agentbootstrap.cli.app import app
from agentbootstrap.cli.context import CLIContext
from agentbootstrap.infrastructure.config import (
    BootstrapConfig,
    ConfigError,
    load_config,
    save_config,
)
from agentbootstrap.infrastructure.paths import PathResolver

if TYPE_CHECKING:
    from pathlib import Path

runner = CliRunner()


@pytest.fixture
def resolver(temp_dir: Path) -> PathResolver:
    return PathResolver(base=temp_dir / "home")


@pytest.fixture(autouse=True)
def cli_env(resolver: PathResolver):
    """Point the config commands at a scratch home directory."""
    CLIContext.reset()
    with (
        patch("agentbootstrap.cli.app.configure_logging"),
        patch("agentbootstrap.cli.config._resolver", resolver),
    ):
        yield
    CLIContext.reset()


class TestConfigInit:
    """Tests for config init."""

    def test_writes_defaults(self, resolver: PathResolver) -> None:
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0, result.output
        assert "Wrote default configuration" in result.output
        assert resolver.global_config().is_file()
        assert load_config(resolver) == BootstrapConfig()

    def test_refuses_to_replace_existing_file(self, resolver: PathResolver) -> None:
        """An edited config file is left alone without --force."""
        save_config(BootstrapConfig(skills_agent="cursor"), resolver)
        before = resolver.global_config().read_bytes()

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert resolver.global_config().read_bytes() == before

    def test_force_resets_to_defaults(self, resolver: PathResolver) -> None:
        save_config(BootstrapConfig(skills_agent="cursor"), resolver)

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0, result.output
        data = json.loads(resolver.global_config().read_text())
        assert data["skills_agent"] == "claude-code"

    def test_write_failure_exits_nonzero(self, resolver: PathResolver) -> None:
        with patch(
            "agentbootstrap.cli.config.save_config",
            side_effect=ConfigError("Cannot write config: disk full"),
        ):
            result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert not resolver.global_config().exists()


class TestConfigShow:
    """Tests for config show."""

    def test_shows_saved_config(self, resolver: PathResolver) -> None:
        saved = BootstrapConfig(plugins=("figma@claude-plugins-official",))
        save_config(saved, resolver)

        with patch("agentbootstrap.cli.config.print_config") as mock_print:
            result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0, result.output
        mock_print.assert_called_once_with(saved, resolver.global_config(), exists=True)

    def test_shows_defaults_without_file(self, resolver: PathResolver) -> None:
        with patch("agentbootstrap.cli.config.print_config") as mock_print:
            result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0, result.output
        mock_print.assert_called_once_with(
            BootstrapConfig(), resolver.global_config(), exists=False
        )

    def test_no_subcommand_shows_help(self) -> None:
        result = runner.invoke(app, ["config"])

        assert "show" in result.output
        assert "init" in result.output
