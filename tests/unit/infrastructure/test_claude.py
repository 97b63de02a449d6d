"""Tests for Claude Code subprocess operations."""

from __future__ import annotations

import subprocess
from pathlib import Path  # noqa: TC003 - used at runtime with tmp_path
from unittest.mock import MagicMock, patch

import pytest

from agentbootstrap.infrastructure.claude import (
    ClaudeAlreadyInstalledError,
    ClaudeError,
    ClaudeNotFoundError,
    ClaudeTimeoutError,
    is_already_installed_message,
    plugin_install,
    plugin_install_command,
)


class TestPluginInstallCommand:
    """Tests for plugin_install_command function."""

    def test_builds_project_scope_command(self) -> None:
        """Should build the project-scope install argv."""
        cmd = plugin_install_command("figma@claude-plugins-official")

        assert cmd == [
            "claude",
            "plugin",
            "install",
            "figma@claude-plugins-official",
            "--scope",
            "project",
        ]

    def test_builds_user_scope_command(self) -> None:
        """Should pass the requested scope through."""
        cmd = plugin_install_command("data@knowledge-work-plugins", scope="user")

        assert cmd[-2:] == ["--scope", "user"]

    def test_rejects_reference_without_marketplace(self) -> None:
        """Should reject references missing the @marketplace part."""
        with pytest.raises(ValueError, match="Invalid plugin reference"):
            plugin_install_command("figma")

    def test_rejects_option_injection(self) -> None:
        """Should reject references that look like command options."""
        with pytest.raises(ValueError):
            plugin_install_command("--help@market")

    def test_rejects_unknown_scope(self) -> None:
        """Should reject scopes the CLI doesn't support."""
        with pytest.raises(ValueError, match="Invalid scope"):
            plugin_install_command("figma@official", scope="global")


class TestIsAlreadyInstalledMessage:
    """Tests for the already-installed wording check."""

    def test_matches_current_wording(self) -> None:
        """The wording printed by `claude plugin install` today must match."""
        assert is_already_installed_message("Error: plugin 'x' already installed")

    def test_is_case_insensitive(self) -> None:
        """Should match regardless of case."""
        assert is_already_installed_message("Plugin ALREADY INSTALLED at project scope")

    def test_rejects_other_failures(self) -> None:
        """Should not match unrelated errors."""
        assert not is_already_installed_message("Error: marketplace not found")
        assert not is_already_installed_message("")


class TestPluginInstall:
    """Tests for plugin_install function."""

    def test_runs_command_in_cwd(self, tmp_path: Path) -> None:
        """Should run the install command in the project directory."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="Installed figma\n")

            output = plugin_install("figma@official", cwd=tmp_path)

            assert output == "Installed figma"
            assert mock_run.call_args[0][0] == [
                "claude",
                "plugin",
                "install",
                "figma@official",
                "--scope",
                "project",
            ]
            assert mock_run.call_args.kwargs["cwd"] == tmp_path
            assert mock_run.call_args.kwargs["stderr"] == subprocess.STDOUT

    def test_raises_already_installed(self) -> None:
        """Non-zero exit with the already-installed wording is its own error."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(
                returncode=1, stdout="Error: plugin 'figma' already installed\n"
            )

            with pytest.raises(ClaudeAlreadyInstalledError) as exc_info:
                plugin_install("figma@official")

            assert exc_info.value.returncode == 1
            assert "already installed" in exc_info.value.output

    def test_raises_claude_error_on_failure(self) -> None:
        """Other non-zero exits raise ClaudeError with the tool output."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(
                returncode=2, stdout="Error: marketplace 'nope' not found\n"
            )

            with pytest.raises(ClaudeError) as exc_info:
                plugin_install("figma@nope")

            assert not isinstance(exc_info.value, ClaudeAlreadyInstalledError)
            assert "marketplace 'nope' not found" in str(exc_info.value)
            assert exc_info.value.returncode == 2

    def test_failure_without_output_has_message(self) -> None:
        """Should still produce a useful message when the tool prints nothing."""
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stdout="")

            with pytest.raises(ClaudeError, match="figma@official"):
                plugin_install("figma@official")

    def test_raises_not_found_when_claude_missing(self) -> None:
        """Should raise ClaudeNotFoundError when claude is not installed."""
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError()

            with pytest.raises(ClaudeNotFoundError) as exc_info:
                plugin_install("figma@official")

            assert exc_info.value.returncode == -1

    def test_raises_timeout_error(self) -> None:
        """Should raise ClaudeTimeoutError when the install hangs."""
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(cmd="claude", timeout=1)

            with pytest.raises(ClaudeTimeoutError) as exc_info:
                plugin_install("figma@official", timeout=1)

            assert exc_info.value.timeout == 1
            assert "timed out" in exc_info.value.output

    def test_raises_error_on_os_error(self) -> None:
        """Should wrap other OS errors."""
        with patch("subprocess.run") as mock_run:
            mock_run.side_effect = OSError("Permission denied")

            with pytest.raises(ClaudeError, match="Failed to run Claude Code"):
                plugin_install("figma@official")


class TestExceptions:
    """Tests for exception classes."""

    def test_claude_error_stores_returncode_and_output(self) -> None:
        """ClaudeError should store returncode and output."""
        error = ClaudeError("test error", returncode=42, output="details")
        assert error.returncode == 42
        assert error.output == "details"
        assert str(error) == "test error"

    def test_not_found_error_has_install_instructions(self) -> None:
        """ClaudeNotFoundError should point at the install docs."""
        error = ClaudeNotFoundError()
        assert "docs.anthropic.com" in str(error)

    def test_already_installed_is_claude_error(self) -> None:
        """ClaudeAlreadyInstalledError should be a ClaudeError."""
        assert issubclass(ClaudeAlreadyInstalledError, ClaudeError)
