"""Tests for path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from agentbootstrap.infrastructure.paths import PathResolver, ProjectLayout


class TestPathResolver:
    """Tests for PathResolver class."""

    def test_default_base_path(self) -> None:
        """Default base should be ~/.agentbootstrap."""
        resolver = PathResolver()
        assert resolver.base == Path.home() / ".agentbootstrap"
        assert resolver.claude_home == Path.home() / ".claude"

    def test_global_config(self, temp_dir: Path) -> None:
        """Config lives directly under the base directory."""
        resolver = PathResolver(base=temp_dir)
        assert resolver.global_config() == temp_dir / "config.json"

    def test_plugin_cache_dir(self, temp_dir: Path) -> None:
        """Plugin cache is keyed by marketplace then plugin name."""
        resolver = PathResolver(claude_home=temp_dir)

        path = resolver.plugin_cache_dir("claude-plugins-official", "figma")

        assert path == temp_dir / "plugins" / "cache" / "claude-plugins-official" / "figma"


class TestProjectLayout:
    """Tests for ProjectLayout class."""

    def test_well_known_locations(self, project_dir: Path) -> None:
        """Should expose the .claude directory and .gitignore."""
        layout = ProjectLayout(project_dir)

        assert layout.claude_dir == project_dir / ".claude"
        assert layout.gitignore == project_dir / ".gitignore"
        assert layout.plugin_dir("figma") == project_dir / ".claude" / "plugins" / "figma"

    def test_resolve_nested_destination(self, project_dir: Path) -> None:
        """Should resolve destinations inside the project."""
        layout = ProjectLayout(project_dir)

        path = layout.resolve(".claude/agents/code-reviewer.md")

        assert path == project_dir.resolve() / ".claude" / "agents" / "code-reviewer.md"

    @pytest.mark.parametrize("relative", ["../outside.md", ".claude/../../x", "/etc/passwd"])
    def test_resolve_rejects_escape(self, project_dir: Path, relative: str) -> None:
        """Should refuse destinations outside the project root."""
        with pytest.raises(ValueError, match="escapes project root"):
            ProjectLayout(project_dir).resolve(relative)
