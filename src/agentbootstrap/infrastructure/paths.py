"""Path resolution for agentbootstrap storage and bootstrap targets."""

from __future__ import annotations

from pathlib import Path


class PathResolver:
    """Resolves paths outside the target project.

    Storage layout:
        ~/.agentbootstrap/
        └── config.json

        ~/.claude/plugins/cache/
        └── <marketplace>/
            └── <plugin-name>/
                └── <version>/
                    └── <plugin files>
    """

    def __init__(self, base: Path | None = None, claude_home: Path | None = None) -> None:
        """Initialize path resolver.

        Args:
            base: Base directory for tool storage. Defaults to ~/.agentbootstrap.
            claude_home: Claude Code user directory. Defaults to ~/.claude.
        """
        self.base = base or Path.home() / ".agentbootstrap"
        self.claude_home = claude_home or Path.home() / ".claude"

    def global_config(self) -> Path:
        """Path to global configuration file."""
        return self.base / "config.json"

    def plugin_cache_root(self) -> Path:
        """Root of the Claude Code plugin cache."""
        return self.claude_home / "plugins" / "cache"

    def plugin_cache_dir(self, marketplace: str, name: str) -> Path:
        """Cache directory holding the versions of one plugin.

        Args:
            marketplace: Marketplace the plugin was installed from.
            name: Plugin name.
        """
        return self.plugin_cache_root() / marketplace / name


class ProjectLayout:
    """Well-known locations inside a bootstrapped project.

    Layout:
        <target>/
        ├── CLAUDE.md
        ├── .mcp.json
        ├── .gitignore
        └── .claude/
            ├── settings.json
            ├── settings.local.json
            ├── agents/
            ├── commands/
            ├── skills/
            └── plugins/
                └── <plugin-name>/
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def claude_dir(self) -> Path:
        return self.root / ".claude"

    @property
    def gitignore(self) -> Path:
        return self.root / ".gitignore"

    def plugin_dir(self, name: str) -> Path:
        """Visible copy of an installed plugin.

        Args:
            name: Plugin name.
        """
        return self.claude_dir / "plugins" / name

    def resolve(self, relative: str) -> Path:
        """Resolve a manifest destination, refusing paths outside the root.

        Args:
            relative: Destination path relative to the project root.

        Returns:
            Absolute destination path.

        Raises:
            ValueError: If the path escapes the project root.
        """
        root = self.root.resolve()
        candidate = (root / relative).resolve()
        if not candidate.is_relative_to(root):
            raise ValueError(f"Path escapes project root: {relative}")
        return candidate


# Default resolver instance
default_resolver = PathResolver()
