"""CLI context state management."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from agentbootstrap.infrastructure.config import BootstrapConfig

__all__ = ["CLIContext"]


@dataclass
class CLIContext:
    """Global CLI context for verbosity and configuration.

    Uses singleton pattern to share state across all CLI commands.
    Assumes single-threaded CLI environment.
    """

    verbose: bool = False
    quiet: bool = False
    config: BootstrapConfig | None = None

    _instance: ClassVar[CLIContext | None] = None

    @classmethod
    def get(cls) -> CLIContext:
        """Get the singleton CLI context instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get_config(self) -> BootstrapConfig:
        """Get configuration, loading and caching on first access.

        Returns:
            Loaded or default BootstrapConfig instance.
        """
        if self.config is None:
            from agentbootstrap.infrastructure.config import load_config

            self.config = load_config()

        assert self.config is not None  # Always set in the if block above
        return self.config

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (used by tests)."""
        cls._instance = None
