"""Progress reporting hooks for a bootstrap run.

Stages call a reporter as they go so the operator sees each entry and
each resource as it is handled, not in a batch at the end.
"""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - used at runtime in signatures
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from agentbootstrap.modules.bootstrap.models import (
        ExternalResourceSpec,
        InstallOutcome,
        ManifestEntry,
    )

__all__ = ["NullReporter", "ProgressReporter"]


class ProgressReporter(Protocol):
    def section(self, title: str) -> None: ...

    def tool_found(self, tool: str, path: str) -> None: ...

    def warning(self, message: str, hint: str | None = None) -> None: ...

    def entry_created(self, entry: ManifestEntry) -> None: ...

    def entry_skipped(self, entry: ManifestEntry) -> None: ...

    def resource_started(self, spec: ExternalResourceSpec) -> None: ...

    def resource_finished(
        self, spec: ExternalResourceSpec, outcome: InstallOutcome
    ) -> None: ...

    def plugin_copied(self, spec: ExternalResourceSpec, dest: Path) -> None: ...


class NullReporter:
    """Reporter that discards everything."""

    def section(self, title: str) -> None:
        pass

    def tool_found(self, tool: str, path: str) -> None:
        pass

    def warning(self, message: str, hint: str | None = None) -> None:
        pass

    def entry_created(self, entry: ManifestEntry) -> None:
        pass

    def entry_skipped(self, entry: ManifestEntry) -> None:
        pass

    def resource_started(self, spec: ExternalResourceSpec) -> None:
        pass

    def resource_finished(
        self, spec: ExternalResourceSpec, outcome: InstallOutcome
    ) -> None:
        pass

    def plugin_copied(self, spec: ExternalResourceSpec, dest: Path) -> None:
        pass
