"""Shared test fixtures for agentbootstrap tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from agentbootstrap.infrastructure.fetchers import FetchError

if TYPE_CHECKING:
    from collections.abc import Generator

    from agentbootstrap.modules.bootstrap.models import ExternalResourceSpec


class FakeFetcher:
    """In-memory template source."""

    def __init__(self, files: dict[str, bytes], fail_on: set[str] | None = None) -> None:
        self.files = files
        self.fail_on = fail_on or set()
        self.requested: list[str] = []

    def describe(self) -> str:
        return "memory://templates"

    def fetch(self, source_path: str) -> bytes:
        self.requested.append(source_path)
        if source_path in self.fail_on or source_path not in self.files:
            raise FetchError(f"HTTP 404: Not Found for {source_path}", source=source_path)
        return self.files[source_path]


class ScriptedRegistrar:
    """Registrar whose behaviour per resource is scripted by the test.

    Script values: None (success), an exception instance to raise.
    """

    def __init__(self, script: dict[str, Exception | None] | None = None) -> None:
        self.script = script or {}
        self.calls: list[str] = []

    def register(self, spec: ExternalResourceSpec) -> None:
        self.calls.append(spec.ref)
        error = self.script.get(spec.ref)
        if error is not None:
            raise error

    def retry_command(self, spec: ExternalResourceSpec) -> str:
        return f"retry {spec.ref}"


class FakePluginCache:
    """Plugin cache backed by a dict of ref -> versioned directory."""

    def __init__(self, dirs: dict[str, Path] | None = None, error: OSError | None = None) -> None:
        self.dirs = dirs or {}
        self.error = error
        self.lookups: list[str] = []

    def locate(self, spec: ExternalResourceSpec) -> Path | None:
        self.lookups.append(spec.ref)
        if self.error is not None:
            raise self.error
        return self.dirs.get(spec.ref)


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """An empty target project directory."""
    path = temp_dir / "project"
    path.mkdir()
    return path


@pytest.fixture
def template_files() -> dict[str, bytes]:
    """Contents for every path in the remote manifest."""
    from agentbootstrap.modules.bootstrap.manifest import remote_manifest

    return {
        entry.source_path: f"template: {entry.source_path}\n".encode()
        for entry in remote_manifest()
    }


@pytest.fixture
def fake_fetcher(template_files: dict[str, bytes]) -> FakeFetcher:
    return FakeFetcher(template_files)


@pytest.fixture
def template_tree(temp_dir: Path) -> Path:
    """A small on-disk template tree shaped like the bundled one."""
    root = temp_dir / "templates"
    (root / ".claude" / "agents").mkdir(parents=True)
    (root / ".claude" / "skills").mkdir(parents=True)
    (root / ".claude" / "settings.json").write_text('{"enabledPlugins": {}}\n')
    (root / ".claude" / "settings.local.json").write_text('{"permissions": {}}\n')
    (root / ".claude" / "agents" / "code-reviewer.md").write_text("# Reviewer\n")
    (root / ".claude" / "skills" / "b-skill.md").write_text("# B\n")
    (root / ".claude" / "skills" / "a-skill.md").write_text("# A\n")
    (root / ".claude" / "skills" / "notes.txt").write_text("ignored\n")
    (root / "CLAUDE.md").write_text("# Template instructions\n")
    return root


@pytest.fixture
def make_registrar() -> type[ScriptedRegistrar]:
    """Factory for scripted registrars."""
    return ScriptedRegistrar


@pytest.fixture
def make_cache() -> type[FakePluginCache]:
    """Factory for fake plugin caches."""
    return FakePluginCache


@pytest.fixture
def make_fetcher() -> type[FakeFetcher]:
    """Factory for in-memory template sources."""
    return FakeFetcher
