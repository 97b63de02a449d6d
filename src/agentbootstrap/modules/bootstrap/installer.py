"""External resource installation: plugins and skill packages.

Each resource is registered through a Registrar and classified as
installed, already present or failed. A failure never stops the loop.
"""

from __future__ import annotations

import re
import shlex
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import structlog

from agentbootstrap.infrastructure import claude, npx
from agentbootstrap.infrastructure.paths import PathResolver, ProjectLayout
from agentbootstrap.modules.bootstrap.errors import (
    AlreadyPresentError,
    RegistrationError,
)
from agentbootstrap.modules.bootstrap.models import (
    ExternalResourceSpec,
    InstallOutcome,
    ResourceKind,
    RunSummary,
)
from agentbootstrap.modules.bootstrap.reporting import NullReporter, ProgressReporter

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    "ClaudePluginCache",
    "ClaudePluginRegistrar",
    "CompositeRegistrar",
    "PluginCache",
    "Registrar",
    "SkillPackageRegistrar",
    "copy_plugin_files",
    "install_all",
    "select_version_dir",
]

logger = structlog.get_logger()


class Registrar(Protocol):
    """Installs one external resource through a third-party tool."""

    def register(self, spec: ExternalResourceSpec) -> None:
        """Install the resource.

        Raises:
            AlreadyPresentError: If the resource is already installed.
            RegistrationError: If installation fails.
        """
        ...

    def retry_command(self, spec: ExternalResourceSpec) -> str:
        """Shell command the operator can run to retry by hand."""
        ...


class PluginCache(Protocol):
    """Finds the locally cached files of an installed plugin."""

    def locate(self, spec: ExternalResourceSpec) -> Path | None:
        """Return the versioned cache directory, or None if there is none."""
        ...


class ClaudePluginRegistrar:
    """Registers plugins with ``claude plugin install``."""

    def __init__(self, scope: str = "project", cwd: Path | None = None) -> None:
        self.scope = scope
        self.cwd = cwd

    def retry_command(self, spec: ExternalResourceSpec) -> str:
        return shlex.join(claude.plugin_install_command(spec.ref, self.scope))

    def register(self, spec: ExternalResourceSpec) -> None:
        try:
            claude.plugin_install(spec.ref, scope=self.scope, cwd=self.cwd)
        except claude.ClaudeAlreadyInstalledError as e:
            raise AlreadyPresentError(str(e), output=e.output) from e
        except claude.ClaudeError as e:
            raise RegistrationError(str(e), output=e.output) from e
        except ValueError as e:
            raise RegistrationError(str(e)) from e


class SkillPackageRegistrar:
    """Fetches skill bundles with ``npx skills add``."""

    def __init__(self, agent: str = npx.DEFAULT_AGENT, cwd: Path | None = None) -> None:
        self.agent = agent
        self.cwd = cwd

    def retry_command(self, spec: ExternalResourceSpec) -> str:
        try:
            return shlex.join(npx.skills_add_command(spec.source, agent=self.agent))
        except ValueError:
            return f"npx -y skills add {spec.source} --agent {self.agent} --skill '*' -y"

    def register(self, spec: ExternalResourceSpec) -> None:
        try:
            npx.skills_add(spec.source, agent=self.agent, cwd=self.cwd)
        except npx.NpxError as e:
            raise RegistrationError(str(e), output=e.output) from e
        except ValueError as e:
            raise RegistrationError(str(e)) from e


class CompositeRegistrar:
    """Dispatches to a registrar per resource kind."""

    def __init__(
        self,
        plugins: Registrar,
        skill_packages: Registrar,
    ) -> None:
        self._by_kind: dict[ResourceKind, Registrar] = {
            ResourceKind.PLUGIN: plugins,
            ResourceKind.SKILL_PACKAGE: skill_packages,
        }

    def register(self, spec: ExternalResourceSpec) -> None:
        self._by_kind[spec.kind].register(spec)

    def retry_command(self, spec: ExternalResourceSpec) -> str:
        return self._by_kind[spec.kind].retry_command(spec)


_NUMBER_SPLIT = re.compile(r"(\d+)")


def _version_key(name: str) -> tuple[tuple[int, int | str], ...]:
    # Digit runs compare numerically so 10.0.0 sorts after 9.0.0
    return tuple(
        (0, int(part)) if part.isdigit() else (1, part)
        for part in _NUMBER_SPLIT.split(name)
        if part
    )


def select_version_dir(candidates: Sequence[str]) -> str | None:
    """Pick the newest-looking version directory name.

    Names compare piecewise: digit runs numerically, everything else as
    text, with the plain string as the final tie-break so the pick never
    depends on input order.

    Args:
        candidates: Subdirectory names found in a plugin's cache directory.

    Returns:
        The chosen name, or None if there are no candidates.
    """
    if not candidates:
        return None
    return max(candidates, key=lambda name: (_version_key(name), name))


class ClaudePluginCache:
    """Claude Code's plugin cache: ``<cache>/<marketplace>/<name>/<version>/``."""

    def __init__(self, resolver: PathResolver | None = None) -> None:
        self._resolver = resolver or PathResolver()

    def locate(self, spec: ExternalResourceSpec) -> Path | None:
        cache_dir = self._resolver.plugin_cache_dir(spec.source, spec.name)
        if not cache_dir.is_dir():
            return None

        candidates = [d.name for d in cache_dir.iterdir() if d.is_dir()]
        chosen = select_version_dir(candidates)
        if chosen is None:
            return None
        return cache_dir / chosen


def copy_plugin_files(source: Path, dest: Path) -> Path:
    """Copy a cached plugin version into the project.

    Args:
        source: Versioned cache directory.
        dest: Per-plugin directory inside the project.

    Returns:
        The destination directory.

    Raises:
        OSError: If copying fails.
    """
    dest.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, dest, dirs_exist_ok=True, symlinks=True)
    return dest


def _classify(registrar: Registrar, spec: ExternalResourceSpec) -> InstallOutcome:
    try:
        registrar.register(spec)
    except AlreadyPresentError:
        return InstallOutcome.already_present()
    except RegistrationError as e:
        # TODO: drop the substring fallback once `claude plugin install`
        # reports existing installs with a dedicated exit status
        if claude.is_already_installed_message(str(e)) or claude.is_already_installed_message(
            e.output
        ):
            return InstallOutcome.already_present()
        return InstallOutcome.failed(str(e), retry_command=registrar.retry_command(spec))
    return InstallOutcome.installed()


def _copy_to_project(
    spec: ExternalResourceSpec,
    cache: PluginCache,
    layout: ProjectLayout,
) -> Path | None:
    try:
        source = cache.locate(spec)
        if source is None:
            logger.debug("plugin_cache_missing", plugin=spec.ref)
            return None
        return copy_plugin_files(source, layout.plugin_dir(spec.name))
    except OSError as e:
        logger.warning("plugin_cache_copy_failed", plugin=spec.ref, error=str(e))
        return None


def install_all(
    specs: Sequence[ExternalResourceSpec],
    registrar: Registrar,
    cache: PluginCache | None,
    target: Path,
    *,
    reporter: ProgressReporter | None = None,
) -> RunSummary:
    """Install every resource in order and record each outcome.

    Plugins that end up installed are also copied from the local cache
    into ``.claude/plugins/<name>/`` so their files are visible in the
    project. That copy is best effort and never changes an outcome.

    Args:
        specs: Resources to install.
        registrar: Registration capability.
        cache: Plugin cache resolver, or None to skip the project copy.
        target: Target project directory.
        reporter: Progress reporter.

    Returns:
        RunSummary with one outcome per spec.
    """
    reporter = reporter or NullReporter()
    layout = ProjectLayout(target)
    summary = RunSummary()

    for spec in specs:
        reporter.resource_started(spec)
        outcome = _classify(registrar, spec)

        logger.info(
            "resource_install_outcome",
            resource=spec.ref,
            kind=spec.kind.value,
            outcome=outcome.kind.value,
        )
        summary.record(spec, outcome)
        reporter.resource_finished(spec, outcome)

        if spec.kind is ResourceKind.PLUGIN and outcome.ok and cache is not None:
            copied = _copy_to_project(spec, cache, layout)
            if copied is not None:
                reporter.plugin_copied(spec, copied)

    return summary
