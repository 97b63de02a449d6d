"""Bootstrap orchestration: preflight, materialize, install."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from agentbootstrap.infrastructure.config import BootstrapConfig
from agentbootstrap.infrastructure.fetchers import LocalFetcher, RemoteFetcher, SourceFetcher
from agentbootstrap.infrastructure.gitignore import ensure_gitignore_entry
from agentbootstrap.infrastructure.logging import bind_run_context, clear_run_context
from agentbootstrap.infrastructure.paths import PathResolver, ProjectLayout
from agentbootstrap.infrastructure.resources import ResourceError, get_project_templates_dir
from agentbootstrap.modules.bootstrap import installer, manifest, preflight
from agentbootstrap.modules.bootstrap.models import (
    ExternalResourceSpec,
    MaterializeResult,
    RunSummary,
)
from agentbootstrap.modules.bootstrap.reporting import NullReporter, ProgressReporter

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

__all__ = ["BootstrapResult", "BootstrapService"]

logger = structlog.get_logger()


@dataclass(frozen=True)
class BootstrapResult:
    """Everything a run did, for the final report.

    Attributes:
        target: Directory that was bootstrapped.
        materialized: Manifest outcomes (None when no files were written).
        summary: External resource outcomes (empty when nothing was installed).
        gitignore_updated: Whether .gitignore was created or changed.
    """

    target: Path
    materialized: MaterializeResult | None
    summary: RunSummary
    gitignore_updated: bool = False


class BootstrapService:
    """Runs the bootstrap stages in sequence.

    Fatal errors from preflight or materialization propagate to the
    caller. Installation failures are recorded in the RunSummary.
    """

    def __init__(
        self,
        config: BootstrapConfig | None = None,
        resolver: PathResolver | None = None,
        *,
        which: Callable[[str], str | None] = shutil.which,
        environ: Mapping[str, str] | None = None,
        confirm: Callable[[str], str] | None = None,
        reporter: ProgressReporter | None = None,
        registrar: installer.Registrar | None = None,
        cache: installer.PluginCache | None = None,
    ) -> None:
        """Initialize the bootstrap service.

        Args:
            config: Plugin, skill and template settings.
            resolver: Path resolver for the plugin cache.
            which: Executable lookup used by preflight.
            environ: Environment mapping used by preflight.
            confirm: Overwrite prompt.
            reporter: Progress reporter.
            registrar: Registration capability. Defaults to the claude and
                npx registrars, scoped per run mode.
            cache: Plugin cache resolver. Defaults to Claude Code's cache.
        """
        self._config = config or BootstrapConfig()
        self._resolver = resolver or PathResolver()
        self._which = which
        self._environ = os.environ if environ is None else environ
        self._confirm = confirm
        self._reporter = reporter or NullReporter()
        self._registrar = registrar
        self._cache = cache or installer.ClaudePluginCache(self._resolver)

    def plugin_specs(self) -> list[ExternalResourceSpec]:
        return [ExternalResourceSpec.plugin(ref) for ref in self._config.plugins]

    def skill_specs(self) -> list[ExternalResourceSpec]:
        return [ExternalResourceSpec.skill_package(s) for s in self._config.skill_sources]

    def _registrar_for(self, scope: str, target: Path) -> installer.Registrar:
        if self._registrar is not None:
            return self._registrar
        return installer.CompositeRegistrar(
            plugins=installer.ClaudePluginRegistrar(scope=scope, cwd=target),
            skill_packages=installer.SkillPackageRegistrar(
                agent=self._config.skills_agent, cwd=target
            ),
        )

    def _preflight(
        self,
        target: Path,
        *,
        required: list[preflight.ToolRequirement],
        optional: list[preflight.ToolRequirement],
        optional_env: list[preflight.EnvRequirement],
        check_overwrite: bool,
        assume_yes: bool,
    ) -> preflight.PreflightResult:
        overwrite_targets = [ProjectLayout(target).claude_dir] if check_overwrite else []
        return preflight.run_preflight(
            required,
            optional,
            overwrite_targets,
            optional_env=optional_env,
            which=self._which,
            environ=self._environ,
            confirm=self._confirm,
            assume_yes=assume_yes,
            reporter=self._reporter,
        )

    def bootstrap(
        self,
        target: Path,
        *,
        base_url: str | None = None,
        fetcher: SourceFetcher | None = None,
        assume_yes: bool = False,
    ) -> BootstrapResult:
        """Download templates, then install plugins and skill packages.

        Args:
            target: Project directory to bootstrap.
            base_url: Template base URL (defaults to config).
            fetcher: Template source override.
            assume_yes: Overwrite an existing .claude/ without asking.

        Returns:
            BootstrapResult for reporting.

        Raises:
            MissingDependencyError: If claude is not installed.
            OperatorAbortError: If the operator declines to overwrite.
            MaterializationError: If a template cannot be downloaded or written.
            ValueError: If the template URL is invalid.
        """
        bind_run_context(mode="bootstrap", target=target)
        try:
            plugins = self.plugin_specs()
            skills = self.skill_specs()
            if fetcher is None:
                fetcher = RemoteFetcher(base_url or self._config.template_base_url)

            self._preflight(
                target,
                required=[preflight.CLAUDE],
                optional=[preflight.GCLOUD, preflight.NPX],
                optional_env=[preflight.GEMINI_API_KEY],
                check_overwrite=True,
                assume_yes=assume_yes,
            )

            self._reporter.section(f"Downloading configuration files from {fetcher.describe()}")
            materialized = manifest.materialize(
                manifest.remote_manifest(), fetcher, target, reporter=self._reporter
            )

            registrar = self._registrar_for("project", target)

            self._reporter.section("Installing Claude Code plugins")
            summary = installer.install_all(
                plugins,
                registrar,
                self._cache,
                target,
                reporter=self._reporter,
            )

            self._reporter.section("Installing agent skills")
            summary.extend(
                installer.install_all(
                    skills,
                    registrar,
                    None,
                    target,
                    reporter=self._reporter,
                )
            )

            logger.info(
                "bootstrap_complete",
                created=len(materialized.created),
                skipped=len(materialized.skipped),
                failures=len(summary.failures),
            )
            return BootstrapResult(target=target, materialized=materialized, summary=summary)
        finally:
            clear_run_context()

    def init(
        self,
        target: Path,
        *,
        template_root: Path | None = None,
        assume_yes: bool = False,
    ) -> BootstrapResult:
        """Copy the bundled template tree and protect local settings in git.

        Args:
            target: Project directory to initialize.
            template_root: Template tree (defaults to the bundled one).
            assume_yes: Overwrite an existing .claude/ without asking.

        Returns:
            BootstrapResult for reporting.

        Raises:
            ResourceError: If the template tree is missing.
            OperatorAbortError: If the operator declines to overwrite.
            MaterializationError: If a template cannot be copied.
            GitignoreError: If .gitignore cannot be updated.
        """
        bind_run_context(mode="init", target=target)
        try:
            root = template_root or get_project_templates_dir()
            if not root.is_dir():
                raise ResourceError(f"Template directory not found: {root}")

            self._preflight(
                target,
                required=[],
                optional=[],
                optional_env=[],
                check_overwrite=True,
                assume_yes=assume_yes,
            )

            self._reporter.section("Copying .claude/ configuration")
            materialized = manifest.materialize(
                manifest.local_manifest(root),
                LocalFetcher(root),
                target,
                reporter=self._reporter,
            )

            updated = ensure_gitignore_entry(ProjectLayout(target).gitignore)

            logger.info(
                "init_complete",
                created=len(materialized.created),
                skipped=len(materialized.skipped),
                gitignore_updated=updated,
            )
            return BootstrapResult(
                target=target,
                materialized=materialized,
                summary=RunSummary(),
                gitignore_updated=updated,
            )
        finally:
            clear_run_context()

    def setup(self, cwd: Path) -> BootstrapResult:
        """Install the configured plugins at user scope.

        Args:
            cwd: Directory the claude CLI runs in.

        Returns:
            BootstrapResult with plugin outcomes only.

        Raises:
            MissingDependencyError: If claude is not installed.
        """
        bind_run_context(mode="setup", target=cwd)
        try:
            plugins = self.plugin_specs()

            self._preflight(
                cwd,
                required=[preflight.CLAUDE],
                optional=[],
                optional_env=[],
                check_overwrite=False,
                assume_yes=False,
            )

            self._reporter.section("Installing plugins (user scope, available in all projects)")
            summary = installer.install_all(
                plugins,
                self._registrar_for("user", cwd),
                None,
                cwd,
                reporter=self._reporter,
            )
            logger.info("setup_complete", failures=len(summary.failures))
            return BootstrapResult(target=cwd, materialized=None, summary=summary)
        finally:
            clear_run_context()
