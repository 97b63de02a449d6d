"""Records flowing through a bootstrap run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "EntryStatus",
    "ExternalResourceSpec",
    "InstallOutcome",
    "ManifestEntry",
    "MaterializeResult",
    "OutcomeKind",
    "ResourceKind",
    "RunSummary",
]


@dataclass(frozen=True)
class ManifestEntry:
    """One template file the run must make exist in the target.

    Attributes:
        source_path: Path relative to the template source.
        dest_path: Path relative to the target directory.
        protected: Never overwrite an existing destination.
    """

    source_path: str
    dest_path: str
    protected: bool = False

    @classmethod
    def same(cls, path: str, *, protected: bool = False) -> ManifestEntry:
        """Entry whose source and destination paths are identical."""
        return cls(source_path=path, dest_path=path, protected=protected)


class EntryStatus(str, Enum):
    """What the materializer did with a manifest entry."""

    CREATED = "created"
    SKIPPED = "skipped"


@dataclass
class MaterializeResult:
    """Ordered record of what happened to each manifest entry."""

    entries: list[tuple[ManifestEntry, EntryStatus]] = field(default_factory=list)

    def add(self, entry: ManifestEntry, status: EntryStatus) -> None:
        self.entries.append((entry, status))

    @property
    def created(self) -> list[ManifestEntry]:
        return [e for e, s in self.entries if s is EntryStatus.CREATED]

    @property
    def skipped(self) -> list[ManifestEntry]:
        return [e for e, s in self.entries if s is EntryStatus.SKIPPED]


class ResourceKind(str, Enum):
    """Kinds of external resource the installer knows how to register."""

    PLUGIN = "plugin"
    SKILL_PACKAGE = "skill-package"


@dataclass(frozen=True)
class ExternalResourceSpec:
    """An installable unit managed by a third-party tool.

    Attributes:
        name: Plugin name, or the bundle identifier for skill packages.
        source: Marketplace for plugins, owner/repo for skill packages.
        kind: Plugin or skill package.
    """

    name: str
    source: str
    kind: ResourceKind

    @classmethod
    def plugin(cls, ref: str) -> ExternalResourceSpec:
        """Parse a ``name@marketplace`` plugin reference.

        Raises:
            ValueError: If the reference has no marketplace part.
        """
        name, sep, marketplace = ref.partition("@")
        if not sep or not name or not marketplace:
            raise ValueError(f"Invalid plugin reference: {ref}. Expected name@marketplace")
        return cls(name=name, source=marketplace, kind=ResourceKind.PLUGIN)

    @classmethod
    def skill_package(cls, source: str) -> ExternalResourceSpec:
        """Skill bundle identified by ``owner/repo``."""
        return cls(name=source, source=source, kind=ResourceKind.SKILL_PACKAGE)

    @property
    def ref(self) -> str:
        """Identifier as the external tool expects it."""
        if self.kind is ResourceKind.PLUGIN:
            return f"{self.name}@{self.source}"
        return self.source


class OutcomeKind(str, Enum):
    INSTALLED = "installed"
    ALREADY_PRESENT = "already-present"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallOutcome:
    """Result of registering one external resource.

    ``reason`` and ``retry_command`` are only set for failures.
    """

    kind: OutcomeKind
    reason: str | None = None
    retry_command: str | None = None

    @classmethod
    def installed(cls) -> InstallOutcome:
        return cls(OutcomeKind.INSTALLED)

    @classmethod
    def already_present(cls) -> InstallOutcome:
        return cls(OutcomeKind.ALREADY_PRESENT)

    @classmethod
    def failed(cls, reason: str, retry_command: str | None = None) -> InstallOutcome:
        return cls(OutcomeKind.FAILED, reason=reason, retry_command=retry_command)

    @property
    def ok(self) -> bool:
        """True for installed and already-present outcomes."""
        return self.kind is not OutcomeKind.FAILED


@dataclass
class RunSummary:
    """Ordered (spec, outcome) pairs for the final report.

    Failures are recorded here and nowhere else; they never stop a run.
    """

    results: list[tuple[ExternalResourceSpec, InstallOutcome]] = field(
        default_factory=list
    )

    def record(self, spec: ExternalResourceSpec, outcome: InstallOutcome) -> None:
        self.results.append((spec, outcome))

    def extend(self, other: RunSummary) -> None:
        self.results.extend(other.results)

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for _, outcome in self.results if outcome.kind is kind)

    @property
    def failures(self) -> list[tuple[ExternalResourceSpec, InstallOutcome]]:
        return [(s, o) for s, o in self.results if o.kind is OutcomeKind.FAILED]

    def outcome_for(self, ref: str) -> InstallOutcome | None:
        """Look up the outcome recorded for a spec reference."""
        for spec, outcome in self.results:
            if spec.ref == ref:
                return outcome
        return None

    def __len__(self) -> int:
        return len(self.results)
