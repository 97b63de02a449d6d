"""Bootstrap module: preflight, manifest materialization, resource install."""

from agentbootstrap.modules.bootstrap.errors import (
    AlreadyPresentError,
    BootstrapError,
    MaterializationError,
    MissingDependencyError,
    OperatorAbortError,
    RegistrationError,
)
from agentbootstrap.modules.bootstrap.models import (
    ExternalResourceSpec,
    InstallOutcome,
    ManifestEntry,
    OutcomeKind,
    ResourceKind,
    RunSummary,
)
from agentbootstrap.modules.bootstrap.service import BootstrapResult, BootstrapService

__all__ = [
    "AlreadyPresentError",
    "BootstrapError",
    "BootstrapResult",
    "BootstrapService",
    "ExternalResourceSpec",
    "InstallOutcome",
    "ManifestEntry",
    "MaterializationError",
    "MissingDependencyError",
    "OperatorAbortError",
    "OutcomeKind",
    "RegistrationError",
    "ResourceKind",
    "RunSummary",
]
