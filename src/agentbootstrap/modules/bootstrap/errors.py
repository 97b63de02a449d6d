"""Bootstrap exceptions.

Fatal errors (MissingDependencyError, MaterializationError) stop the run.
OperatorAbortError is a clean stop. RegistrationError is recoverable and
only ever becomes a failed outcome in the run summary.
"""

from __future__ import annotations

__all__ = [
    "AlreadyPresentError",
    "BootstrapError",
    "MaterializationError",
    "MissingDependencyError",
    "OperatorAbortError",
    "RegistrationError",
]


class BootstrapError(Exception):
    """Base exception for bootstrap operations."""


class MissingDependencyError(BootstrapError):
    """Raised when a required external tool is not on PATH."""

    def __init__(self, tool: str, hint: str | None = None) -> None:
        message = f"'{tool}' not found on PATH."
        if hint:
            message += f" Install it first: {hint}"
        super().__init__(message)
        self.tool = tool
        self.hint = hint


class OperatorAbortError(BootstrapError):
    """Raised when the operator declines to overwrite existing configuration."""


class MaterializationError(BootstrapError):
    """Raised when a manifest entry cannot be fetched or written."""

    def __init__(self, source_path: str, cause: Exception | str) -> None:
        super().__init__(f"Failed to materialize {source_path}: {cause}")
        self.source_path = source_path
        self.cause = cause


class RegistrationError(BootstrapError):
    """Raised by a registrar when an external resource cannot be installed."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class AlreadyPresentError(RegistrationError):
    """Raised by a registrar when the resource is already installed."""
