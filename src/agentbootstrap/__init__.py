"""agentbootstrap: bootstrap agent configuration into a project."""

__version__ = "0.1.0"
