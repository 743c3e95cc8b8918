class WorkspaceError(Exception):
    """Base exception for workspace-related errors."""


class ConfigError(WorkspaceError):
    """Raised when the [tool.natives] configuration is invalid."""
