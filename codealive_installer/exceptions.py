"""Shared exception classes for codealive_installer."""


class InstallerError(Exception):
    """Base exception for installer errors."""


class ConfigError(InstallerError):
    """Raised when an agent config file cannot be parsed or written."""


class BinaryNotFoundError(InstallerError):
    """Raised when a CLI-driven agent's executable cannot be located."""


class ProcessInvocationError(InstallerError):
    """Raised when an external process fails, times out or cannot be spawned."""


class ApiKeyError(InstallerError):
    """Raised when no usable API key can be obtained."""


class CancelledByUser(InstallerError):
    """Raised when the user cancels an interactive prompt."""
