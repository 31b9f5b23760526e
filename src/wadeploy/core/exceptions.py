"""Errors that abort a wadeploy invocation before or outside the gates.

Gate failures are not exceptions: they are reported through
DeploymentReport and carry their own exit codes.
"""

from typing import Any


class WaDeployError(Exception):
    """Base class. The CLI turns these into an error line and exit status 1."""

    exit_code = 1

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}

    def __str__(self) -> str:
        text = super().__str__()
        if not self.details:
            return text
        extras = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{text} ({extras})"


class ConfigError(WaDeployError):
    """Unreadable config file, invalid value or bad WADEPLOY_* override."""


class DeploymentError(WaDeployError):
    """An engine assembled from an unusable gate list."""
