"""Shared CLI plumbing: errors, logging and output.

The click context lives in wadeploy.core.context and is imported from there
directly, since it depends on wadeploy.config.
"""

from wadeploy.core.exceptions import ConfigError, DeploymentError, WaDeployError
from wadeploy.core.output import OutputFormat, OutputFormatter

__all__ = [
    "ConfigError",
    "DeploymentError",
    "OutputFormat",
    "OutputFormatter",
    "WaDeployError",
]
