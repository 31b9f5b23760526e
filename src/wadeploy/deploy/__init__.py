"""Configuration file deployment workflow."""

from wadeploy.deploy.engine import DeploymentEngine
from wadeploy.deploy.models import (
    DeploymentReport,
    DeploymentRequest,
    DeploymentStatus,
    FailureKind,
    GateResult,
)

__all__ = [
    "DeploymentEngine",
    "DeploymentReport",
    "DeploymentRequest",
    "DeploymentStatus",
    "FailureKind",
    "GateResult",
]
