"""Deployment data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from wadeploy.config import LOOPBACK_ALIAS


class FailureKind(str, Enum):
    """Terminal failure kinds, one per gate that can fail."""

    INVALID_FILENAME = "InvalidFilename"
    INSUFFICIENT_PRIVILEGE = "InsufficientPrivilege"
    REMOTE_UNREACHABLE = "RemoteUnreachable"
    INSTALL_PATH_INACCESSIBLE = "InstallPathInaccessible"
    COPY_FAILED = "CopyFailed"
    VERIFICATION_FAILED = "VerificationFailed"

    @property
    def exit_code(self) -> int:
        """Process exit code for this failure."""
        return EXIT_CODES[self]


EXIT_CODES = {
    FailureKind.INVALID_FILENAME: 10,
    FailureKind.INSUFFICIENT_PRIVILEGE: 11,
    FailureKind.REMOTE_UNREACHABLE: 12,
    FailureKind.INSTALL_PATH_INACCESSIBLE: 13,
    FailureKind.COPY_FAILED: 14,
    FailureKind.VERIFICATION_FAILED: 15,
}


class DeploymentStatus(str, Enum):
    """Final deployment status."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    DRY_RUN = "dry-run"


@dataclass(frozen=True)
class GateResult:
    """Tagged outcome of a single gate: pass, or fail with a kind and detail."""

    passed: bool
    kind: FailureKind | None = None
    detail: str = ""
    skipped: bool = False

    @classmethod
    def ok(cls, detail: str = "") -> "GateResult":
        return cls(passed=True, detail=detail)

    @classmethod
    def skip(cls, detail: str) -> "GateResult":
        return cls(passed=True, detail=detail, skipped=True)

    @classmethod
    def fail(cls, kind: FailureKind, detail: str) -> "GateResult":
        return cls(passed=False, kind=kind, detail=detail)


@dataclass
class DeploymentRequest:
    """Inputs for a single deployment."""

    source: str
    target: str = LOOPBACK_ALIAS
    dry_run: bool = False


@dataclass
class GateRecord:
    """A gate's result as recorded by the engine."""

    number: int
    name: str
    result: GateResult
    duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "gate": self.number,
            "name": self.name,
            "passed": self.result.passed,
            "skipped": self.result.skipped,
            "kind": self.result.kind.value if self.result.kind else None,
            "detail": self.result.detail,
            "duration": round(self.duration, 4),
        }


@dataclass
class DeploymentRun:
    """Mutable state shared by the gates during one deployment.

    Gates fill in locality and paths as they pass; nothing here outlives
    the invocation.
    """

    request: DeploymentRequest
    is_local: bool | None = None
    install_path: str | None = None
    destination: str | None = None
    records: list[GateRecord] = field(default_factory=list)


@dataclass
class DeploymentReport:
    """Result of a deployment workflow."""

    request: DeploymentRequest
    status: DeploymentStatus
    is_local: bool | None = None
    install_path: str | None = None
    destination: str | None = None
    gates: list[GateRecord] = field(default_factory=list)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """True only when the destination file was verified."""
        return self.status == DeploymentStatus.SUCCEEDED

    @property
    def failed_gate(self) -> GateRecord | None:
        """The gate that halted the workflow, if any."""
        for record in self.gates:
            if not record.result.passed:
                return record
        return None

    @property
    def failure_kind(self) -> FailureKind | None:
        failed = self.failed_gate
        return failed.result.kind if failed else None

    @property
    def exit_code(self) -> int:
        kind = self.failure_kind
        return kind.exit_code if kind else 0

    @property
    def message(self) -> str:
        """Human-readable summary."""
        failed = self.failed_gate
        if failed:
            return failed.result.detail
        if self.status == DeploymentStatus.DRY_RUN:
            return f"Dry run: would copy {self.request.source} to {self.install_path}"
        return f"Deployed {self.destination}"

    def status_fields(self) -> dict[str, Any]:
        """Fields for the one-line status message."""
        failed = self.failed_gate
        return {
            "status": self.status.value,
            "target": self.request.target,
            "gate": failed.name if failed else None,
            "kind": failed.result.kind.value if failed and failed.result.kind else None,
            "path": self.destination or self.install_path,
            "reason": failed.result.detail if failed else None,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "success": self.success,
            "target": self.request.target,
            "source": self.request.source,
            "dry_run": self.request.dry_run,
            "local": self.is_local,
            "install_path": self.install_path,
            "destination": self.destination,
            "failure_kind": self.failure_kind.value if self.failure_kind else None,
            "exit_code": self.exit_code,
            "message": self.message,
            "gates": [g.to_dict() for g in self.gates],
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration": round(self.duration, 4),
        }
