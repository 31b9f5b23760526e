"""Deployment workflow engine."""

import time
from datetime import datetime, timezone
from typing import Callable

from wadeploy.config import InstallConfig
from wadeploy.core.exceptions import DeploymentError
from wadeploy.core.logging import StructuredLogger
from wadeploy.deploy.gates import Gate, default_gates
from wadeploy.deploy.models import (
    DeploymentReport,
    DeploymentRequest,
    DeploymentRun,
    DeploymentStatus,
    GateRecord,
)
from wadeploy.deploy.probes import (
    EnvironmentProbe,
    FileSystem,
    LocalFileSystem,
    NetworkProbe,
    SystemEnvironmentProbe,
    TcpNetworkProbe,
)

logger = StructuredLogger(__name__)

GateCallback = Callable[[GateRecord], None]


class DeploymentEngine:
    """Run the deployment gates in order, halting at the first failure."""

    def __init__(self, gates: list[Gate], notify_callback: GateCallback | None = None):
        """Initialize engine.

        Args:
            gates: Gates in evaluation order
            notify_callback: Called with each gate record as it completes
        """
        if not gates:
            raise DeploymentError("At least one gate is required")
        names = [gate.name for gate in gates]
        if len(set(names)) != len(names):
            raise DeploymentError("Gate names must be unique", details={"gates": names})
        self._gates = list(gates)
        self._notify = notify_callback

    @classmethod
    def from_config(
        cls,
        install: InstallConfig,
        environment: EnvironmentProbe | None = None,
        network: NetworkProbe | None = None,
        filesystem: FileSystem | None = None,
        notify_callback: GateCallback | None = None,
    ) -> "DeploymentEngine":
        """Build an engine with the standard gates and system capabilities."""
        gates = default_gates(
            install,
            environment or SystemEnvironmentProbe(),
            network or TcpNetworkProbe(timeout=install.probe_timeout),
            filesystem or LocalFileSystem(),
        )
        return cls(gates, notify_callback=notify_callback)

    @property
    def gate_names(self) -> list[str]:
        return [gate.name for gate in self._gates]

    def run(self, request: DeploymentRequest) -> DeploymentReport:
        """Execute the deployment.

        Args:
            request: Source file, target host and dry-run flag

        Returns:
            Report describing the outcome and every gate evaluated
        """
        log = logger.bind(target=request.target, source=request.source)
        run = DeploymentRun(request=request)
        started_at = datetime.now(timezone.utc)
        start = time.monotonic()
        status = DeploymentStatus.DRY_RUN if request.dry_run else DeploymentStatus.SUCCEEDED

        for number, gate in enumerate(self._gates, start=1):
            log.debug("Evaluating gate", gate=gate.name)
            gate_start = time.monotonic()
            result = gate.evaluate(run)
            record = GateRecord(
                number=number,
                name=gate.name,
                result=result,
                duration=time.monotonic() - gate_start,
            )
            run.records.append(record)

            if self._notify:
                self._notify(record)

            if not result.passed:
                log.warning(
                    "Gate failed",
                    gate=gate.name,
                    kind=result.kind.value if result.kind else None,
                    detail=result.detail,
                )
                status = DeploymentStatus.FAILED
                break

            if result.skipped:
                log.info("Gate skipped", gate=gate.name, detail=result.detail)
            else:
                log.info("Gate passed", gate=gate.name, detail=result.detail)

        report = DeploymentReport(
            request=request,
            status=status,
            is_local=run.is_local,
            install_path=run.install_path,
            destination=run.destination,
            gates=run.records,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            duration=time.monotonic() - start,
        )
        log.info("Deployment finished", status=status.value)
        return report
