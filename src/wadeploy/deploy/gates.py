"""Deployment gates.

A gate inspects the current ``DeploymentRun`` and returns a ``GateResult``.
Gates that pass may record what they learned (locality, install path) on the
run for the gates after them. Gates never raise for expected failures; they
classify them into a ``FailureKind``.
"""

import os
from abc import ABC, abstractmethod

from wadeploy.config import InstallConfig
from wadeploy.deploy.models import DeploymentRun, FailureKind, GateResult
from wadeploy.deploy.probes import EnvironmentProbe, FileSystem, NetworkProbe


class Gate(ABC):
    """A single precondition or action in the deployment workflow."""

    name: str = ""

    @abstractmethod
    def evaluate(self, run: DeploymentRun) -> GateResult:
        pass


class FilenameGate(Gate):
    """Reject any source file whose name is not the expected config file name."""

    name = "filename"

    def __init__(self, install: InstallConfig):
        self._install = install

    def evaluate(self, run: DeploymentRun) -> GateResult:
        basename = os.path.basename(run.request.source)
        if os.path.normcase(basename) != os.path.normcase(self._install.filename):
            return GateResult.fail(
                FailureKind.INVALID_FILENAME,
                f"Source file must be named {self._install.filename}, got '{basename}'",
            )
        return GateResult.ok(basename)


class PrivilegeGate(Gate):
    name = "privilege"

    def __init__(self, environment: EnvironmentProbe):
        self._environment = environment

    def evaluate(self, run: DeploymentRun) -> GateResult:
        if not self._environment.is_elevated():
            return GateResult.fail(
                FailureKind.INSUFFICIENT_PRIVILEGE,
                "Administrative privileges are required; re-run from an elevated shell",
            )
        return GateResult.ok("elevated")


class LocalityGate(Gate):
    """Classify the target as this machine or a remote host.

    Matching is exact string membership; the target is never resolved.
    """

    name = "locality"

    def __init__(self, environment: EnvironmentProbe):
        self._environment = environment

    def evaluate(self, run: DeploymentRun) -> GateResult:
        identities = self._environment.local_identities()
        run.is_local = run.request.target in identities
        return GateResult.ok("local" if run.is_local else "remote")


class ConnectivityGate(Gate):
    """Probe the file-sharing port on remote targets."""

    name = "connectivity"

    def __init__(self, network: NetworkProbe, install: InstallConfig):
        self._network = network
        self._install = install

    def evaluate(self, run: DeploymentRun) -> GateResult:
        if run.is_local:
            return GateResult.skip("local target")

        host = run.request.target
        port = self._install.remote_port
        if not self._network.is_reachable(host, port):
            return GateResult.fail(
                FailureKind.REMOTE_UNREACHABLE,
                f"Cannot reach {host} on TCP port {port}",
            )
        return GateResult.ok(f"{host}:{port} reachable")


class InstallPathGate(Gate):
    """Resolve the install directory and check that it can be reached."""

    name = "install-path"

    def __init__(self, filesystem: FileSystem, install: InstallConfig):
        self._filesystem = filesystem
        self._install = install

    def resolve(self, run: DeploymentRun) -> str:
        if run.is_local:
            return self._install.local_dir
        return self._install.remote_dir(run.request.target)

    def evaluate(self, run: DeploymentRun) -> GateResult:
        run.install_path = self.resolve(run)
        if not self._filesystem.is_accessible_dir(run.install_path):
            return GateResult.fail(
                FailureKind.INSTALL_PATH_INACCESSIBLE,
                f"Install path is not accessible: {run.install_path}",
            )
        return GateResult.ok(run.install_path)


class CopyGate(Gate):
    name = "copy"

    def __init__(self, filesystem: FileSystem):
        self._filesystem = filesystem

    def evaluate(self, run: DeploymentRun) -> GateResult:
        if run.request.dry_run:
            return GateResult.skip("dry run")
        try:
            copied = self._filesystem.copy(run.request.source, run.install_path)
        except OSError as e:
            return GateResult.fail(
                FailureKind.COPY_FAILED,
                f"Copy to {run.install_path} failed: {e}",
            )
        return GateResult.ok(str(copied))


class VerifyGate(Gate):
    """Confirm the file is present at the destination after copying."""

    name = "verify"

    def __init__(self, filesystem: FileSystem, install: InstallConfig):
        self._filesystem = filesystem
        self._install = install

    def evaluate(self, run: DeploymentRun) -> GateResult:
        run.destination = os.path.join(run.install_path, self._install.filename)
        if run.request.dry_run:
            return GateResult.skip("dry run")
        if not self._filesystem.exists(run.destination):
            return GateResult.fail(
                FailureKind.VERIFICATION_FAILED,
                f"File not found at destination after copy: {run.destination}",
            )
        return GateResult.ok(run.destination)


def default_gates(
    install: InstallConfig,
    environment: EnvironmentProbe,
    network: NetworkProbe,
    filesystem: FileSystem,
) -> list[Gate]:
    """The deployment gates in evaluation order."""
    return [
        FilenameGate(install),
        PrivilegeGate(environment),
        LocalityGate(environment),
        ConnectivityGate(network, install),
        InstallPathGate(filesystem, install),
        CopyGate(filesystem),
        VerifyGate(filesystem, install),
    ]
