"""Pytest fixtures for wadeploy tests."""

import os
from pathlib import Path
from typing import Generator

import pytest
from click.testing import CliRunner

from wadeploy.config import InstallConfig
from wadeploy.deploy.engine import DeploymentEngine
from wadeploy.deploy.probes import EnvironmentProbe, LocalFileSystem, NetworkProbe


class FakeEnvironment(EnvironmentProbe):
    """Environment with fixed identities and privilege."""

    def __init__(self, identities: set[str] | None = None, elevated: bool = True):
        self.identities = identities or {"localhost", "WS01", "192.168.1.10", "127.0.0.1"}
        self.elevated = elevated
        self.calls: list[str] = []

    def local_identities(self) -> set[str]:
        self.calls.append("local_identities")
        return set(self.identities)

    def is_elevated(self) -> bool:
        self.calls.append("is_elevated")
        return self.elevated


class FakeNetwork(NetworkProbe):
    """Network check that records every host and port asked about."""

    def __init__(self, reachable: bool = True):
        self.reachable = reachable
        self.checked: list[tuple[str, int]] = []

    def is_reachable(self, host: str, port: int) -> bool:
        self.checked.append((host, port))
        return self.reachable


class RecordingFileSystem(LocalFileSystem):
    """Real filesystem operations, with every call recorded."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    def is_accessible_dir(self, path: str) -> bool:
        self.calls.append(("is_accessible_dir", path))
        return super().is_accessible_dir(path)

    def copy(self, source: str, directory: str) -> str:
        self.calls.append(("copy", directory))
        return super().copy(source, directory)

    def exists(self, path: str) -> bool:
        self.calls.append(("exists", path))
        return super().exists(path)


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate tests from user config and WADEPLOY_* environment variables."""
    for key in list(os.environ):
        if key.startswith("WADEPLOY_"):
            monkeypatch.delenv(key)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def local_dir(tmp_path: Path) -> Path:
    """Existing local install directory."""
    path = tmp_path / "local" / "Modules" / "ReportHTML"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def remote_root(tmp_path: Path) -> Path:
    """Directory standing in for remote administrative shares."""
    path = tmp_path / "remote"
    path.mkdir()
    return path


@pytest.fixture
def install(local_dir: Path, remote_root: Path) -> InstallConfig:
    """Install settings pointing at temporary directories."""
    return InstallConfig(
        local_dir=str(local_dir),
        remote_path_template=str(remote_root / "{host}" / "Modules" / "ReportHTML"),
        probe_timeout=1.0,
    )


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """A correctly named source file containing 'X'."""
    src = tmp_path / "src"
    src.mkdir()
    path = src / "PowerStruxWAConfig.txt"
    path.write_text("X")
    return path


@pytest.fixture
def environment() -> FakeEnvironment:
    return FakeEnvironment()


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def filesystem() -> RecordingFileSystem:
    return RecordingFileSystem()


@pytest.fixture
def engine(
    install: InstallConfig,
    environment: FakeEnvironment,
    network: FakeNetwork,
    filesystem: RecordingFileSystem,
) -> DeploymentEngine:
    """Engine wired to fake environment and network, real temp filesystem."""
    return DeploymentEngine.from_config(
        install,
        environment=environment,
        network=network,
        filesystem=filesystem,
    )
