"""Host capabilities consumed by the deployment gates.

Each capability is an abstract base class with a system implementation, so
tests can supply fakes without touching real OS, network or disk state.
"""

import os
import shutil
import socket
import sys
from abc import ABC, abstractmethod

import psutil

from wadeploy.config import LOOPBACK_ALIAS
from wadeploy.core.logging import StructuredLogger

logger = StructuredLogger(__name__)


class EnvironmentProbe(ABC):
    """Facts about the machine and principal running the deployment."""

    @abstractmethod
    def local_identities(self) -> set[str]:
        """Strings that identify this machine: addresses, names, loopback alias."""
        pass

    @abstractmethod
    def is_elevated(self) -> bool:
        """Whether the current process holds administrative rights."""
        pass


class NetworkProbe(ABC):
    """TCP reachability checks."""

    @abstractmethod
    def is_reachable(self, host: str, port: int) -> bool:
        pass


class FileSystem(ABC):
    """Filesystem operations on local or network-mapped paths."""

    @abstractmethod
    def is_accessible_dir(self, path: str) -> bool:
        pass

    @abstractmethod
    def copy(self, source: str, directory: str) -> str:
        """Copy source into directory, overwriting. Raises OSError on failure."""
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass


class SystemEnvironmentProbe(EnvironmentProbe):
    """Environment probe backed by psutil interface data and the OS user APIs."""

    def local_identities(self) -> set[str]:
        identities = {LOOPBACK_ALIAS, socket.gethostname()}
        fqdn = socket.getfqdn()
        if fqdn:
            identities.add(fqdn)
        identities.update(self.interface_addresses())
        return identities

    def interface_addresses(self) -> set[str]:
        """IPv4 and IPv6 addresses bound to any local interface, scope id removed."""
        addresses = set()
        for entries in psutil.net_if_addrs().values():
            for entry in entries:
                if entry.family not in (socket.AF_INET, socket.AF_INET6):
                    continue
                addresses.add(entry.address.split("%", 1)[0])
        return addresses

    def is_elevated(self) -> bool:
        if sys.platform == "win32":
            import ctypes

            try:
                return bool(ctypes.windll.shell32.IsUserAnAdmin())
            except (AttributeError, OSError) as e:
                logger.warning("Could not determine administrator status", error=str(e))
                return False
        return os.geteuid() == 0


class TcpNetworkProbe(NetworkProbe):
    """Probe reachability by opening a TCP connection."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def is_reachable(self, host: str, port: int) -> bool:
        try:
            with socket.create_connection((host, port), timeout=self.timeout):
                return True
        except (OSError, UnicodeError) as e:
            # UnicodeError: host name the idna codec rejects
            logger.debug("TCP probe failed", host=host, port=port, error=str(e))
            return False


class LocalFileSystem(FileSystem):
    """Filesystem operations through os and shutil.

    UNC paths such as ``\\\\host\\c$\\...`` are handed to the OS unchanged.
    """

    def is_accessible_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def copy(self, source: str, directory: str) -> str:
        return shutil.copy(source, directory)

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)
