"""
Hierahelpers Connection Base Class

Abstract base class for all connection types.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from hierahelpers.inventory import Host


@dataclass
class RunResult:
    """Result of running a command on a host."""

    rc: int
    stdout: str
    stderr: str


class Connection(ABC):
    """
    A way of reaching one host.

    Implementations run shell commands and upload files and directory
    trees. Connections are async context managers: ``async with conn:``
    connects on entry and closes on exit.
    """

    def __init__(self, host: Host):
        self.host = host

    async def __aenter__(self) -> 'Connection':
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def connect(self) -> None:
        """Establish the connection."""

    @abstractmethod
    async def close(self) -> None:
        """Close the connection."""

    @abstractmethod
    async def run(self, command: str) -> RunResult:
        """Run a shell command on the host."""

    @abstractmethod
    async def put(self, local_path: Path, remote_path: str) -> None:
        """Upload a file, creating missing parent directories."""

    @abstractmethod
    async def put_dir(self, local_path: Path, remote_path: str) -> None:
        """
        Upload a directory tree to the host.

        When ``remote_path`` does not exist it becomes a copy of
        ``local_path``. Otherwise files are merged into it and nothing
        already there is removed.
        """


def create_connection(host: Host) -> Connection:
    """
    Create an unconnected connection for a host.

    The class is picked from the host's ``connection`` setting.
    """
    conn_type = host.connection

    if conn_type == 'local':
        from hierahelpers.connections.local import LocalConnection
        return LocalConnection(host)

    elif conn_type == 'ssh':
        from hierahelpers.connections.ssh_asyncssh import SSHConnection
        return SSHConnection(host)

    else:
        raise ValueError(f"Unknown connection type: {conn_type}")
