"""
Hierahelpers SSH Connection (asyncssh)

SSH connection using asyncssh, with SFTP for file transfer.
"""

import logging
import os
import posixpath
from pathlib import Path
from typing import Any, Dict, Optional

import asyncssh

from hierahelpers.config import get_config
from hierahelpers.connections.base import Connection, RunResult
from hierahelpers.errors import ConnectionError

logger = logging.getLogger(__name__)


class SSHConnection(Connection):
    """
    SSH connection using asyncssh.

    Host settings used:
    - ``ip`` / ``port`` / ``user``
    - ``ssh_key``: private key file
    - ``password``
    - ``host_key_checking``: false disables known_hosts verification
    - ``ssh_timeout``: connect timeout, defaults to the configured one
    """

    def __init__(self, host):
        super().__init__(host)
        self._conn: Optional[asyncssh.SSHClientConnection] = None
        self._sftp: Optional[asyncssh.SFTPClient] = None

    def connect_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``asyncssh.connect``."""
        options: Dict[str, Any] = {
            'host': self.host.address,
            'port': self.host.port,
            'username': self.host.user or os.getenv('USER', 'root'),
            'connect_timeout': int(self.host.get_variable('ssh_timeout', get_config().connect_timeout)),
        }

        private_key = self.host.get_variable('ssh_key')
        if private_key:
            options['client_keys'] = [os.path.expanduser(private_key)]

        password = self.host.get_variable('password')
        if password:
            options['password'] = password

        host_key_checking = self.host.get_variable('host_key_checking', True)
        if not host_key_checking or str(host_key_checking).lower() in ('false', 'no'):
            options['known_hosts'] = None

        return options

    async def connect(self) -> None:
        logger.debug("[%s] connecting to %s:%s", self.host.name, self.host.address, self.host.port)
        try:
            self._conn = await asyncssh.connect(**self.connect_options())
        except (OSError, asyncssh.Error) as e:
            raise ConnectionError(
                host=self.host.name,
                message=str(e),
                connection_type='ssh'
            )

    async def close(self) -> None:
        if self._sftp:
            self._sftp.exit()
            self._sftp = None

        if self._conn:
            self._conn.close()
            await self._conn.wait_closed()
            self._conn = None

    async def run(self, command: str) -> RunResult:
        """Run a command through ``/bin/sh`` on the remote host."""
        if not self._conn:
            return RunResult(rc=1, stdout="", stderr="Not connected")

        logger.debug("[%s] run: %s", self.host.name, command)
        result = await self._conn.run(f"/bin/sh -c {_shell_quote(command)}", check=False)
        return RunResult(
            rc=result.exit_status or 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    async def _get_sftp(self) -> asyncssh.SFTPClient:
        if self._conn is None:
            raise ConnectionError(host=self.host.name, message="Not connected", connection_type='ssh')
        if self._sftp is None:
            self._sftp = await self._conn.start_sftp_client()
        return self._sftp

    async def put(self, local_path: Path, remote_path: str) -> None:
        sftp = await self._get_sftp()
        await sftp.makedirs(posixpath.dirname(remote_path) or '/', exist_ok=True)
        await sftp.put(str(local_path), remote_path)

    async def put_dir(self, local_path: Path, remote_path: str) -> None:
        # SFTP put of a directory onto an existing one nests it; copy the
        # entries instead so both connection types merge the same way.
        sftp = await self._get_sftp()
        target = remote_path.rstrip('/') or '/'
        await sftp.makedirs(posixpath.dirname(target) or '/', exist_ok=True)

        if await sftp.isdir(target):
            for entry in sorted(Path(local_path).iterdir()):
                await sftp.put(str(entry), posixpath.join(target, entry.name), recurse=True)
        else:
            await sftp.put(str(local_path), target, recurse=True)


def _shell_quote(s: str) -> str:
    """Quote a string for shell use."""
    return "'" + s.replace("'", "'\"'\"'") + "'"
