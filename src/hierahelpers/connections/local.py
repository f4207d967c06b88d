"""
Hierahelpers Local Connection

Run commands and copy files on the machine running the tests.
"""

import asyncio
import logging
import shutil
from pathlib import Path

from hierahelpers.connections.base import Connection, RunResult

logger = logging.getLogger(__name__)


class LocalConnection(Connection):
    """Local connection: "remote" paths are plain local paths."""

    async def connect(self) -> None:
        """Local connection is always available."""

    async def close(self) -> None:
        """Nothing to close for local connection."""

    async def run(self, command: str) -> RunResult:
        """Run a command through the local shell."""
        logger.debug("[%s] run: %s", self.host.name, command)
        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return RunResult(rc=1, stdout="", stderr=str(e))

        stdout_bytes, stderr_bytes = await process.communicate()
        return RunResult(
            rc=process.returncode or 0,
            stdout=stdout_bytes.decode('utf-8', errors='replace'),
            stderr=stderr_bytes.decode('utf-8', errors='replace'),
        )

    async def put(self, local_path: Path, remote_path: str) -> None:
        dest = Path(remote_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(local_path, dest)

    async def put_dir(self, local_path: Path, remote_path: str) -> None:
        """Copy a directory tree, merging into an existing target."""
        dest = Path(remote_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(local_path, dest, dirs_exist_ok=True)
