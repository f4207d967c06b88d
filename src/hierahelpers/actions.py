"""
Hierahelpers host actions

The host primitives the Hiera helpers are built from: write a file,
copy a directory, and apply a Puppet manifest.
"""

import logging
import os
import shlex
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

from hierahelpers.config import get_config
from hierahelpers.connections.base import Connection, RunResult
from hierahelpers.errors import CommandError

logger = logging.getLogger(__name__)


async def create_remote_file(conn: Connection, path: str, content: str) -> None:
    """
    Write ``content`` to ``path`` on the connection's host.

    The content is staged in a local temporary file and uploaded, replacing
    whatever was at ``path``.
    """
    with tempfile.NamedTemporaryFile(mode='w', delete=False, suffix='.tmp', newline='\n', encoding='utf-8') as f:
        f.write(content)
        temp_path = Path(f.name)

    try:
        logger.debug("[%s] writing %d bytes to %s", conn.host.name, len(content), path)
        await conn.put(temp_path, path)
    finally:
        temp_path.unlink(missing_ok=True)


async def scp_to(conn: Connection, source: Union[str, Path], dest: str) -> None:
    """Copy a local file or directory to ``dest`` on the connection's host."""
    source_path = Path(source)

    if source_path.is_dir():
        logger.debug("[%s] copying directory %s to %s", conn.host.name, source_path, dest)
        await conn.put_dir(source_path, dest)
    elif source_path.is_file():
        logger.debug("[%s] copying file %s to %s", conn.host.name, source_path, dest)
        await conn.put(source_path, dest)
    else:
        raise FileNotFoundError(f"Source not found: {source_path}")


def puppet_apply_command(manifest: str, puppetbindir: Optional[str] = None) -> str:
    """Build the ``puppet apply`` command line for an inline manifest."""
    puppet = os.path.join(puppetbindir, 'puppet') if puppetbindir else 'puppet'
    return f"{shlex.quote(puppet)} apply --detailed-exitcodes -e {shlex.quote(manifest)}"


async def apply_manifest_on(
    conn: Connection,
    manifest: str,
    acceptable_exit_codes: Optional[Iterable[int]] = None,
) -> RunResult:
    """
    Apply an inline Puppet manifest on the connection's host.

    Args:
        conn: Open connection to the host
        manifest: Puppet DSL source
        acceptable_exit_codes: Exit codes treated as success
            (defaults to the configured ``apply_exit_codes``)

    Returns:
        RunResult of the ``puppet apply`` run

    Raises:
        CommandError: puppet exited with an unacceptable code
    """
    if acceptable_exit_codes is None:
        acceptable_exit_codes = get_config().apply_exit_codes
    acceptable = set(acceptable_exit_codes)

    command = puppet_apply_command(manifest, conn.host.puppetbindir)
    logger.debug("[%s] applying manifest: %s", conn.host.name, manifest)
    result = await conn.run(command)

    if result.rc not in acceptable:
        raise CommandError(
            host=conn.host.name,
            command=command,
            rc=result.rc,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result
