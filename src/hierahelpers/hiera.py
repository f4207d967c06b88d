"""
Hierahelpers Hiera helpers

Write Hiera configuration and data onto hosts under test. Hiera must be
installed on the hosts for the written files to be of any use.
"""

import logging
import os
import posixpath
import re
import tempfile
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

import yaml

from hierahelpers.actions import apply_manifest_on, create_remote_file, scp_to
from hierahelpers.config import HieraConfig, get_config
from hierahelpers.connections.base import Connection, create_connection
from hierahelpers.inventory import Host, HostTarget, Inventory
from hierahelpers.session import HieraSession

logger = logging.getLogger(__name__)

AIO_TYPE_PATTERN = re.compile(r'aio')

DATADIR_ABSENT_MANIFEST = "file {{ '{datadir}': ensure => 'absent', force => true, recurse => true }}"


class HieraDumper(yaml.SafeDumper):
    """SafeDumper that writes any mapping as a map and any tuple as a list."""


def _represent_other(dumper: HieraDumper, data: Any) -> yaml.Node:
    if isinstance(data, Mapping):
        return dumper.represent_dict(data)
    if isinstance(data, tuple):
        return dumper.represent_list(data)
    return dumper.represent_undefined(data)


HieraDumper.add_representer(None, _represent_other)


def dump_yaml(data: Any) -> str:
    """Serialize ``data`` as a YAML document."""
    return yaml.dump(data, Dumper=HieraDumper, default_flow_style=False, explicit_start=True, sort_keys=False)


def _as_list(value: Union[str, Iterable[str]]) -> List[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


class HieraHelpers:
    """
    Helpers for provisioning Hiera on the hosts of an inventory.

    Methods ending in ``_on`` accept a Host, a role or host name, or a list
    of those. The short forms act on the inventory's default host.

    Example:
        helpers = HieraHelpers(inventory, session=HieraSession())
        await helpers.set_hieradata_on('agent', {'ntp::servers': ['pool.ntp.org']})
    """

    def __init__(
        self,
        inventory: Inventory,
        session: Optional[HieraSession] = None,
        connection_factory: Callable[[Host], Connection] = create_connection,
        config: Optional[HieraConfig] = None,
    ):
        self.inventory = inventory
        self.session = session
        self.connection_factory = connection_factory
        self._config = config

    @property
    def config(self) -> HieraConfig:
        return self._config or get_config()

    @property
    def default(self) -> Host:
        return self.inventory.default

    def hiera_datadir(self, host: Host) -> str:
        """
        Path to the Hiera data directory on ``host``.

        AIO hosts keep data under ``<codedir>/hieradata``; other hosts use
        their configured ``hieradatadir``.
        """
        if AIO_TYPE_PATTERN.search(host.host_type):
            return posixpath.join(host.codedir, 'hieradata')
        return host.hieradatadir

    def hiera_config_for(self, host: Host, hierarchy: Union[str, Iterable[str]]) -> Dict[str, Any]:
        """Build the hiera.yaml contents for ``host``."""
        return {
            'backends': 'yaml',
            'yaml': {
                'datadir': self.hiera_datadir(host),
            },
            'hierarchy': _as_list(hierarchy),
            'logger': 'console',
        }

    async def write_hiera_config_on(self, hosts: HostTarget, hierarchy: Union[str, Iterable[str]]) -> None:
        """
        Write the Hiera config file on one or more hosts.

        The file at each host's ``hiera_config`` path is replaced, never merged.

        Args:
            hosts: Hosts to act upon, or a role identifying them
            hierarchy: Hierarchy levels, in lookup order
        """
        levels = _as_list(hierarchy)
        for host in self.inventory.resolve(hosts):
            content = dump_yaml(self.hiera_config_for(host, levels))
            logger.info("[%s] writing hiera config %s (hierarchy=%s)", host.name, host.hiera_config, levels)
            async with self.connection_factory(host) as conn:
                await create_remote_file(conn, host.hiera_config, content)

    async def write_hiera_config(self, hierarchy: Union[str, Iterable[str]]) -> None:
        """Write the Hiera config file on the default host."""
        await self.write_hiera_config_on(self.default, hierarchy)

    async def set_hieradata_on(self, hosts: HostTarget, hieradata: Any, data_file: str = 'default') -> None:
        """
        Replace the Hiera data on one or more hosts with ``hieradata``.

        This is authoritative: the host's data directory ends up holding only
        ``<data_file>.yaml`` and the hierarchy only ``data_file``. It cannot
        be mixed with other hieradata copies.

        The local staging directory is kept until ``clear_temp_hieradata``
        so the generated data can be inspected while the group runs.

        Args:
            hosts: Hosts to act upon, or a role identifying them
            hieradata: The full data structure to write
            data_file: Name (not path) of the data file, without extension
        """
        targets = self.inventory.resolve(hosts)
        content = dump_yaml(hieradata)

        if self.session is None:
            self.session = HieraSession()

        data_dir = tempfile.mkdtemp(prefix=self.config.tmp_prefix)
        self.session.track(data_dir)

        with open(os.path.join(data_dir, f"{data_file}.yaml"), 'w', encoding='utf-8') as fh:
            fh.write(content)

        await self.copy_hiera_data_to(targets, data_dir)
        await self.write_hiera_config_on(targets, _as_list(data_file))

    def clear_temp_hieradata(self) -> None:
        """Remove every staging directory created by ``set_hieradata_on``."""
        if self.session is not None:
            self.session.clear()

    async def copy_hiera_data_to(self, hosts: HostTarget, source: Union[str, os.PathLike]) -> None:
        """
        Copy a directory of Hiera data files to one or more hosts.

        The host's data directory is removed first, so afterwards it mirrors
        ``source`` exactly; the copy alone would merge into what is there.

        Args:
            hosts: Hosts to act upon, or a role identifying them
            source: Local directory containing the data files
        """
        source_path = os.path.abspath(os.path.expanduser(os.fspath(source)))
        for host in self.inventory.resolve(hosts):
            datadir = self.hiera_datadir(host)
            logger.info("[%s] replacing hiera data %s with %s", host.name, datadir, source_path)
            async with self.connection_factory(host) as conn:
                await apply_manifest_on(
                    conn,
                    DATADIR_ABSENT_MANIFEST.format(datadir=datadir),
                    acceptable_exit_codes=self.config.apply_exit_codes,
                )
                await scp_to(conn, source_path, datadir)

    async def copy_hiera_data(self, source: Union[str, os.PathLike]) -> None:
        """Copy a directory of Hiera data files to the default host."""
        await self.copy_hiera_data_to(self.default, source)
