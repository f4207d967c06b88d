"""
Hierahelpers Inventory

Hosts under test and the hosts file they are loaded from.

A hosts file is YAML with a ``HOSTS`` mapping (one entry per host) and an
optional ``CONFIG`` mapping whose keys are used as defaults for every host:

    HOSTS:
      agent1:
        roles: [agent, default]
        type: aio
        ip: 10.0.0.5
    CONFIG:
      user: root
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from hierahelpers.errors import HostResolutionError, HostsFileError

logger = logging.getLogger(__name__)


# Puppet path layout by packaging type
PUPPET_DEFAULTS: Dict[str, Dict[str, Optional[str]]] = {
    'aio': {
        'codedir': '/etc/puppetlabs/code',
        'hieradatadir': '/etc/puppetlabs/code/hieradata',
        'hiera_config': '/etc/puppetlabs/puppet/hiera.yaml',
        'puppetbindir': '/opt/puppetlabs/bin',
    },
    'foss': {
        'codedir': '/etc/puppet',
        'hieradatadir': '/var/lib/hiera',
        'hiera_config': '/etc/puppet/hiera.yaml',
        'puppetbindir': None,
    },
}

DEFAULT_TYPE = 'aio'


class Host:
    """A host under test."""

    def __init__(
        self,
        name: str,
        roles: Optional[List[str]] = None,
        variables: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a Host.

        Args:
            name: Host label from the hosts file
            roles: Roles this host plays (``default``, ``master``, ``agent``...)
            variables: Host settings (type, ip, user, puppet paths...)
        """
        self.name = name
        self.roles: List[str] = list(roles) if roles else []
        self.vars: Dict[str, Any] = variables.copy() if variables else {}

    @property
    def host_type(self) -> str:
        """Packaging type identifier (``aio``, ``foss``, ``pe``...)."""
        return str(self.vars.get('type', DEFAULT_TYPE))

    @property
    def is_aio(self) -> bool:
        return 'aio' in self.host_type

    def _puppet_setting(self, key: str) -> Optional[str]:
        if self.vars.get(key) is not None:
            return self.vars[key]
        layout = 'aio' if self.is_aio else 'foss'
        return PUPPET_DEFAULTS[layout][key]

    @property
    def codedir(self) -> str:
        return self._puppet_setting('codedir')

    @property
    def hieradatadir(self) -> str:
        """Legacy (non-AIO) Hiera data directory."""
        return self._puppet_setting('hieradatadir')

    @property
    def hiera_config(self) -> str:
        return self._puppet_setting('hiera_config')

    @property
    def puppetbindir(self) -> Optional[str]:
        return self._puppet_setting('puppetbindir')

    @property
    def address(self) -> str:
        """Get the actual address to connect to (ip or name)."""
        return self.vars.get('ip') or self.vars.get('vmhostname') or self.name

    @property
    def port(self) -> int:
        return int(self.vars.get('port', 22))

    @property
    def user(self) -> Optional[str]:
        return self.vars.get('user')

    @property
    def connection(self) -> str:
        """Get the connection type (ssh, local)."""
        return self.vars.get('connection', 'ssh')

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def get_variable(self, key: str, default: Any = None) -> Any:
        """Get a host variable."""
        return self.vars.get(key, default)

    def __repr__(self) -> str:
        return f"Host({self.name!r}, roles={self.roles})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Host):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


HostTarget = Union[Host, str, Iterable[Any]]


class Inventory:
    """
    The set of hosts available to a test run.

    Resolves roles and host names to hosts and picks the default host.
    """

    def __init__(self, hosts: Optional[Iterable[Host]] = None):
        self.hosts: Dict[str, Host] = {}
        for host in hosts or []:
            self.add_host(host)

    def add_host(self, host: Host) -> None:
        if host.name in self.hosts:
            raise HostsFileError(f"Duplicate host: {host.name}")
        self.hosts[host.name] = host

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'Inventory':
        """Load an inventory from a YAML hosts file."""
        source = Path(os.path.expanduser(str(path)))
        if not source.is_file():
            raise HostsFileError("File does not exist", file_path=str(source))

        try:
            data = yaml.safe_load(source.read_text(encoding='utf-8'))
        except yaml.YAMLError as e:
            raise HostsFileError("Invalid YAML", file_path=str(source), details=str(e))

        logger.debug("Loading hosts file %s", source)
        return cls.from_dict(data, file_path=str(source))

    @classmethod
    def from_dict(cls, data: Any, file_path: Optional[str] = None) -> 'Inventory':
        """Build an inventory from parsed hosts file data."""
        if not isinstance(data, dict) or not isinstance(data.get('HOSTS'), dict):
            raise HostsFileError("Expected a 'HOSTS' mapping", file_path=file_path)

        defaults = data.get('CONFIG') or {}
        if not isinstance(defaults, dict):
            raise HostsFileError("'CONFIG' must be a mapping", file_path=file_path)

        inventory = cls()
        for name, settings in data['HOSTS'].items():
            settings = settings or {}
            if not isinstance(settings, dict):
                raise HostsFileError(f"Host {name!r} must be a mapping", file_path=file_path)

            variables = dict(defaults)
            variables.update(settings)
            roles = variables.pop('roles', None) or []
            if isinstance(roles, str):
                roles = [roles]
            if not isinstance(roles, list):
                raise HostsFileError(f"Roles of host {name!r} must be a list", file_path=file_path)

            inventory.add_host(Host(str(name), roles=[str(r) for r in roles], variables=variables))

        return inventory

    def hosts_with_role(self, role: str) -> List[Host]:
        return [h for h in self.hosts.values() if h.has_role(role)]

    @property
    def default(self) -> Host:
        """
        The host used by the single-host helper forms.

        The host with the ``default`` role, else the ``master``, else the
        only host in the inventory.
        """
        for role in ('default', 'master'):
            matches = self.hosts_with_role(role)
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                raise HostResolutionError(role, f"More than one host has the {role!r} role")

        if len(self.hosts) == 1:
            return next(iter(self.hosts.values()))

        raise HostResolutionError('default', "No default host could be determined")

    def resolve(self, target: HostTarget) -> List[Host]:
        """
        Resolve a target to a list of hosts.

        Supported targets:
        - a Host
        - a role name (all hosts with that role)
        - a host name
        - any iterable of the above

        Returns:
            Hosts in order of first appearance, without duplicates
        """
        if isinstance(target, Host):
            return [target]

        if isinstance(target, str):
            matches = self.hosts_with_role(target)
            if matches:
                return matches
            if target in self.hosts:
                return [self.hosts[target]]
            raise HostResolutionError(target)

        if target is None:
            raise HostResolutionError('None', "No hosts given")

        result: List[Host] = []
        for item in target:
            for host in self.resolve(item):
                if host not in result:
                    result.append(host)
        if not result:
            raise HostResolutionError(repr(target), "No hosts given")
        return result

    def __len__(self) -> int:
        return len(self.hosts)

    def __iter__(self):
        return iter(self.hosts.values())

    def __repr__(self) -> str:
        return f"Inventory(hosts={list(self.hosts)})"
