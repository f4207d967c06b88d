"""
Shared fixtures: a fake connection backed by a local directory.

Each fake host gets its own "remote" root under tmp_path; absolute remote
paths are mapped beneath it. ``puppet apply`` runs of a file-absent
manifest delete the mapped path, like Puppet would.
"""

import re
import shlex
import shutil
from pathlib import Path
from typing import Dict, List

import pytest

from hierahelpers.connections.base import Connection, RunResult
from hierahelpers.inventory import Host, Inventory

ABSENT_MANIFEST = re.compile(r"^file \{ '([^']+)': ensure => 'absent'")


class FakeConnection(Connection):
    """Records every call and applies file effects under a local root."""

    def __init__(self, host: Host, root: Path, calls: List[tuple], rc: int = 0):
        super().__init__(host)
        self.root = root
        self.calls = calls
        self.rc = rc

    def local(self, remote_path: str) -> Path:
        return self.root / remote_path.lstrip('/')

    async def connect(self) -> None:
        self.calls.append(('connect', self.host.name))

    async def close(self) -> None:
        self.calls.append(('close', self.host.name))

    async def run(self, command) -> RunResult:
        args = shlex.split(command)
        manifest = args[args.index('-e') + 1] if 'apply' in args and '-e' in args else None
        self.calls.append(('run', self.host.name, command, manifest))
        match = ABSENT_MANIFEST.search(manifest or '')
        if match and self.rc in (0, 2):
            shutil.rmtree(self.local(match.group(1)), ignore_errors=True)
        return RunResult(rc=self.rc, stdout="", stderr="boom" if self.rc not in (0, 2) else "")

    async def put(self, local_path, remote_path) -> None:
        self.calls.append(('put', self.host.name, remote_path))
        dest = self.local(remote_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(local_path, dest)

    async def put_dir(self, local_path, remote_path) -> None:
        self.calls.append(('put_dir', self.host.name, str(local_path), remote_path))
        shutil.copytree(local_path, self.local(remote_path), dirs_exist_ok=True)


class FakeHosts:
    """Connection factory handing out FakeConnections, one root per host."""

    def __init__(self, base: Path):
        self.base = base
        self.calls: List[tuple] = []
        self.rc: Dict[str, int] = {}

    def root(self, host_name: str) -> Path:
        return self.base / host_name

    def remote(self, host_name: str, remote_path: str) -> Path:
        return self.root(host_name) / remote_path.lstrip('/')

    def __call__(self, host: Host) -> FakeConnection:
        return FakeConnection(host, self.root(host.name), self.calls, rc=self.rc.get(host.name, 0))

    def calls_of(self, kind: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def fake_hosts(tmp_path: Path) -> FakeHosts:
    return FakeHosts(tmp_path / "hosts")


@pytest.fixture
def inventory() -> Inventory:
    """An AIO default host, a legacy agent and a second AIO agent."""
    return Inventory.from_dict({
        'HOSTS': {
            'master': {'roles': ['master', 'default'], 'type': 'aio'},
            'legacy': {'roles': ['agent'], 'type': 'foss', 'hieradatadir': '/var/lib/hiera'},
            'agent2': {'roles': ['agent'], 'type': 'aio', 'codedir': '/opt/code'},
        },
    })
