"""
Tests for host actions.
"""

import shlex
from pathlib import Path

import pytest
from unittest.mock import AsyncMock, MagicMock

from hierahelpers.actions import apply_manifest_on, create_remote_file, puppet_apply_command, scp_to
from hierahelpers.connections.base import RunResult
from hierahelpers.errors import CommandError
from hierahelpers.inventory import Host


def mock_connection(host: Host, rc: int = 0):
    conn = MagicMock()
    conn.host = host
    conn.run = AsyncMock(return_value=RunResult(rc=rc, stdout="", stderr="Error: bad" if rc else ""))
    conn.put = AsyncMock()
    conn.put_dir = AsyncMock()
    return conn


class TestCreateRemoteFile:
    """Tests for create_remote_file."""

    @pytest.mark.asyncio
    async def test_uploads_content(self):
        uploaded = {}

        async def fake_put(local_path, remote_path):
            uploaded[remote_path] = Path(local_path).read_text(encoding="utf-8")

        conn = mock_connection(Host("h"))
        conn.put = AsyncMock(side_effect=fake_put)

        await create_remote_file(conn, "/etc/puppet/hiera.yaml", "---\nlogger: console\n")

        assert uploaded == {"/etc/puppet/hiera.yaml": "---\nlogger: console\n"}

    @pytest.mark.asyncio
    async def test_temp_file_removed(self):
        conn = mock_connection(Host("h"))

        await create_remote_file(conn, "/x", "data")

        local_path = conn.put.call_args[0][0]
        assert not Path(local_path).exists()

    @pytest.mark.asyncio
    async def test_put_error_propagates(self):
        conn = mock_connection(Host("h"))
        conn.put = AsyncMock(side_effect=PermissionError("denied"))

        with pytest.raises(PermissionError):
            await create_remote_file(conn, "/x", "data")

        assert not Path(conn.put.call_args[0][0]).exists()


class TestScpTo:
    """Tests for scp_to."""

    @pytest.mark.asyncio
    async def test_directory(self, tmp_path):
        conn = mock_connection(Host("h"))
        await scp_to(conn, tmp_path, "/dest")
        conn.put_dir.assert_awaited_once_with(tmp_path, "/dest")
        conn.put.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_file(self, tmp_path):
        source = tmp_path / "a.yaml"
        source.write_text("a: 1\n")
        conn = mock_connection(Host("h"))
        await scp_to(conn, str(source), "/dest/a.yaml")
        conn.put.assert_awaited_once_with(source, "/dest/a.yaml")

    @pytest.mark.asyncio
    async def test_missing_source(self, tmp_path):
        conn = mock_connection(Host("h"))
        with pytest.raises(FileNotFoundError):
            await scp_to(conn, tmp_path / "missing", "/dest")


class TestApplyManifest:
    """Tests for apply_manifest_on."""

    def test_command_uses_bindir(self):
        command = puppet_apply_command("notify { 'hi': }", "/opt/puppetlabs/bin")
        assert shlex.split(command) == [
            "/opt/puppetlabs/bin/puppet", "apply", "--detailed-exitcodes", "-e", "notify { 'hi': }",
        ]

    def test_command_without_bindir(self):
        assert shlex.split(puppet_apply_command("x"))[0] == "puppet"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rc", [0, 2])
    async def test_success_codes(self, rc):
        conn = mock_connection(Host("h", variables={"type": "foss"}), rc=rc)
        result = await apply_manifest_on(conn, "notify { 'hi': }")
        assert result.rc == rc
        command = conn.run.call_args[0][0]
        assert shlex.split(command)[:2] == ["puppet", "apply"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rc", [1, 4, 6])
    async def test_failure_codes(self, rc):
        conn = mock_connection(Host("h"), rc=rc)
        with pytest.raises(CommandError) as exc_info:
            await apply_manifest_on(conn, "notify { 'hi': }")
        assert exc_info.value.rc == rc
        assert exc_info.value.host == "h"
        assert "stderr: Error: bad" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_custom_exit_codes(self):
        conn = mock_connection(Host("h"), rc=2)
        with pytest.raises(CommandError):
            await apply_manifest_on(conn, "x", acceptable_exit_codes=[0])
