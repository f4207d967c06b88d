"""
Local Integration Tests

Provision Hiera data on the local machine through a real ``puppet apply``.
Skipped when puppet is not installed.
"""

import os
import shutil

import pytest
import yaml

from hierahelpers.hiera import HieraHelpers
from hierahelpers.inventory import Inventory
from hierahelpers.session import HieraSession

PUPPET = shutil.which("puppet")
SKIP_PUPPET = "puppet not installed"

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(PUPPET is None, reason=SKIP_PUPPET),
]


@pytest.fixture
def local_inventory(tmp_path):
    return Inventory.from_dict({
        "HOSTS": {
            "localhost": {
                "roles": ["default"],
                "connection": "local",
                "type": "foss",
                "hieradatadir": str(tmp_path / "hieradata"),
                "hiera_config": str(tmp_path / "etc" / "hiera.yaml"),
                "puppetbindir": os.path.dirname(PUPPET or ""),
            },
        },
    })


@pytest.fixture
def helpers(local_inventory):
    session = HieraSession()
    session.setup()
    yield HieraHelpers(local_inventory, session=session)
    session.teardown()


class TestLocalProvisioning:
    """End-to-end provisioning on localhost."""

    @pytest.mark.asyncio
    async def test_set_hieradata(self, helpers, tmp_path):
        await helpers.set_hieradata_on("localhost", {"foo": "bar"})

        datadir = tmp_path / "hieradata"
        assert os.listdir(datadir) == ["default.yaml"]
        assert yaml.safe_load((datadir / "default.yaml").read_text()) == {"foo": "bar"}

        config = yaml.safe_load((tmp_path / "etc" / "hiera.yaml").read_text())
        assert config["hierarchy"] == ["default"]
        assert config["yaml"]["datadir"] == str(datadir)

    @pytest.mark.asyncio
    async def test_replaces_previous_data(self, helpers, tmp_path):
        await helpers.set_hieradata_on("localhost", {"first": 1}, "one")
        await helpers.set_hieradata_on("localhost", {"second": 2}, "two")

        assert os.listdir(tmp_path / "hieradata") == ["two.yaml"]

    @pytest.mark.asyncio
    async def test_copy_missing_datadir(self, helpers, tmp_path):
        source = tmp_path / "source"
        source.mkdir()
        (source / "common.yaml").write_text("a: 1\n")

        await helpers.copy_hiera_data(source)

        assert os.listdir(tmp_path / "hieradata") == ["common.yaml"]
