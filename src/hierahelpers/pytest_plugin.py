"""
pytest plugin for hierahelpers.

Provides fixtures that bind a HieraHelpers instance to each test group
(class, or module for module-level tests) and remove its staged hieradata
when the group finishes.

Hosts come from ``--hiera-hosts`` or the ``HIERAHELPERS_HOSTS`` environment
variable; tests requesting them are skipped when neither is set.
"""

import pytest

from hierahelpers.config import get_config
from hierahelpers.hiera import HieraHelpers
from hierahelpers.inventory import Inventory
from hierahelpers.log import configure_logging
from hierahelpers.session import HieraSession


def pytest_addoption(parser):
    group = parser.getgroup("hierahelpers")
    group.addoption(
        "--hiera-hosts",
        action="store",
        default=None,
        help="Hosts file describing the hosts to provision Hiera data on.",
    )


@pytest.fixture(scope="session")
def hiera_config():
    """The active hierahelpers configuration."""
    config = get_config()
    configure_logging(config.log_level)
    return config


@pytest.fixture(scope="session")
def hiera_inventory(request, hiera_config) -> Inventory:
    """Inventory loaded from the configured hosts file."""
    hosts_file = request.config.getoption("--hiera-hosts", default=None) or hiera_config.hosts_file
    if not hosts_file:
        pytest.skip("No hosts file configured (--hiera-hosts or HIERAHELPERS_HOSTS)")
    return Inventory.from_file(hosts_file)


@pytest.fixture(scope="class")
def hiera_session():
    """Staging directory tracking for one test group."""
    session = HieraSession()
    session.setup()
    yield session
    session.teardown()


@pytest.fixture(scope="class")
def hiera(hiera_inventory, hiera_session, hiera_config) -> HieraHelpers:
    """HieraHelpers bound to the inventory and the current group's session."""
    return HieraHelpers(hiera_inventory, session=hiera_session, config=hiera_config)
