# Copyright (c) 2024 Hierahelpers Contributors
# MIT License

"""
Hierahelpers: Hiera provisioning helpers for Puppet acceptance tests.

Writes Hiera configuration files and data directories onto test hosts,
either the local machine or remote hosts over SSH.

Features:
    - hiera.yaml generation for AIO and legacy Puppet layouts
    - Inline hieradata staged through temporary directories
    - Authoritative data directory replacement (delete, then copy)
    - pytest plugin that cleans staged data after each test group
"""

from __future__ import annotations

from hierahelpers.release import __version__, __author__
from hierahelpers.hiera import HieraHelpers
from hierahelpers.inventory import Host, Inventory
from hierahelpers.session import HieraSession

__all__ = [
    "__version__",
    "__author__",
    "HieraHelpers",
    "HieraSession",
    "Host",
    "Inventory",
]
