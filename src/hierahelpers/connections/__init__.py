"""
Hierahelpers Connections Module

Connection plugins for the local machine and SSH.
"""

from hierahelpers.connections.base import Connection, RunResult, create_connection
from hierahelpers.connections.local import LocalConnection

__all__ = [
    'Connection',
    'RunResult',
    'LocalConnection',
    'create_connection',
]
