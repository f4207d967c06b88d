"""
Hierahelpers Configuration

Process-wide settings for the Hiera helpers and the pytest plugin.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from hierahelpers.errors import ConfigError


@dataclass
class HieraConfig:
    """
    Configuration for Hiera provisioning.

    Attributes:
        hosts_file: Path to the hosts file used by the pytest plugin
        tmp_prefix: Prefix for local hieradata staging directories
        apply_exit_codes: Acceptable exit codes for ``puppet apply``
        connect_timeout: Seconds to wait when opening an SSH connection
        log_level: Level for the package logger
    """

    hosts_file: Optional[str] = None
    tmp_prefix: str = "hieradata"
    # --detailed-exitcodes: 0 = no changes, 2 = changes applied
    apply_exit_codes: Tuple[int, ...] = field(default=(0, 2))
    connect_timeout: int = 30
    log_level: str = "WARNING"

def _int_setting(env: Mapping[str, str], name: str) -> int:
    try:
        return int(env[name])
    except ValueError:
        raise ConfigError(name, env[name], "expected an integer")


def load_from_env(environ: Optional[Mapping[str, str]] = None) -> HieraConfig:
    """
    Build a configuration from ``HIERAHELPERS_*`` environment variables.

    Raises:
        ConfigError: a variable holds a value that cannot be parsed
    """
    env = os.environ if environ is None else environ
    config = HieraConfig()

    if env.get("HIERAHELPERS_HOSTS"):
        config.hosts_file = env["HIERAHELPERS_HOSTS"]
    if env.get("HIERAHELPERS_TMP_PREFIX"):
        config.tmp_prefix = env["HIERAHELPERS_TMP_PREFIX"]
    if env.get("HIERAHELPERS_APPLY_EXIT_CODES"):
        raw = env["HIERAHELPERS_APPLY_EXIT_CODES"]
        try:
            config.apply_exit_codes = tuple(int(code) for code in raw.split(",") if code.strip())
        except ValueError:
            raise ConfigError("HIERAHELPERS_APPLY_EXIT_CODES", raw, "expected comma separated integers")
    if env.get("HIERAHELPERS_CONNECT_TIMEOUT"):
        config.connect_timeout = _int_setting(env, "HIERAHELPERS_CONNECT_TIMEOUT")
    if env.get("HIERAHELPERS_LOG_LEVEL"):
        config.log_level = env["HIERAHELPERS_LOG_LEVEL"].upper()

    return config


# Loaded from the environment on first use
_config: Optional[HieraConfig] = None


def get_config() -> HieraConfig:
    """Get the current configuration."""
    global _config
    if _config is None:
        _config = load_from_env()
    return _config


def set_config(config: Optional[HieraConfig]) -> None:
    """Set the configuration; ``None`` reloads it from the environment on next use."""
    global _config
    _config = config


def configure(**kwargs) -> None:
    """Update individual configuration settings."""
    config = get_config()
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(f"Unknown configuration setting: {key}")
        setattr(config, key, value)
