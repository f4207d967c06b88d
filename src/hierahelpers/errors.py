# Copyright (c) 2024 Hierahelpers Contributors
# MIT License

"""
Hierahelpers Error Classes.

Errors raised by the host layer (hosts file, connections, remote commands).
The Hiera helpers themselves never catch or translate these.
"""

from __future__ import annotations


class HieraHelpersError(Exception):
    """Base exception for all hierahelpers errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class HostsFileError(HieraHelpersError):
    """Error loading or parsing a hosts file."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: str | None = None,
    ) -> None:
        self.file_path = file_path
        location = f" in {file_path}" if file_path else ""
        super().__init__(f"Hosts file error{location}: {message}", details)


class HostResolutionError(HieraHelpersError):
    """A role or host name did not match any host."""

    def __init__(self, target: str, message: str | None = None) -> None:
        self.target = target
        super().__init__(message or f"No hosts match {target!r}")


class ConnectionError(HieraHelpersError):
    """Error connecting to a host."""

    def __init__(
        self,
        host: str,
        message: str,
        connection_type: str | None = None,
        details: str | None = None,
    ) -> None:
        self.host = host
        self.connection_type = connection_type
        conn_info = f" ({connection_type})" if connection_type else ""
        super().__init__(f"Connection to {host}{conn_info} failed: {message}", details)


class CommandError(HieraHelpersError):
    """A remote command exited with an unacceptable exit code."""

    def __init__(
        self,
        host: str,
        command: str,
        rc: int,
        stdout: str | None = None,
        stderr: str | None = None,
    ) -> None:
        self.host = host
        self.command = command
        self.rc = rc
        self.stdout = stdout
        self.stderr = stderr

        details_parts = [f"rc={rc}"]
        if stderr:
            details_parts.append(f"stderr: {stderr[:200]}")

        super().__init__(
            f"Command failed on {host}: {command}",
            "; ".join(details_parts),
        )


class ConfigError(HieraHelpersError):
    """A configuration environment variable holds an invalid value."""

    def __init__(self, variable: str, value: str, message: str) -> None:
        self.variable = variable
        self.value = value
        super().__init__(f"Invalid {variable}={value!r}: {message}")
