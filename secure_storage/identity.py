"""
Machine identity providers.

The master key mixes in whatever stable machine identity is available
(host name and current user name). Lookups are best-effort: any missing
value contributes an empty string so the derivation stays deterministic
on a given installation.

Public API
----------
IdentityProvider                 -- protocol: machine_identity() -> str
WindowsIdentityProvider          -- COMPUTERNAME + USERNAME
MacOSIdentityProvider            -- scutil ComputerName + USER
LinuxIdentityProvider            -- hostname(1) + USER
StaticIdentityProvider           -- fixed string (tests, unsupported platforms)
default_identity_provider()      -- provider for the running platform
"""
from __future__ import annotations

import os
import sys
import logging
import subprocess
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

logger = logging.getLogger("secure_storage")

# Seconds allowed for an external lookup command.
_COMMAND_TIMEOUT = 5


@runtime_checkable
class IdentityProvider(Protocol):
    """Anything able to describe the current machine as a string."""

    def machine_identity(self) -> str:
        ...


def _env(name: str) -> str:
    return os.environ.get(name, "")


def _command_output(cmd: Sequence[str]) -> str:
    """Run ``cmd`` and return its stripped stdout; empty string on failure."""
    try:
        proc = subprocess.run(
            list(cmd),
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=_COMMAND_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as err:
        logger.debug("Identity lookup %s unavailable: %s", cmd[0], err)
        return ""
    except UnicodeDecodeError:
        # a non UTF-8 host name contributes nothing
        logger.debug("Identity lookup %s printed non UTF-8 output", cmd[0])
        return ""
    if proc.returncode != 0:
        logger.debug("Identity lookup %s exited with %d", cmd[0], proc.returncode)
        return ""
    return (proc.stdout or "").strip()


class WindowsIdentityProvider:
    """Computer and user name from the Windows environment."""

    def machine_identity(self) -> str:
        return _env("COMPUTERNAME") + _env("USERNAME")


class MacOSIdentityProvider:
    """Computer name from ``scutil`` and the login user."""

    def machine_identity(self) -> str:
        hostname = _command_output(("scutil", "--get", "ComputerName"))
        return hostname + _env("USER")


class LinuxIdentityProvider:
    """Host name from ``hostname`` and the login user."""

    def machine_identity(self) -> str:
        return _command_output(("hostname",)) + _env("USER")


class StaticIdentityProvider:
    """Fixed identity.

    The empty default is the no-op provider used on unsupported platforms.
    Tests use explicit identities to simulate different machines.
    """

    def __init__(self, identity: str = ""):
        self._identity = identity

    def machine_identity(self) -> str:
        return self._identity

    def __repr__(self) -> str:
        # identity feeds key derivation, keep it out of reprs and logs
        return f"<{self.__class__.__name__}>"


def default_identity_provider(platform: str | None = None) -> IdentityProvider:
    """Return the identity provider matching ``platform`` (default: sys.platform)."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WindowsIdentityProvider()
    if platform == "darwin":
        return MacOSIdentityProvider()
    if platform.startswith("linux"):
        return LinuxIdentityProvider()
    logger.debug("No identity provider for platform %s, using empty identity", platform)
    return StaticIdentityProvider()
