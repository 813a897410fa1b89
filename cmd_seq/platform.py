"""Platform helpers deciding how generated mock commands are launched.

POSIX systems run the launcher directly through its shebang line. Windows
cannot, so the generator also writes a batch file that forwards to the
interpreter. Tests can emulate Windows on any host via
:data:`PLATFORM_OVERRIDE_ENV`.
"""

from __future__ import annotations

import os
import sys
import typing as t

PLATFORM_OVERRIDE_ENV: t.Final[str] = "CMD_SEQ_PLATFORM_OVERRIDE"
PYTHON_OVERRIDE_ENV: t.Final[str] = "CMD_SEQ_PYTHON"

LAUNCH_SHIM_SUFFIX: t.Final[str] = ".cmd"

# ``sys.platform`` prefixes of hosts that cannot execute a shebang script.
_SHIM_PLATFORM_PREFIXES: t.Final[tuple[str, ...]] = ("win",)


def _normalise(platform: str) -> str:
    """Return a lowercase version of *platform* suitable for prefix checks."""
    return platform.strip().lower()


def current_platform(platform: str | None = None) -> str:
    """Return the effective platform name, honouring test overrides."""
    if platform:
        return _normalise(platform)

    if override := os.getenv(PLATFORM_OVERRIDE_ENV):
        return _normalise(override)

    return _normalise(sys.platform)


def needs_launch_shim(platform: str | None = None) -> bool:
    """Return ``True`` when mock commands need a ``.cmd`` launcher."""
    return current_platform(platform).startswith(_SHIM_PLATFORM_PREFIXES)


def python_executable() -> str:
    """Return the interpreter that generated commands should run under."""
    return os.getenv(PYTHON_OVERRIDE_ENV) or sys.executable


__all__ = [
    "LAUNCH_SHIM_SUFFIX",
    "PLATFORM_OVERRIDE_ENV",
    "PYTHON_OVERRIDE_ENV",
    "current_platform",
    "needs_launch_shim",
    "python_executable",
]
