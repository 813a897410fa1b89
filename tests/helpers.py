"""Utilities for launching generated mock commands in tests."""

from __future__ import annotations

import subprocess
import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - types only
    import collections.abc as cabc
    from pathlib import Path


def run_cmd(
    argv: cabc.Iterable[str | Path], *, check: bool = True, **kwargs: object
) -> subprocess.CompletedProcess[str]:
    """Run *argv* capturing output as text.

    Parameters are forwarded to :func:`subprocess.run`. ``check`` defaults to
    ``True`` so tests fail fast on non-zero exit codes, but scripted failures
    and exhaustion are asserted with ``check=False``.
    """
    return subprocess.run(  # noqa: S603
        [str(a) for a in argv],
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=check,
        **kwargs,
    )


def run_times(
    argv: cabc.Sequence[str | Path], times: int, **kwargs: object
) -> list[subprocess.CompletedProcess[str]]:
    """Launch *argv* *times* times in a row, one process after another."""
    return [run_cmd(argv, check=False, **kwargs) for _ in range(times)]
