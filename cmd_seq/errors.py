"""Exception hierarchy for cmd-seq."""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from pathlib import Path


class CmdSeqError(Exception):
    """Base class for all cmd-seq errors."""


class ConfigurationError(CmdSeqError, ValueError):
    """Raised when a mock command cannot be generated from the given options.

    Covers a missing directory, an unusable command name, an oversized or
    malformed sequence, leftover step files from an earlier run and
    collisions with an existing path. ``step_index`` is set when a single
    step of the sequence was rejected.
    """

    def __init__(self, message: str, *, step_index: int | None = None) -> None:
        if step_index is not None:
            message = f"at step {step_index} of test sequence: {message}"
        super().__init__(message)
        self.step_index = step_index


class StepWriteError(CmdSeqError, OSError):
    """Raised when writing a step file or launcher fails during generation."""


class RuntimeExhaustionError(CmdSeqError):
    """Raised when a mock command is run more times than it was scripted for."""

    def __init__(self, planned: int, step_files: t.Sequence[Path]) -> None:
        self.planned = planned
        self.step_files = tuple(step_files)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        listing = "\n".join(f"  {path}" for path in self.step_files) or "  (none)"
        return (
            "no more test steps!\n"
            "A mock command created by cmd_seq.create_mock_command was run "
            "more times than expected.\n"
            f"I expected to be run at most {self.planned} time(s), reading "
            "instructions from these files:\n"
            f"{listing}\n"
            "...but the files do not exist!"
        )


class RuntimeCorruptionError(CmdSeqError):
    """Raised when a step file exists but cannot be read, parsed or removed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


__all__ = [
    "CmdSeqError",
    "ConfigurationError",
    "RuntimeCorruptionError",
    "RuntimeExhaustionError",
    "StepWriteError",
]
