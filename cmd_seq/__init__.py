"""Scripted mock commands that replay a fixed sequence across process launches.

Each generated command is a small launcher plus one file per scripted step.
Every run consumes the next step file, so the Nth run of the command behaves
like the Nth step even though each run is a separate process.
"""

from __future__ import annotations

from .assertions import CheckResult, is_or_like
from .comparators import ABSENT, Absent, Expectation, Literal, Pattern, as_expectation
from .environment import prepended_path, temporary_env
from .errors import (
    CmdSeqError,
    ConfigurationError,
    RuntimeCorruptionError,
    RuntimeExhaustionError,
    StepWriteError,
)
from .generator import MockCommandSpec, create_mock_command, remove_mock_command
from .platform import PLATFORM_OVERRIDE_ENV, PYTHON_OVERRIDE_ENV, needs_launch_shim
from .runtime import CORRUPTED_EXIT_CODE, EXHAUSTED_EXIT_CODE
from .stepfile import MAX_STEPS, pending_step_files, step_file_path
from .steps import MAX_STEP_EXIT_CODE, Step

__all__ = [
    "ABSENT",
    "CORRUPTED_EXIT_CODE",
    "EXHAUSTED_EXIT_CODE",
    "MAX_STEPS",
    "MAX_STEP_EXIT_CODE",
    "PLATFORM_OVERRIDE_ENV",
    "PYTHON_OVERRIDE_ENV",
    "Absent",
    "CheckResult",
    "CmdSeqError",
    "ConfigurationError",
    "Expectation",
    "Literal",
    "MockCommandSpec",
    "Pattern",
    "RuntimeCorruptionError",
    "RuntimeExhaustionError",
    "Step",
    "StepWriteError",
    "as_expectation",
    "create_mock_command",
    "is_or_like",
    "needs_launch_shim",
    "pending_step_files",
    "prepended_path",
    "remove_mock_command",
    "step_file_path",
    "temporary_env",
]
