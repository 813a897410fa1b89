"""On-disk protocol for the steps a mock command replays.

Each step lives in its own file next to the command, named
``<command>.step-NN`` where ``NN`` is the zero-padded ordinal. A file that
exists has not been consumed yet; the runtime reads the lowest-numbered one
and deletes it before replaying it. Two digits cap a sequence at
:data:`MAX_STEPS` steps, which also lets the generator check every possible
leftover file up front.
"""

from __future__ import annotations

import json
import logging
import typing as t
from pathlib import Path

from .errors import RuntimeCorruptionError, StepWriteError
from .fs_retry import DEFAULT_UNLINK_RETRY, RetryConfig, retry_unlink
from .steps import STEP_FIELDS, Step

MAX_STEPS: t.Final[int] = 100
STEP_SUFFIX: t.Final[str] = ".step-"
ORDINAL_WIDTH: t.Final[int] = 2

logger = logging.getLogger(__name__)


def step_file_path(script: Path, ordinal: int) -> Path:
    """Return the step file path for *ordinal* of *script*."""
    if not 0 <= ordinal < MAX_STEPS:
        msg = f"step ordinal must be in [0, {MAX_STEPS - 1}], got {ordinal}"
        raise ValueError(msg)
    return script.with_name(f"{script.name}{STEP_SUFFIX}{ordinal:0{ORDINAL_WIDTH}d}")


def step_file_paths(script: Path, count: int = MAX_STEPS) -> list[Path]:
    """Return the first *count* step file paths for *script*, in order."""
    return [step_file_path(script, ordinal) for ordinal in range(count)]


def pending_step_files(script: Path, count: int = MAX_STEPS) -> list[Path]:
    """Return the step files of *script* that still exist, lowest first."""
    return [path for path in step_file_paths(script, count) if path.exists()]


def write_step_file(path: Path, step: Step) -> None:
    """Persist *step* at *path* as a JSON object.

    Raises
    ------
    StepWriteError
        If the file cannot be opened, written or closed.
    """
    payload = json.dumps(step.to_dict(), ensure_ascii=False, indent=2)
    try:
        with path.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(f"{payload}\n")
    except OSError as exc:
        msg = f"write step file {path}: {exc.strerror or exc}"
        raise StepWriteError(msg) from exc
    except UnicodeEncodeError as exc:
        msg = f"write step file {path}: {exc}"
        raise StepWriteError(msg) from exc


def _decode_step(path: Path, text: str) -> Step:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RuntimeCorruptionError(path, f"could not parse step file: {exc}") from exc
    if not isinstance(data, dict):
        raise RuntimeCorruptionError(path, "step file did not contain an object")
    if set(data) != set(STEP_FIELDS):
        found = ", ".join(sorted(data)) or "no keys"
        expected = ", ".join(STEP_FIELDS)
        raise RuntimeCorruptionError(path, f"expected keys {expected}; found {found}")
    try:
        return Step.from_mapping(data)
    except (TypeError, ValueError) as exc:
        raise RuntimeCorruptionError(path, str(exc)) from exc


def read_step_file(path: Path) -> Step:
    """Load the :class:`Step` stored at *path* without removing it.

    Raises
    ------
    RuntimeCorruptionError
        If the file cannot be read or does not hold a well-formed step.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"could not read step file: {exc.strerror or exc}"
        raise RuntimeCorruptionError(path, msg) from exc
    except UnicodeDecodeError as exc:
        msg = f"step file is not valid UTF-8: {exc}"
        raise RuntimeCorruptionError(path, msg) from exc
    return _decode_step(path, text)


def _unlink_error(path: Path, exc: Exception) -> RuntimeCorruptionError:
    return RuntimeCorruptionError(path, f"could not remove step file: {exc}")


def consume_step_file(path: Path, *, retry: RetryConfig = DEFAULT_UNLINK_RETRY) -> Step:
    """Read the step at *path*, then delete the file so it is never replayed.

    The file is removed only once it parsed cleanly; a failed removal is an
    error because leaving the file behind would replay the step again.
    """
    step = read_step_file(path)
    retry_unlink(path, config=retry, logger=logger, exc_factory=_unlink_error)
    logger.debug("Consumed step file %s", path)
    return step


__all__ = [
    "MAX_STEPS",
    "ORDINAL_WIDTH",
    "STEP_SUFFIX",
    "consume_step_file",
    "pending_step_files",
    "read_step_file",
    "step_file_path",
    "step_file_paths",
    "write_step_file",
]
