"""Runtime executed by every launch of a generated mock command.

The launcher written by :func:`cmd_seq.generator.create_mock_command` imports
this module and calls :func:`main` with its own path and the number of steps
it was generated with. Each launch is a fresh process, so the only state
carried between runs is the set of step files still on disk.
"""

from __future__ import annotations

import logging
import sys
import typing as t
from pathlib import Path

from .errors import RuntimeCorruptionError, RuntimeExhaustionError
from .stepfile import MAX_STEPS, consume_step_file, step_file_paths

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from .steps import Step

# Both codes lie above MAX_STEP_EXIT_CODE so no scripted step can produce them.
CORRUPTED_EXIT_CODE: t.Final[int] = 254
EXHAUSTED_EXIT_CODE: t.Final[int] = 255

logger = logging.getLogger(__name__)


def next_step_file(script: Path, planned: int) -> Path | None:
    """Return the lowest-numbered unconsumed step file, or ``None``."""
    for path in step_file_paths(script, planned):
        if path.exists():
            return path
    return None


def take_next_step(script: Path, planned: int) -> Step:
    """Consume and return the next step of *script*.

    Raises
    ------
    RuntimeExhaustionError
        If every one of the *planned* step files has already been consumed.
    RuntimeCorruptionError
        If the next step file cannot be parsed or removed.
    """
    path = next_step_file(script, planned)
    if path is None:
        raise RuntimeExhaustionError(planned, step_file_paths(script, planned))
    return consume_step_file(path)


def _write_stream(stream: t.TextIO, text: str) -> None:
    """Write *text* to *stream* byte-for-byte as UTF-8."""
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        stream.write(text)
    else:
        stream.flush()
        buffer.write(text.encode("utf-8"))
        buffer.flush()
    stream.flush()


def emit_step(step: Step) -> int:
    """Replay *step* on the standard streams and return its exit code."""
    _write_stream(sys.stdout, step.stdout)
    _write_stream(sys.stderr, step.stderr)
    return step.exitcode


def _validate_planned(planned: int) -> None:
    if not 0 <= planned <= MAX_STEPS:
        msg = f"planned step count must be in [0, {MAX_STEPS}], got {planned}"
        raise ValueError(msg)


def main(script: str | Path, planned: int) -> int:
    """Run one step of the mock command at *script* and return its exit code."""
    _validate_planned(planned)
    script_path = Path(script).absolute()
    try:
        step = take_next_step(script_path, planned)
    except RuntimeExhaustionError as exc:
        logger.debug("Mock command %s exhausted after %d step(s)", script_path, planned)
        _write_stream(sys.stderr, f"{exc}\n")
        return EXHAUSTED_EXIT_CODE
    except RuntimeCorruptionError as exc:
        _write_stream(sys.stderr, f"cmd-seq: {exc}\n")
        return CORRUPTED_EXIT_CODE
    return emit_step(step)


__all__ = [
    "CORRUPTED_EXIT_CODE",
    "EXHAUSTED_EXIT_CODE",
    "emit_step",
    "main",
    "next_step_file",
    "take_next_step",
]
