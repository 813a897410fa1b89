"""Step model describing a single scripted invocation of a mock command."""

from __future__ import annotations

import dataclasses as dc
import typing as t

from .errors import ConfigurationError

# Exit codes at or above this value are reserved by the runtime so callers can
# always tell "ran out of steps" apart from a scripted failure.
MAX_STEP_EXIT_CODE: t.Final[int] = 253

STEP_FIELDS: t.Final[tuple[str, ...]] = ("stdout", "stderr", "exitcode")

StepLike: t.TypeAlias = "Step | t.Mapping[str, object]"


def _require_text(field: str, value: object) -> str:
    if not isinstance(value, str):
        msg = f"{field} must be a string, got {type(value).__name__}"
        raise TypeError(msg)
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        msg = f"{field} is not valid UTF-8 text: {exc.reason}"
        raise ValueError(msg) from exc
    return value


def _require_exit_code(value: object) -> int:
    # ``bool`` is an ``int`` subclass but never a meaningful exit status.
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"exitcode must be an integer, got {type(value).__name__}"
        raise TypeError(msg)
    if not 0 <= value <= MAX_STEP_EXIT_CODE:
        msg = f"exitcode must be between 0 and {MAX_STEP_EXIT_CODE}, got {value}"
        raise ValueError(msg)
    return value


@dc.dataclass(frozen=True, slots=True)
class Step:
    """Output and exit status replayed by one run of a mock command."""

    stdout: str = ""
    stderr: str = ""
    exitcode: int = 0

    def __post_init__(self) -> None:
        """Validate field types and the exit code range."""
        _require_text("stdout", self.stdout)
        _require_text("stderr", self.stderr)
        _require_exit_code(self.exitcode)

    @classmethod
    def from_mapping(cls, data: t.Mapping[str, object]) -> Step:
        """Build a :class:`Step` from *data*, filling defaults for absent keys.

        Raises
        ------
        TypeError
            If *data* is not a mapping or a value has the wrong type.
        ValueError
            If *data* has unknown keys or the exit code is out of range.
        """
        if not isinstance(data, t.Mapping):
            msg = f"step must be a mapping, got {type(data).__name__}"
            raise TypeError(msg)
        unknown = sorted(str(key) for key in data if key not in STEP_FIELDS)
        if unknown:
            msg = f"unexpected step field(s): {', '.join(unknown)}"
            raise ValueError(msg)
        return cls(**t.cast("dict[str, t.Any]", dict(data)))

    def to_dict(self) -> dict[str, str | int]:
        """Return a JSON-serialisable mapping of this step."""
        return {
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exitcode": self.exitcode,
        }


def coerce_step(value: StepLike, index: int) -> Step:
    """Return *value* as a validated :class:`Step` for sequence position *index*."""
    if isinstance(value, Step):
        return value
    try:
        return Step.from_mapping(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(str(exc), step_index=index) from exc


def coerce_sequence(sequence: t.Sequence[StepLike]) -> tuple[Step, ...]:
    """Validate every entry of *sequence*, naming the first offending index."""
    if not isinstance(sequence, list | tuple):
        msg = f"sequence must be a list of steps, got {type(sequence).__name__}"
        raise ConfigurationError(msg)
    return tuple(coerce_step(value, index) for index, value in enumerate(sequence))


__all__ = [
    "MAX_STEP_EXIT_CODE",
    "STEP_FIELDS",
    "Step",
    "StepLike",
    "coerce_sequence",
    "coerce_step",
]
