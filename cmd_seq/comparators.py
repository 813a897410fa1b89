"""Tagged expectations used by :func:`cmd_seq.assertions.is_or_like`."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as t


@dc.dataclass(frozen=True, slots=True)
class Literal:
    """Expect a value equal to ``value``."""

    value: object

    kind: t.ClassVar[str] = "exact match"

    def __call__(self, actual: object) -> bool:
        """Return ``True`` if *actual* equals ``value``."""
        return actual == self.value


class Pattern:
    """Expect a string in which ``pattern`` can be found."""

    kind: t.ClassVar[str] = "regex match"

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self.regex = re.compile(pattern)

    def __call__(self, actual: object) -> bool:
        """Return ``True`` if the regex matches somewhere in *actual*."""
        return isinstance(actual, str) and self.regex.search(actual) is not None

    def __eq__(self, other: object) -> bool:
        """Compare patterns by their source and flags."""
        if not isinstance(other, Pattern):
            return NotImplemented
        return self.regex == other.regex

    def __hash__(self) -> int:
        """Hash consistently with :meth:`__eq__`."""
        return hash(self.regex)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return f"Pattern({self.regex.pattern!r})"


@dc.dataclass(frozen=True, slots=True)
class Absent:
    """No expectation; the comparison is skipped."""

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return "ABSENT"


ABSENT: t.Final[Absent] = Absent()

Expectation: t.TypeAlias = "Literal | Pattern | Absent"


def as_expectation(expected: object) -> Expectation:
    """Wrap a raw *expected* value in its tagged form.

    ``None`` means absent and a compiled regex becomes a :class:`Pattern`.
    Anything else, including plain strings, is a :class:`Literal`.
    """
    match expected:
        case Literal() | Pattern() | Absent():
            return expected
        case None:
            return ABSENT
        case re.Pattern():
            return Pattern(expected)
        case _:
            return Literal(expected)


__all__ = [
    "ABSENT",
    "Absent",
    "Expectation",
    "Literal",
    "Pattern",
    "as_expectation",
]
