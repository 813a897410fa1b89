"""Assertion helper for test tables mixing exact and pattern expectations."""

from __future__ import annotations

import dataclasses as dc

from .comparators import Absent, as_expectation


@dc.dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one :func:`is_or_like` comparison."""

    name: str
    kind: str
    passed: bool


def _check_name(testname: str | None, kind: str) -> str:
    return f"{testname} ({kind})" if testname else kind


def is_or_like(
    actual: object, expected: object, testname: str | None = None
) -> CheckResult | None:
    """Assert *actual* matches *expected* exactly or by regex.

    *expected* may be a :class:`~cmd_seq.comparators.Literal`,
    :class:`~cmd_seq.comparators.Pattern` or
    :data:`~cmd_seq.comparators.ABSENT`, or a raw value that is wrapped with
    :func:`~cmd_seq.comparators.as_expectation`. The check is reported as
    ``"<testname> (regex match)"`` or ``"<testname> (exact match)"`` so test
    output shows which comparison ran. An absent expectation performs no
    check and returns ``None``.

    Raises
    ------
    AssertionError
        If the comparison fails.
    """
    expectation = as_expectation(expected)
    if isinstance(expectation, Absent):
        return None

    name = _check_name(testname, expectation.kind)
    if not expectation(actual):
        msg = f"{name}: expected {expectation!r}, got {actual!r}"
        raise AssertionError(msg)
    return CheckResult(name=name, kind=expectation.kind, passed=True)


__all__ = ["CheckResult", "is_or_like"]
