"""Unit tests for ``is_or_like`` and the tagged expectations it dispatches on."""

from __future__ import annotations

import re

import pytest

from cmd_seq.assertions import CheckResult, is_or_like
from cmd_seq.comparators import ABSENT, Absent, Literal, Pattern, as_expectation


@pytest.mark.parametrize(
    ("raw", "expected_type"),
    [
        (None, Absent),
        (re.compile(r"\d+"), Pattern),
        ("hello\n", Literal),
        (3, Literal),
        (Literal("x"), Literal),
        (Pattern("x"), Pattern),
        (ABSENT, Absent),
    ],
)
def test_as_expectation_tags_raw_values(raw: object, expected_type: type) -> None:
    """Raw values are wrapped according to their shape."""
    assert isinstance(as_expectation(raw), expected_type)


def test_plain_string_is_never_treated_as_pattern() -> None:
    """Only compiled regexes or explicit ``Pattern`` objects match by regex."""
    assert as_expectation("a.c") == Literal("a.c")


def test_pattern_searches_anywhere() -> None:
    """Pattern matches behave like ``re.search``."""
    pattern = Pattern(r"my-dir\.[a-zA-Z0-9]{6}")
    assert pattern("/custom/my-dir.Ab12Cd\n")
    assert not pattern("/custom/other\n")
    assert not pattern(None)


def test_pattern_equality_uses_regex() -> None:
    """Patterns built from the same source compare equal."""
    assert Pattern("a+") == Pattern(re.compile("a+"))
    assert Pattern("a+") != Pattern("b+")


def test_exact_match_reports_suffixed_name() -> None:
    """Literal expectations are reported as exact matches."""
    result = is_or_like("Hello\n", "Hello\n", "echo stdout")
    assert result == CheckResult(
        name="echo stdout (exact match)", kind="exact match", passed=True
    )


def test_regex_match_reports_suffixed_name() -> None:
    """Compiled regexes are reported as regex matches."""
    result = is_or_like("/custom/my-dir.x1y2z3\n", re.compile(r"\A/custom/"), "tmp")
    assert result is not None
    assert result.name == "tmp (regex match)"
    assert result.kind == "regex match"


def test_absent_expectation_checks_nothing() -> None:
    """An omitted expectation records no check at all."""
    assert is_or_like("anything", None, "x") is None
    assert is_or_like("anything", ABSENT, "x") is None


def test_missing_testname_uses_kind_only() -> None:
    """Without a test name the check is named after the comparison kind."""
    result = is_or_like("a", Literal("a"))
    assert result is not None
    assert result.name == "exact match"


def test_exact_mismatch_raises_with_name() -> None:
    """Failures name the check and show both values."""
    with pytest.raises(AssertionError, match=r"^echo stdout \(exact match\): "):
        is_or_like("Hello\n", "Goodbye\n", "echo stdout")


def test_regex_mismatch_raises_with_name() -> None:
    """Pattern failures are reported as regex matches."""
    with pytest.raises(AssertionError, match=r"tmp \(regex match\)") as info:
        is_or_like("nope", Pattern(r"\d"), "tmp")
    assert "'nope'" in str(info.value)
