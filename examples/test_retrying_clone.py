"""Example tests: exercising retry logic against a flaky ``git``."""

from __future__ import annotations

import subprocess
import typing as t

import pytest

from examples._utils import resolve_command

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from cmd_seq.pytest_plugin import MockCommandFactory

pytestmark = pytest.mark.posix_only

HUNG_UP = "fatal: The remote end hung up unexpectedly\n"


def clone_with_retries(url: str, attempts: int = 5) -> tuple[bool, str]:
    """Run ``git clone`` until it succeeds, returning a warning if it retried."""
    for attempt in range(1, attempts + 1):
        result = subprocess.run(  # noqa: S603 - git resolves to the mock in tests
            [resolve_command("git"), "clone", url],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0:
            warning = (
                f"Warning: {attempt} attempt(s) required to successfully "
                "complete git operation\n"
                if attempt > 1
                else ""
            )
            return True, warning
    return False, ""


def test_clone_survives_hang_ups(mock_commands: MockCommandFactory) -> None:
    """The remote hangs up twice before the third attempt succeeds."""
    mock_commands(
        "git",
        [
            {"stderr": HUNG_UP, "exitcode": 2},
            {"stderr": HUNG_UP, "exitcode": 2},
            {"stdout": "", "stderr": "", "exitcode": 0},
        ],
    )

    ok, warning = clone_with_retries("git://example.com/repo")

    assert ok
    assert warning == (
        "Warning: 3 attempt(s) required to successfully complete git operation\n"
    )
    assert mock_commands.pending("git") == []


def test_clone_gives_up(mock_commands: MockCommandFactory) -> None:
    """Running out of attempts reports failure; unused steps stay on disk."""
    mock_commands("git", [{"stderr": HUNG_UP, "exitcode": 2}] * 4)

    ok, _warning = clone_with_retries("git://example.com/repo", attempts=3)

    assert not ok
    assert len(mock_commands.pending("git")) == 1
