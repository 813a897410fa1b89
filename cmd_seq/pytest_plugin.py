"""Pytest plugin providing the ``mock_commands`` fixture."""

from __future__ import annotations

import logging
import os
import typing as t
from pathlib import Path

import pytest

from .environment import path_with_prefix
from .generator import create_mock_command, remove_mock_command
from .stepfile import pending_step_files

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from .steps import StepLike

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("cmd_seq")
    group.addoption(
        "--cmd-seq-prepend-path",
        action="store_true",
        dest="cmd_seq_prepend_path",
        default=None,
        help=(
            "Put the mock_commands directory first on PATH for each test. "
            "Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-cmd-seq-prepend-path",
        action="store_false",
        dest="cmd_seq_prepend_path",
        default=None,
        help="Leave PATH untouched. Overrides the pytest.ini setting.",
    )
    parser.addini(
        "cmd_seq_prepend_path",
        "Put the mock_commands directory first on PATH for each test.",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "cmd_seq(prepend_path: bool = True): override whether the "
            "mock_commands directory is put on PATH for a single test."
        ),
    )


class MockCommandFactory:
    """Create mock commands inside one per-test directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def __call__(self, name: str, sequence: t.Sequence[StepLike] = ()) -> Path:
        """Create mock command *name* replaying *sequence*; return its path."""
        create_mock_command(name=name, directory=self.directory, sequence=sequence)
        return self.path(name)

    def path(self, name: str) -> Path:
        """Return the launcher path of mock command *name*."""
        return self.directory / name

    def pending(self, name: str) -> list[Path]:
        """Return the step files of *name* that have not been replayed yet."""
        return pending_step_files(self.path(name))

    def remove(self, name: str) -> None:
        """Delete mock command *name* together with any unconsumed steps."""
        remove_mock_command(name=name, directory=self.directory)


def _prepend_path_enabled(request: pytest.FixtureRequest) -> bool:
    """Return whether the fixture should put its directory on ``PATH``."""
    # Priority order: marker > CLI option > INI setting
    marker = request.node.get_closest_marker("cmd_seq")
    if marker is not None and "prepend_path" in marker.kwargs:
        return bool(marker.kwargs["prepend_path"])

    config = request.config
    cli_value = config.getoption("cmd_seq_prepend_path", default=None)
    if cli_value is not None:
        return bool(cli_value)

    return bool(config.getini("cmd_seq_prepend_path"))


@pytest.fixture
def mock_commands(
    request: pytest.FixtureRequest,
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> MockCommandFactory:
    """Provide a :class:`MockCommandFactory` bound to a fresh directory."""
    try:
        directory = tmp_path_factory.mktemp("cmd-seq")
        if _prepend_path_enabled(request):
            monkeypatch.setenv(
                "PATH", path_with_prefix(directory, os.environ.get("PATH"))
            )
    except Exception:
        logger.exception("Error during mock_commands fixture setup")
        raise
    return MockCommandFactory(directory)


__all__ = ["MockCommandFactory", "mock_commands"]
