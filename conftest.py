"""Global test configuration and shared fixtures."""

from __future__ import annotations

import os

import pytest

from cmd_seq.platform import PLATFORM_OVERRIDE_ENV, PYTHON_OVERRIDE_ENV

pytest_plugins = ("cmd_seq.pytest_plugin", "pytester")

IS_WINDOWS = os.name == "nt"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "posix_only: mark test as launching generated commands via their shebang",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip tests that execute shebang launchers directly on Windows."""
    if not IS_WINDOWS:
        return
    skip = pytest.mark.skip(reason="Generated launchers run via .cmd on Windows")
    for item in items:
        if "posix_only" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def clear_cmd_seq_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure host overrides never leak into tests."""
    monkeypatch.delenv(PLATFORM_OVERRIDE_ENV, raising=False)
    monkeypatch.delenv(PYTHON_OVERRIDE_ENV, raising=False)

