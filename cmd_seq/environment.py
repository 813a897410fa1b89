"""Environment helpers for putting mock commands on ``PATH``.

Generating a mock command never touches the environment; these context
managers are for callers that want the commands found by name.
"""

from __future__ import annotations

import contextlib
import logging
import os
import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    import collections.abc as cabc

logger = logging.getLogger(__name__)


def _restore_env(orig_env: dict[str, str]) -> None:
    """Reset ``os.environ`` to the snapshot stored in ``orig_env``."""
    os.environ.clear()
    os.environ.update(orig_env)


def path_with_prefix(directory: str | os.PathLike[str], path: str | None) -> str:
    """Return *path* with *directory* moved to the front."""
    entry = os.fspath(directory)
    parts = [part for part in (path or "").split(os.pathsep) if part and part != entry]
    return os.pathsep.join([entry, *parts])


@contextlib.contextmanager
def temporary_env(mapping: dict[str, str]) -> cabc.Iterator[None]:
    """Temporarily apply environment variables from *mapping*."""
    orig_env = os.environ.copy()
    os.environ.update(mapping)
    try:
        yield
    finally:
        _restore_env(orig_env)


@contextlib.contextmanager
def prepended_path(directory: str | os.PathLike[str]) -> cabc.Iterator[str]:
    """Put *directory* first on ``PATH`` for the duration of the block.

    Yields the new ``PATH`` value.
    """
    new_path = path_with_prefix(directory, os.environ.get("PATH"))
    logger.debug("Prepending %s to PATH", directory)
    with temporary_env({"PATH": new_path}):
        yield new_path


__all__ = ["path_with_prefix", "prepended_path", "temporary_env"]
