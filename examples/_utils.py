"""Shared helpers for the runnable examples."""

from __future__ import annotations

import shutil


def resolve_command(name: str) -> str:
    """Return the path *name* resolves to on PATH, or *name* unchanged."""
    return shutil.which(name) or name
