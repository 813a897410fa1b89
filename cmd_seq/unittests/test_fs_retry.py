"""Unit tests for the unlink retry helper."""

from __future__ import annotations

from pathlib import Path

import pytest

import cmd_seq.fs_retry as fs_retry


def test_retry_unlink_success(tmp_path: Path) -> None:
    """retry_unlink removes an existing file."""
    target = tmp_path / "git.step-00"
    target.write_text("{}")

    fs_retry.retry_unlink(target)

    assert not target.exists()


def test_retry_unlink_missing_path_noop(tmp_path: Path) -> None:
    """retry_unlink is a no-op for missing paths."""
    missing = tmp_path / "git.step-00"

    fs_retry.retry_unlink(missing)

    assert not missing.exists()


def test_retry_unlink_retries_then_succeeds(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Transient lock errors are retried before succeeding."""
    target = tmp_path / "git.step-00"
    target.write_text("{}")

    attempts: dict[str, int] = {"count": 0}
    original_unlink = Path.unlink

    def flaky_unlink(self: Path, missing_ok: bool = False) -> None:
        attempts["count"] += 1
        if self == target and attempts["count"] < 3:
            raise PermissionError("locked")
        original_unlink(self, missing_ok=missing_ok)

    monkeypatch.setattr(Path, "unlink", flaky_unlink)
    sleeps: list[float] = []
    monkeypatch.setattr(fs_retry.time, "sleep", sleeps.append)

    fs_retry.retry_unlink(
        target, config=fs_retry.RetryConfig(max_attempts=4, retry_delay=0.25)
    )

    assert attempts["count"] == 3
    assert sleeps == [0.25, 0.25]
    assert not target.exists()


def test_retry_unlink_reraises_after_exhaustion(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without a factory the last ``OSError`` propagates."""
    target = tmp_path / "git.step-00"
    target.write_text("{}")

    def locked_unlink(self: Path, missing_ok: bool = False) -> None:
        raise PermissionError("locked")

    monkeypatch.setattr(Path, "unlink", locked_unlink)
    sleeps: list[float] = []
    monkeypatch.setattr(fs_retry.time, "sleep", sleeps.append)

    with pytest.raises(PermissionError, match="locked"):
        fs_retry.retry_unlink(target)

    assert sleeps == [fs_retry.DEFAULT_UNLINK_RETRY.retry_delay] * (
        fs_retry.DEFAULT_UNLINK_RETRY.max_attempts - 1
    )


def test_retry_unlink_uses_exception_factory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A custom factory replaces the final error and chains the original."""
    target = tmp_path / "git.step-00"
    target.write_text("{}")

    def locked_unlink(self: Path, missing_ok: bool = False) -> None:
        raise PermissionError("locked")

    class CustomError(Exception):
        pass

    monkeypatch.setattr(Path, "unlink", locked_unlink)
    monkeypatch.setattr(fs_retry.time, "sleep", lambda _delay: None)

    with pytest.raises(CustomError) as info:
        fs_retry.retry_unlink(
            target,
            config=fs_retry.RetryConfig(max_attempts=1, retry_delay=0),
            exc_factory=lambda path, exc: CustomError(f"{path}: {exc}"),
        )
    assert isinstance(info.value.__cause__, PermissionError)


@pytest.mark.parametrize(
    ("max_attempts", "retry_delay", "message"),
    [(0, 0.1, "max_attempts"), (1, -1.0, "retry_delay")],
)
def test_retry_config_validates(
    max_attempts: int, retry_delay: float, message: str
) -> None:
    """Invalid retry policies are rejected up front."""
    with pytest.raises(ValueError, match=message):
        fs_retry.RetryConfig(max_attempts=max_attempts, retry_delay=retry_delay)
