"""Generate mock commands that replay a scripted sequence of steps."""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import typing as t
from pathlib import Path

from .errors import ConfigurationError, StepWriteError
from .fs_retry import retry_unlink
from .platform import LAUNCH_SHIM_SUFFIX, needs_launch_shim, python_executable
from .stepfile import (
    MAX_STEPS,
    pending_step_files,
    step_file_path,
    step_file_paths,
    write_step_file,
)
from .steps import Step, StepLike, coerce_sequence

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent
# Linux truncates shebang lines beyond this many bytes.
_MAX_SHEBANG_LENGTH: t.Final[int] = 127
_FALLBACK_SHEBANG: t.Final[str] = "#!/usr/bin/env python3"
_LAUNCHER_MODE: t.Final[int] = 0o755

logger = logging.getLogger(__name__)


def _validate_not_empty(name: str, error_msg: str) -> None:
    """Raise ``ConfigurationError`` if *name* is empty."""
    if not name:
        raise ConfigurationError(error_msg)


def _validate_not_dot_directories(name: str, error_msg: str) -> None:
    """Disallow ``.`` and ``..`` which change directory semantics."""
    if name in {".", ".."}:
        raise ConfigurationError(error_msg)


def _validate_no_path_separators(name: str, error_msg: str) -> None:
    """Ensure *name* contains no path separators for portability."""
    separators = {"/", "\\", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators):
        raise ConfigurationError(error_msg)


def _validate_no_nul_bytes(name: str, error_msg: str) -> None:
    """Reject names containing NUL bytes to avoid truncation."""
    if "\x00" in name:
        raise ConfigurationError(error_msg)


def _validate_command_name(name: object) -> str:
    """Validate *name* is a safe command filename and return it."""
    if not isinstance(name, str):
        msg = f"name must be a string, got {type(name).__name__}"
        raise ConfigurationError(msg)
    error_msg = "name is empty" if not name else f"Invalid command name: {name!r}"

    validators: list[t.Callable[[str, str], None]] = [
        _validate_not_empty,
        _validate_not_dot_directories,
        _validate_no_path_separators,
        _validate_no_nul_bytes,
    ]
    for validator in validators:
        validator(name, error_msg)
    return name


def _validate_directory(directory: str | os.PathLike[str]) -> Path:
    path = Path(directory)
    if not path.is_dir():
        msg = f"`{path}' is not an existing directory"
        raise ConfigurationError(msg)
    return path


def _validate_free_path(path: Path) -> None:
    if os.path.lexists(path):
        msg = f"`{path}' already exists"
        raise ConfigurationError(msg)


def _validate_no_stale_steps(script: Path) -> None:
    stale = pending_step_files(script)
    if stale:
        listing = ", ".join(path.name for path in stale)
        msg = (
            f"step file(s) still exist in {script.parent} ({listing}) - did you "
            "forget to clean this up since an earlier test?"
        )
        raise ConfigurationError(msg)


def launch_shim_path(script: Path) -> Path:
    """Return the Windows ``.cmd`` launcher path for *script*."""
    return script.with_name(f"{script.name}{LAUNCH_SHIM_SUFFIX}")


@dc.dataclass(frozen=True, slots=True)
class MockCommandSpec:
    """Validated options for one mock command."""

    name: str
    directory: Path
    steps: tuple[Step, ...]
    launch_shim: bool = False

    @property
    def script(self) -> Path:
        """Path of the generated launcher."""
        return self.directory / self.name

    @property
    def shim(self) -> Path | None:
        """Path of the Windows batch launcher, when one is generated."""
        return launch_shim_path(self.script) if self.launch_shim else None

    @classmethod
    def from_options(
        cls,
        *,
        name: str,
        directory: str | os.PathLike[str],
        sequence: t.Sequence[StepLike],
    ) -> MockCommandSpec:
        """Validate the raw generator options.

        Nothing is written to disk; every check that could reject the options
        runs here so generation never starts with bad input.

        Raises
        ------
        ConfigurationError
            If any option is unusable or a step file of *name* already exists.
        """
        directory_path = _validate_directory(directory)
        command_name = _validate_command_name(name)
        script = directory_path / command_name
        _validate_free_path(script)
        launch_shim = needs_launch_shim()
        if launch_shim:
            _validate_free_path(launch_shim_path(script))
        if isinstance(sequence, list | tuple) and len(sequence) > MAX_STEPS:
            msg = (
                f"test sequence is too large! Maximum of {MAX_STEPS} steps "
                f"permitted, got {len(sequence)}"
            )
            raise ConfigurationError(msg)
        _validate_no_stale_steps(script)
        return cls(
            name=command_name,
            directory=directory_path,
            steps=coerce_sequence(sequence),
            launch_shim=launch_shim,
        )


def _shebang(python: str) -> str:
    """Return a shebang line running *python*, if the path allows one."""
    line = f"#!{python}"
    too_long = len(line.encode()) > _MAX_SHEBANG_LENGTH
    if too_long or any(ch.isspace() for ch in python):
        return _FALLBACK_SHEBANG
    return line


def _format_posix_launcher(python: str, package_root: Path, planned: int) -> str:
    """Return the Python launcher that hands control to :mod:`cmd_seq.runtime`."""
    return (
        f"{_shebang(python)}\n"
        f"# Mock command generated by cmd-seq; replays {planned} step(s).\n"
        "import sys\n"
        "\n"
        f"_PACKAGE_ROOT = {os.fspath(package_root)!r}\n"
        "sys.path.insert(0, _PACKAGE_ROOT)\n"
        "\n"
        "from cmd_seq.runtime import main\n"
        "\n"
        f"sys.exit(main(__file__, {planned}))\n"
    )


def _escape_batch_literal(value: str) -> str:
    """Return *value* escaped for safe inclusion inside batch quotes."""
    escaped = value.replace("^", "^^").replace("%", "%%")
    return escaped.replace('"', '""')


def _format_windows_launcher(python: str, script_name: str) -> str:
    """Return the batch file contents forwarding all arguments to the launcher."""
    escaped_python = _escape_batch_literal(python)
    escaped_script = _escape_batch_literal(script_name)
    return (
        "@echo off\n"
        ":: Delayed expansion is disabled to preserve literal exclamation marks in\n"
        ":: forwarded arguments.\n"
        "setlocal ENABLEEXTENSIONS DISABLEDELAYEDEXPANSION\n"
        # %~dp0 expands to the directory holding this batch file.
        f'"{escaped_python}" "%~dp0{escaped_script}" %*\n'
        "exit /b %ERRORLEVEL%\n"
    )


def _write_text(path: Path, content: str, *, newline: str = "\n") -> None:
    try:
        path.write_text(content, encoding="utf-8", newline=newline)
    except OSError as exc:
        msg = f"write {path}: {exc.strerror or exc}"
        raise StepWriteError(msg) from exc


def _make_executable(path: Path) -> None:
    try:
        path.chmod(_LAUNCHER_MODE)
    except OSError as exc:  # pragma: no cover - OS specific
        msg = f"chmod {path}: {exc.strerror or exc}"
        raise StepWriteError(msg) from exc


def _discard(paths: t.Iterable[Path]) -> None:
    """Best-effort removal of files written before a failed generation."""
    for path in paths:
        try:
            retry_unlink(path, logger=logger)
        except OSError:
            logger.warning("Could not remove partially generated file %s", path)


def generate(spec: MockCommandSpec) -> None:
    """Write the step files and launcher(s) described by *spec*.

    Step files are written first and the launcher last, so a command that can
    be launched always has its complete script on disk.

    Raises
    ------
    StepWriteError
        If any file cannot be written. Files created by this call are removed
        before the error propagates.
    """
    written: list[Path] = []
    python = python_executable()
    try:
        for ordinal, step in enumerate(spec.steps):
            path = step_file_path(spec.script, ordinal)
            written.append(path)
            write_step_file(path, step)

        written.append(spec.script)
        _write_text(
            spec.script,
            _format_posix_launcher(python, _PACKAGE_ROOT, len(spec.steps)),
        )
        _make_executable(spec.script)

        if spec.shim is not None:
            written.append(spec.shim)
            _write_text(
                spec.shim,
                _format_windows_launcher(python, spec.name),
                newline="\r\n",
            )
    except StepWriteError:
        _discard(reversed(written))
        raise

    logger.debug(
        "Created mock command %s with %d step(s)", spec.script, len(spec.steps)
    )


def create_mock_command(
    *,
    name: str,
    directory: str | os.PathLike[str],
    sequence: t.Sequence[StepLike],
) -> None:
    """Create a mock command whose runs replay *sequence* one step at a time.

    Parameters
    ----------
    name:
        Basename of the command, e.g. ``"git"``.
    directory:
        Existing directory to create the command in. The caller owns the
        directory, including its removal and any ``PATH`` changes.
    sequence:
        Up to 100 steps, each a :class:`~cmd_seq.steps.Step` or a mapping with
        optional ``stdout``, ``stderr`` and ``exitcode`` keys. The Nth run of
        the command replays the Nth step; running it once more fails with
        exit status 255. An empty sequence yields a command that fails on its
        first run.

    Raises
    ------
    ConfigurationError
        If the options are invalid or leftover files from an earlier run
        exist. Nothing is written in that case.
    StepWriteError
        If writing any of the generated files fails.
    """
    spec = MockCommandSpec.from_options(
        name=name, directory=directory, sequence=sequence
    )
    generate(spec)


def remove_mock_command(*, name: str, directory: str | os.PathLike[str]) -> None:
    """Delete the launcher(s) and any unconsumed step files of a mock command."""
    script = Path(directory) / _validate_command_name(name)
    for path in (script, launch_shim_path(script), *step_file_paths(script)):
        retry_unlink(path, logger=logger)


__all__ = [
    "MockCommandSpec",
    "create_mock_command",
    "generate",
    "launch_shim_path",
    "remove_mock_command",
]
