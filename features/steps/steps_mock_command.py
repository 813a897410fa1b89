"""Behave steps for scripted mock command features."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import typing as t
from pathlib import Path

from behave import given, then, when  # type: ignore[attr-defined]

from cmd_seq import (
    EXHAUSTED_EXIT_CODE,
    ConfigurationError,
    create_mock_command,
    pending_step_files,
    step_file_path,
)


class BehaveContext(t.Protocol):
    """Behave step context for mock command scenarios."""

    table: t.Any
    directory: Path
    runs: list[subprocess.CompletedProcess[str]]
    generation_error: ConfigurationError | None

    def add_cleanup(self, func: t.Callable[..., object], *args: object) -> None:
        """Register *func* to run when the scenario ends."""
        ...


def _decode(value: str) -> str:
    return value.replace("\\n", "\n").replace("\\t", "\t")


def _ensure_directory(context: BehaveContext) -> Path:
    if not hasattr(context, "directory"):
        context.directory = Path(tempfile.mkdtemp(prefix="cmd-seq-"))
        context.runs = []
        context.add_cleanup(shutil.rmtree, context.directory)
    return context.directory


@given('a mock command "{name}" scripted with')
def step_scripted_command(context: BehaveContext, name: str) -> None:
    """Generate *name* from the scenario table."""
    sequence = [
        {
            "stdout": _decode(row["stdout"]),
            "stderr": _decode(row["stderr"]),
            "exitcode": int(row["exitcode"] or 0),
        }
        for row in context.table
    ]
    create_mock_command(
        name=name, directory=_ensure_directory(context), sequence=sequence
    )


@given('a mock command "{name}" scripted with no steps')
def step_command_without_steps(context: BehaveContext, name: str) -> None:
    """Generate *name* with an empty sequence."""
    create_mock_command(name=name, directory=_ensure_directory(context), sequence=[])


@given('a leftover step file for "{name}"')
def step_leftover_step_file(context: BehaveContext, name: str) -> None:
    """Simulate an earlier run that did not clean up."""
    script = _ensure_directory(context) / name
    step_file_path(script, 5).write_text("{}", encoding="utf-8")


@when('I run the mock command "{name}" {count:d} times')
def step_run_command(context: BehaveContext, name: str, count: int) -> None:
    """Launch *name* *count* times in sequence."""
    script = _ensure_directory(context) / name
    for _ in range(count):
        context.runs.append(
            subprocess.run(  # noqa: S603
                [str(script)],
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=False,
            )
        )


@when('I try to create a mock command "{name}" with {count:d} step')
def step_try_create(context: BehaveContext, name: str, count: int) -> None:
    """Attempt generation and keep the configuration error."""
    context.generation_error = None
    try:
        create_mock_command(
            name=name, directory=_ensure_directory(context), sequence=[{}] * count
        )
    except ConfigurationError as exc:
        context.generation_error = exc


@then('run {index:d} exits with {code:d} and {stream} "{text}"')
def step_check_run(
    context: BehaveContext, index: int, code: int, stream: str, text: str
) -> None:
    """Assert the exit status and one output stream of a launch."""
    result = context.runs[index - 1]
    assert result.returncode == code
    assert getattr(result, stream) == _decode(text)


@then('run {index:d} exits with {code:d} and {stream} ""')
def step_check_run_empty(
    context: BehaveContext, index: int, code: int, stream: str
) -> None:
    """Assert the exit status and an empty output stream of a launch."""
    step_check_run(context, index, code, stream, "")


@then('{count:d} step files remain for "{name}"')
def step_check_remaining(context: BehaveContext, count: int, name: str) -> None:
    """Assert how many step files are still unconsumed."""
    assert len(pending_step_files(context.directory / name)) == count


@then("the last run reports exhaustion after {planned:d} steps")
def step_check_exhaustion(context: BehaveContext, planned: int) -> None:
    """Assert the final launch ran out of steps."""
    result = context.runs[-1]
    assert result.returncode == EXHAUSTED_EXIT_CODE
    assert result.stderr.startswith("no more test steps!")
    assert f"at most {planned} time(s)" in result.stderr


@then("generation fails with a configuration error")
def step_check_generation_failed(context: BehaveContext) -> None:
    """Generation must have been refused."""
    assert context.generation_error is not None


@then("the mock command directory holds only the leftover step file")
def step_check_directory(context: BehaveContext) -> None:
    """A refused generation writes nothing."""
    assert [path.name for path in context.directory.iterdir()] == ["git.step-05"]
