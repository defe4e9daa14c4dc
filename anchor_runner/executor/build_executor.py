"""
Build Executor
==============
Runs the Anchor build and test commands as local subprocesses.
Returns structured execution results (exit code, timing, infrastructure error).

BOUNDARY RULES:
    - Executor ONLY observes execution.
    - Executor NEVER parses build or test output; stdout/stderr are
      inherited so the toolchain talks to the user directly.
    - Executor NEVER decides whether a failure aborts the run; that is
      the Runner's job.

Commands that cannot be started follow shell conventions:
    127 — executable not found
    126 — found but not executable, or the OS refused to start it
"""
import time
import logging
import subprocess
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from anchor_runner.core.constants import EXIT_COMMAND_NOT_FOUND, EXIT_NOT_EXECUTABLE

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Execution Result (returned to the Runner)
# ---------------------------------------------------------------------------
@dataclass
class ExecutionResult:
    """
    Structured output from a single build or test execution.

    Fields
    ------
    exit_code : int
        Process exit code (0 = success, non-zero = failure, -1 = never ran).
    command : list[str]
        The argv that was executed.
    execution_time_seconds : float
        Wall clock duration of the execution.
    error : str | None
        Error message if the command could not be started (not test failures).
    """
    exit_code: int = -1
    command: list[str] = field(default_factory=list)
    execution_time_seconds: float = 0.0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


def run_command(argv: Sequence[str], cwd: Optional[str] = None) -> ExecutionResult:
    """
    Execute ``argv`` and block until it exits.

    Parameters
    ----------
    argv : Sequence[str]
        Command and arguments. Executed without a shell.
    cwd : str | None
        Working directory for the child process.

    Returns
    -------
    ExecutionResult
        Always returned for start-up failures; the child's own
        exit status is never turned into an exception.
    """
    result = ExecutionResult(command=list(argv))
    start_time = time.monotonic()

    logger.info("Running: %s", " ".join(argv))
    try:
        completed = subprocess.run(list(argv), cwd=cwd, check=False)
        result.exit_code = completed.returncode

    except FileNotFoundError as e:
        result.error = f"Command not found: {argv[0]} ({e})"
        result.exit_code = EXIT_COMMAND_NOT_FOUND
        logger.error(result.error)

    except PermissionError as e:
        result.error = f"Command not executable: {argv[0]} ({e})"
        result.exit_code = EXIT_NOT_EXECUTABLE
        logger.error(result.error)

    except OSError as e:
        # e.g. exec format error (no shebang, foreign binary)
        result.error = f"Command could not be started: {argv[0]} ({e})"
        result.exit_code = EXIT_NOT_EXECUTABLE
        logger.error(result.error)

    result.execution_time_seconds = round(time.monotonic() - start_time, 3)
    logger.info(
        "Command finished | exit=%d | time=%.2fs | cmd=%s",
        result.exit_code, result.execution_time_seconds, argv[0],
    )
    return result


# ---------------------------------------------------------------------------
# Build / Test capability
# ---------------------------------------------------------------------------
class CommandStep(Protocol):
    """Anything the Runner can execute as its build or test step."""

    name: str

    def run(self) -> ExecutionResult:
        ...


class SubprocessStep:
    """
    A build or test step backed by a real subprocess.

    Parameters
    ----------
    name : str
        Step name used in logs and reports ("build" / "test").
    argv : Sequence[str]
        Command to execute.
    cwd : str | None
        Working directory for the command.
    """

    def __init__(self, name: str, argv: Sequence[str], cwd: Optional[str] = None):
        if not argv:
            raise ValueError(f"{name} step needs a command")
        self.name = name
        self.argv = tuple(argv)
        self.cwd = cwd

    def run(self) -> ExecutionResult:
        return run_command(self.argv, cwd=self.cwd)

    def __repr__(self) -> str:
        return f"SubprocessStep(name={self.name!r}, argv={self.argv!r}, cwd={self.cwd!r})"
