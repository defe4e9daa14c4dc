"""
Command Resolver
================
Turns configured command lines into argv lists for the Build Executor.

Resolver never executes commands. It only returns argv sequences.
Commands are split with POSIX shell rules and later run WITHOUT a shell.

Deterministic: same RunnerConfig → same commands, always.
"""
import shlex
from dataclasses import dataclass

from anchor_runner.models.runner_config import RunnerConfig


@dataclass(frozen=True)
class ResolvedCommands:
    """
    Immutable container for the resolved build and test argv lists.

    Fields
    ------
    build_argv : tuple[str, ...]
        Build command (e.g. ("anchor", "build")).
    test_argv : tuple[str, ...]
        Test command INCLUDING the skip-build flag
        (e.g. ("anchor", "test", "--skip-build")).
    """
    build_argv: tuple[str, ...]
    test_argv: tuple[str, ...]


def with_flag(argv: list[str], flag: str) -> list[str]:
    """
    Add ``flag`` to the command's own options unless it already carries it.

    Arguments after a ``--`` separator are passed through to another tool,
    so they neither count as the flag nor receive it.
    """
    argv = list(argv)
    split = argv.index("--") if "--" in argv else len(argv)
    if flag in argv[:split]:
        return argv
    return argv[:split] + [flag] + argv[split:]


def resolve_commands(config: RunnerConfig) -> ResolvedCommands:
    """
    Split the configured build/test command lines.

    Parameters
    ----------
    config : RunnerConfig
        Validated configuration (commands are known to be non-empty).

    Returns
    -------
    ResolvedCommands
        Frozen dataclass with build_argv and test_argv.
    """
    build_argv = shlex.split(config.build_command)
    test_argv = with_flag(shlex.split(config.test_command), config.test_skip_build_flag)
    return ResolvedCommands(build_argv=tuple(build_argv), test_argv=tuple(test_argv))
