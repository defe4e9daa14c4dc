"""
Configuration
=============
Reads environment variables, layered over the .env file in the working
directory (python-dotenv). The Anchor workspace, not the install location,
is where .env is looked up.

Environment Variables:
    ANCHOR_BUILD_COMMAND         — Build command line (default: anchor build)
    ANCHOR_TEST_COMMAND          — Test command line (default: anchor test)
    ANCHOR_TEST_SKIP_BUILD_FLAG  — Flag telling the test command not to rebuild (default: --skip-build)
    ANCHOR_DEPLOY_SOURCE_DIR     — Build output to stage from (default: ../target/deploy)
    ANCHOR_DEPLOY_DEST_DIR       — Staging directory (default: target/deploy)
    ANCHOR_FAIL_ON_BUILD_ERROR   — Abort when the build fails (default: false)
    ANCHOR_RUNNER_LOG_LEVEL      — Logging level name (default: INFO)
    ANCHOR_RUNNER_LOG_DIR        — Directory for daily log files (default: unset, console only)
    ANCHOR_RUNNER_REPORT_PATH    — JSON run report path (default: unset, no report)

Build Failure Policy:
    A failing build is logged and ignored by default: staging and tests still
    run against whatever artifacts exist. Set ANCHOR_FAIL_ON_BUILD_ERROR=true
    to stop the run instead.
"""
import os
from typing import Mapping, Optional

from dotenv import dotenv_values
from pydantic import ValidationError

from anchor_runner.core.constants import (
    DEFAULT_BUILD_COMMAND,
    DEFAULT_TEST_COMMAND,
    DEFAULT_TEST_SKIP_BUILD_FLAG,
    DEFAULT_SOURCE_DIR,
    DEFAULT_DEST_DIR,
)
from anchor_runner.core.errors import ConfigError
from anchor_runner.models.runner_config import RunnerConfig

DOTENV_FILENAME = ".env"

# Environment variable → (RunnerConfig field, default)
ENV_FIELDS: dict[str, tuple[str, Optional[str]]] = {
    "ANCHOR_BUILD_COMMAND":        ("build_command",        DEFAULT_BUILD_COMMAND),
    "ANCHOR_TEST_COMMAND":         ("test_command",         DEFAULT_TEST_COMMAND),
    "ANCHOR_TEST_SKIP_BUILD_FLAG": ("test_skip_build_flag", DEFAULT_TEST_SKIP_BUILD_FLAG),
    "ANCHOR_DEPLOY_SOURCE_DIR":    ("source_dir",           DEFAULT_SOURCE_DIR),
    "ANCHOR_DEPLOY_DEST_DIR":      ("dest_dir",             DEFAULT_DEST_DIR),
    "ANCHOR_FAIL_ON_BUILD_ERROR":  ("fail_on_build_error",  "false"),
    "ANCHOR_RUNNER_LOG_LEVEL":     ("log_level",            "INFO"),
    "ANCHOR_RUNNER_LOG_DIR":       ("log_dir",              None),
    "ANCHOR_RUNNER_REPORT_PATH":   ("report_path",          None),
}

# Fields where an empty value means "not configured"
_OPTIONAL_FIELDS = {"log_dir", "report_path"}


def read_dotenv(working_dir: str) -> dict[str, str]:
    """Values from ``<working_dir>/.env``; empty if the file is absent."""
    env_file = os.path.join(working_dir, DOTENV_FILENAME)
    if not os.path.isfile(env_file):
        return {}
    return {k: v for k, v in dotenv_values(env_file).items() if v is not None}


def load_runner_config(
    environ: Optional[Mapping[str, str]] = None,
    working_dir: Optional[str] = None,
) -> RunnerConfig:
    """
    Build a validated RunnerConfig from environment variables.

    Parameters
    ----------
    environ : Mapping[str, str] | None
        Variables to read. Defaults to ``os.environ`` layered over the
        ``.env`` file in the working directory (process environment wins).
    working_dir : str | None
        Base directory for relative paths. Defaults to the current directory.

    Returns
    -------
    RunnerConfig

    Raises
    ------
    ConfigError
        If any value fails validation.
    """
    working_dir = working_dir or os.getcwd()
    if environ is None:
        environ = {**read_dotenv(working_dir), **os.environ}

    values: dict[str, object] = {"working_dir": working_dir}
    for env_name, (field_name, default) in ENV_FIELDS.items():
        raw = environ.get(env_name)
        if field_name in _OPTIONAL_FIELDS:
            raw = (raw or "").strip() or None
        if raw is None:
            raw = default
        if raw is not None:
            values[field_name] = raw

    try:
        return RunnerConfig(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid runner configuration: {problems}") from e
