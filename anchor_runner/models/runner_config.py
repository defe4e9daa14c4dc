"""
Runner Config Model
===================
Pydantic model holding everything the Runner needs to know about its
environment. Built by ``anchor_runner.core.config.load_runner_config``.

Fields:
    build_command          — Anchor build command line (shell-split, no shell)
    test_command           — Anchor test command line (shell-split, no shell)
    test_skip_build_flag   — flag appended to the test command
    source_dir             — build-output directory to stage from
    dest_dir               — staging directory the tests read artifacts from
    working_dir            — base for relative paths and subprocess cwd
    fail_on_build_error    — stop the run when the build step exits non-zero
    log_level              — logging level name
    log_dir                — directory for daily log files (None = console only)
    report_path            — JSON run report location (None = no report)
"""
import logging
import os
import shlex
from typing import Optional

from pydantic import BaseModel, field_validator

from anchor_runner.core.constants import (
    DEFAULT_BUILD_COMMAND,
    DEFAULT_TEST_COMMAND,
    DEFAULT_TEST_SKIP_BUILD_FLAG,
    DEFAULT_SOURCE_DIR,
    DEFAULT_DEST_DIR,
)


class RunnerConfig(BaseModel):
    build_command: str = DEFAULT_BUILD_COMMAND
    test_command: str = DEFAULT_TEST_COMMAND
    test_skip_build_flag: str = DEFAULT_TEST_SKIP_BUILD_FLAG
    source_dir: str = DEFAULT_SOURCE_DIR
    dest_dir: str = DEFAULT_DEST_DIR
    working_dir: str = "."
    fail_on_build_error: bool = False
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    report_path: Optional[str] = None

    @field_validator("build_command", "test_command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        try:
            argv = shlex.split(v)
        except ValueError as e:
            raise ValueError(f"Command is not valid shell syntax: {e}")
        if not argv:
            raise ValueError("Command must not be empty")
        return v.strip()

    @field_validator("test_skip_build_flag")
    @classmethod
    def validate_skip_build_flag(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Test skip-build flag must not be empty")
        return v.strip()

    @field_validator("source_dir", "dest_dir", "working_dir")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Directory path must not be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{v}'")
        return level

    # ------------------------------------------------------------------
    # Path helpers
    # ------------------------------------------------------------------
    def resolve_path(self, path: str) -> str:
        """Absolute path for ``path``, relative paths anchored at working_dir."""
        return os.path.abspath(os.path.join(self.working_dir, path))

    @property
    def source_path(self) -> str:
        return self.resolve_path(self.source_dir)

    @property
    def dest_path(self) -> str:
        return self.resolve_path(self.dest_dir)

    @property
    def working_path(self) -> str:
        return os.path.abspath(self.working_dir)
