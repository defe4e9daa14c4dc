"""
Errors
======
Exception taxonomy for the runner.

Subprocess failures are NOT exceptions: they are reported through
``ExecutionResult.exit_code``. Exceptions cover configuration and
filesystem failures only.
"""


class AnchorRunnerError(Exception):
    """Base class for all runner errors."""


class ConfigError(AnchorRunnerError):
    """Raised when environment configuration cannot be turned into a RunnerConfig."""


class StagingError(AnchorRunnerError):
    """Raised when deploy artifacts cannot be staged into the destination directory."""

    def __init__(self, message: str, source_dir: str = "", dest_dir: str = ""):
        super().__init__(message)
        self.source_dir = source_dir
        self.dest_dir = dest_dir
