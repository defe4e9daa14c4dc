"""
Run Report Model
================
Pydantic models describing what a single Runner invocation did.

StepReport fields:
    name              — build / stage / test
    status            — passed / failed / skipped
    exit_code         — subprocess exit code (None for stage or skipped steps)
    duration_seconds  — wall clock duration of the step
    detail            — human-readable note (error text, file count, skip reason)

RunReport fields:
    skip_build        — True if the build step was skipped on request
    steps             — StepReports in execution order
    staged_files      — files copied into the staging directory (relative, POSIX)
    exit_code         — process exit code the CLI will return
    started_at / finished_at — UTC timestamps
"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StepReport(BaseModel):
    name: str
    status: str
    exit_code: Optional[int] = None
    duration_seconds: float = 0.0
    detail: str = ""


class RunReport(BaseModel):
    skip_build: bool = False
    steps: List[StepReport] = Field(default_factory=list)
    staged_files: List[str] = Field(default_factory=list)
    exit_code: int = 0
    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: Optional[datetime] = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def step(self, name: str) -> Optional[StepReport]:
        """Return the report for step ``name``, or None if it never ran."""
        for step in self.steps:
            if step.name == name:
                return step
        return None

    def finish(self, exit_code: int) -> "RunReport":
        self.exit_code = exit_code
        self.finished_at = _utcnow()
        return self
