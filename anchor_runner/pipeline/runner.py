"""
Runner
======
Drives one build → stage → test cycle for an Anchor workspace.

Flow:
    1. Build (unless skipped)   — failure is logged and tolerated unless
                                  fail_on_build_error is set
    2. Stage artifacts          — any filesystem failure aborts the run
    3. Test (always, once)      — invoked with its skip-build flag
    4. Exit code                — 1 if the test failed, otherwise 0

The build and test steps are injected so the flow can be exercised with
fakes; ``Runner.from_config`` wires the real subprocess steps.
"""
import time
import logging
from typing import Callable, Optional

from anchor_runner.core.constants import (
    EXIT_OK,
    EXIT_FAILURE,
    STEP_BUILD,
    STEP_STAGE,
    STEP_TEST,
    STATUS_PASSED,
    STATUS_FAILED,
    STATUS_SKIPPED,
)
from anchor_runner.core.errors import StagingError
from anchor_runner.executor.build_executor import CommandStep, ExecutionResult, SubprocessStep
from anchor_runner.executor.command_resolver import resolve_commands
from anchor_runner.models.run_report import RunReport, StepReport
from anchor_runner.models.runner_config import RunnerConfig
from anchor_runner.services.staging_service import StagedArtifacts, stage_artifacts

logger = logging.getLogger(__name__)

Stager = Callable[[str, str], StagedArtifacts]


def _step_report(name: str, result: ExecutionResult) -> StepReport:
    return StepReport(
        name=name,
        status=STATUS_PASSED if result.succeeded else STATUS_FAILED,
        exit_code=result.exit_code,
        duration_seconds=result.execution_time_seconds,
        detail=result.error or "",
    )


class Runner:
    """
    Parameters
    ----------
    builder : CommandStep
        Compiles the program (``anchor build``).
    tester : CommandStep
        Runs the test suite without rebuilding (``anchor test --skip-build``).
    source_dir, dest_dir : str
        Staging source and destination, already resolved.
    fail_on_build_error : bool
        Stop before staging when the build exits non-zero.
    stager : Callable[[str, str], StagedArtifacts]
        Staging implementation; defaults to ``stage_artifacts``.
    """

    def __init__(
        self,
        builder: CommandStep,
        tester: CommandStep,
        source_dir: str,
        dest_dir: str,
        fail_on_build_error: bool = False,
        stager: Optional[Stager] = None,
    ):
        self.builder = builder
        self.tester = tester
        self.source_dir = source_dir
        self.dest_dir = dest_dir
        self.fail_on_build_error = fail_on_build_error
        self.stager = stager or stage_artifacts

    @classmethod
    def from_config(cls, config: RunnerConfig) -> "Runner":
        commands = resolve_commands(config)
        cwd = config.working_path
        return cls(
            builder=SubprocessStep(STEP_BUILD, commands.build_argv, cwd=cwd),
            tester=SubprocessStep(STEP_TEST, commands.test_argv, cwd=cwd),
            source_dir=config.source_path,
            dest_dir=config.dest_path,
            fail_on_build_error=config.fail_on_build_error,
        )

    def run(self, skip_build: bool = False) -> RunReport:
        report = RunReport(skip_build=skip_build)

        # ------------------------------------------------------------------
        # 1. Build
        # ------------------------------------------------------------------
        if skip_build:
            logger.info("[BUILD] Skipped on request")
            report.steps.append(StepReport(name=STEP_BUILD, status=STATUS_SKIPPED, detail="skipped on request"))
        else:
            logger.info("[BUILD] Starting")
            build_result = self.builder.run()
            report.steps.append(_step_report(STEP_BUILD, build_result))

            if not build_result.succeeded:
                if self.fail_on_build_error:
                    logger.error("[BUILD] Failed with exit %d, aborting run", build_result.exit_code)
                    self._skip_remaining(report, STEP_STAGE, STEP_TEST, reason="build failed")
                    return report.finish(EXIT_FAILURE)
                logger.warning(
                    "[BUILD] Failed with exit %d, continuing with existing artifacts",
                    build_result.exit_code,
                )

        # ------------------------------------------------------------------
        # 2. Stage
        # ------------------------------------------------------------------
        logger.info("[STAGE] Starting")
        start_time = time.monotonic()
        try:
            staged = self.stager(self.source_dir, self.dest_dir)
        except StagingError as e:
            logger.error("[STAGE] %s", e)
            report.steps.append(StepReport(
                name=STEP_STAGE,
                status=STATUS_FAILED,
                duration_seconds=round(time.monotonic() - start_time, 3),
                detail=str(e),
            ))
            self._skip_remaining(report, STEP_TEST, reason="staging failed")
            return report.finish(EXIT_FAILURE)

        report.staged_files = list(staged.files)
        report.steps.append(StepReport(
            name=STEP_STAGE,
            status=STATUS_PASSED,
            duration_seconds=round(time.monotonic() - start_time, 3),
            detail=f"{len(staged.files)} file(s) staged into {staged.dest_dir}",
        ))

        # ------------------------------------------------------------------
        # 3. Test
        # ------------------------------------------------------------------
        logger.info("[TEST] Starting")
        test_result = self.tester.run()
        report.steps.append(_step_report(STEP_TEST, test_result))

        # ------------------------------------------------------------------
        # 4. Exit code
        # ------------------------------------------------------------------
        if not test_result.succeeded:
            logger.error("[TEST] Failed with exit %d", test_result.exit_code)
            return report.finish(EXIT_FAILURE)

        logger.info("[TEST] Passed")
        return report.finish(EXIT_OK)

    @staticmethod
    def _skip_remaining(report: RunReport, *names: str, reason: str) -> None:
        for name in names:
            report.steps.append(StepReport(name=name, status=STATUS_SKIPPED, detail=reason))
