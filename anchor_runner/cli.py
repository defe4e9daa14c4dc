"""
CLI
===
``anchor-runner [--skip-build]``

Only the first argument is inspected: it selects the skip-build path when
it is exactly ``--skip-build``. Anything else runs the build first.
"""
import sys
import logging
from typing import Optional, Sequence

from anchor_runner.core.config import load_runner_config
from anchor_runner.core.constants import SKIP_BUILD_FLAG, EXIT_CONFIG_ERROR
from anchor_runner.core.errors import ConfigError
from anchor_runner.pipeline.runner import Runner
from anchor_runner.services.report_writer import ReportWriter
from anchor_runner.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def should_skip_build(argv: Sequence[str]) -> bool:
    return len(argv) > 0 and argv[0] == SKIP_BUILD_FLAG


def main(argv: Optional[Sequence[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    try:
        config = load_runner_config()
    except ConfigError as e:
        setup_logging(level=logging.INFO)
        logger.error("%s", e)
        return EXIT_CONFIG_ERROR

    setup_logging(level=logging.getLevelName(config.log_level), log_dir=config.log_dir)

    skip_build = should_skip_build(argv)
    ignored = list(argv[1:] if skip_build else argv)
    if ignored:
        logger.debug("Ignoring arguments: %s", " ".join(ignored))

    report = Runner.from_config(config).run(skip_build=skip_build)

    if config.report_path:
        ReportWriter.write_report(report, config.resolve_path(config.report_path))

    logger.info("Run finished | exit=%d | steps=%s", report.exit_code,
                ", ".join(f"{s.name}:{s.status}" for s in report.steps))
    return report.exit_code


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())
