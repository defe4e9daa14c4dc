"""
Report Writer
=============
Serializes a RunReport into a JSON file for CI dashboards.
"""
import logging
import os

from anchor_runner.models.run_report import RunReport

logger = logging.getLogger(__name__)


class ReportWriter:
    """Writes run reports; a failed write never changes the run's outcome."""

    @staticmethod
    def write_report(report: RunReport, output_path: str = "anchor-run.json") -> bool:
        try:
            abs_output = os.path.abspath(output_path)
            parent = os.path.dirname(abs_output)
            if parent:
                os.makedirs(parent, exist_ok=True)

            logger.info("Writing run report to %s", abs_output)
            with open(abs_output, "w", encoding="utf-8") as f:
                f.write(report.model_dump_json(indent=2))
            return True

        except OSError as e:
            logger.error("Failed to write run report: %s", e, exc_info=True)
            return False
