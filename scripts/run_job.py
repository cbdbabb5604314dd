"""
Run one or more flatrec job files.

Usage:
    uv run python scripts/run_job.py jobs/people.yaml [jobs/other.yaml ...]
    uv run python scripts/run_job.py --strict jobs/people.yaml

Each job file names the source file, the target type and the mapper
settings. Mapped records are exported when the job has an output path.
Pass --strict to abort a job on its first bad record.
"""

from __future__ import annotations

import logging
import sys

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_job")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    import flatrec

    args = sys.argv[1:]
    strict = "--strict" in args
    config_paths = [a for a in args if a != "--strict"]
    if not config_paths:
        log.error("No job files given")
        return 2

    failed = 0
    for config_path in config_paths:
        log.info("=" * 70)
        log.info("Job: %s", config_path)
        log.info("=" * 70)

        config = flatrec.load_config(config_path)
        if strict:
            config = config.model_copy(update={"strict": True})

        report = flatrec.run_job(config)
        for result in report.errors:
            log.warning("  record %d: %s", result.record.number, result.error)
        if report.output_path:
            log.info("  wrote %s", report.output_path)
        log.info(
            "Done: %d mapped, %d filtered, %d errors\n",
            report.mapped_records,
            report.filtered_records,
            report.error_records,
        )
        failed += report.error_records

    log.info("All jobs processed.")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
