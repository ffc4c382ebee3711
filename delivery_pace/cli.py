"""CLI entrypoint for the delivery pace benchmark pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from delivery_pace.common.config_loader import ConfigBundle, load_all_configs, resolve_sites
from delivery_pace.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from delivery_pace.common.errors import PipelineError
from delivery_pace.common.ids import generate_run_id
from delivery_pace.common.logging import build_logger, close_logger, log_event
from delivery_pace.common.time_utils import parse_run_date
from delivery_pace.pipeline.export import write_benchmark_tables
from delivery_pace.pipeline.reports import write_run_summary
from delivery_pace.pipeline.stages import run_benchmark, run_normalise, run_temporal


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--site", default="all")
    parser.add_argument("--run-date", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def execute_stage(
    stage: str,
    site_cfg: dict,
    bundle: ConfigBundle,
    data_dir: Path,
    run_id: str,
    run_date: str,
    logger: logging.Logger,
):
    if stage == "normalise":
        run_normalise(site_cfg, bundle.pipeline, data_dir, logger=logger, run_id=run_id)
    elif stage == "benchmark":
        run_benchmark(site_cfg, bundle.pipeline, data_dir, run_id, run_date, logger=logger)
    elif stage == "temporal":
        run_temporal(site_cfg, data_dir)
    else:
        raise ValueError(f"Unknown stage: {stage}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    run_date = parse_run_date(args.run_date)
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    try:
        bundle = load_all_configs(config_dir, overlay_config_dir=overlay_config_dir)
        sites = resolve_sites(args.site, bundle)
        stages = STAGES if args.command == "all" else (args.command,)

        failures: dict[str, list[dict]] = {}

        for stage in stages:
            log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
            for site in sites:
                if site in failures:
                    log_event(
                        logger,
                        f"skipping site {site} after an earlier stage failure",
                        level=logging.WARNING,
                        run_id=run_id,
                        stage=stage,
                        site=site,
                        event="STAGE_SKIP",
                        status="skipped",
                    )
                    continue
                try:
                    execute_stage(stage, bundle.sites[site], bundle, data_dir, run_id, run_date, logger)
                except PipelineError as exc:
                    failures[site] = [{"stage": stage, "error_code": exc.error_code, "message": str(exc)}]
                    log_event(
                        logger,
                        f"stage failed for site {site}: {exc}",
                        level=logging.ERROR,
                        run_id=run_id,
                        stage=stage,
                        site=site,
                        event="STAGE_FAIL",
                        status="error",
                        error_code=exc.error_code,
                    )
                    if args.strict:
                        return EXIT_HARD_FAIL
                except Exception as exc:
                    failures[site] = [{"stage": stage, "error_code": "UNEXPECTED_ERROR", "message": str(exc)}]
                    logger.exception(
                        f"unexpected failure for site {site}",
                        extra={
                            "run_id": run_id,
                            "stage": stage,
                            "site": site,
                            "event": "STAGE_FAIL",
                            "status": "error",
                            "error_code": "UNEXPECTED_ERROR",
                        },
                    )
                    if args.strict:
                        return EXIT_HARD_FAIL
            log_event(logger, "stage end", run_id=run_id, stage=stage, event="STAGE_END", status="ok")

        write_run_summary(data_dir, run_id=run_id, run_date=run_date, sites=sites, failures=failures)
        write_benchmark_tables(bundle.pipeline, data_dir, [site for site in sites if site not in failures])
        if failures:
            return EXIT_PARTIAL
        return EXIT_SUCCESS
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError as exc:
        print(f"{exc.error_code}: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
