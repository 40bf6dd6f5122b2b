#!/usr/bin/env python3
"""
Run a conjunction event study from the command line.

Scans an interval for a two-or-more body conjunction with the Swiss
Ephemeris, computes event metrics on a price CSV, compares them with a
random baseline and writes the CSV reports.

Usage:
    python scripts/run_study.py --prices btc_1h.csv --bodies MARS SATURN \
        --start 2020-01-01 --end 2024-01-01 --out reports/
"""

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from astro_events.config.loader import ConfigLoader
from astro_events.ephemeris import parse_body
from astro_events.ephemeris.swisseph_provider import SwissEphemeris
from astro_events.errors import BaselineSamplingError, InputValidationError, PersistenceError
from astro_events.export import export_event_metrics_csv, export_hits_csv, export_periods_csv
from astro_events.data import load_price_series
from astro_events.logging import configure_logging, get_logger
from astro_events.persistence import EventStore
from astro_events.search import SearchRequest, TransitSearchEngine, get_condition
from astro_events.study import EventStudyRunner


def parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--prices", nargs="+", required=True, help="Price CSV file(s)")
    parser.add_argument("--bodies", nargs="+", required=True, help="Body names, e.g. MARS SATURN")
    parser.add_argument("--start", type=parse_date, required=True, help="Start date (UTC)")
    parser.add_argument("--end", type=parse_date, required=True, help="End date (UTC)")
    parser.add_argument("--condition", default="longitude_span",
                        choices=["longitude_span", "same_degree_in_sign", "retrograde"])
    parser.add_argument("--same-sign", action="store_true", help="Only match bodies in the same zodiac sign")
    parser.add_argument("--study", default="default", help="Study id in config/studies.yaml")
    parser.add_argument("--config-dir", type=Path, default=project_root / "config")
    parser.add_argument("--ephe-path", default=None, help="Swiss Ephemeris data folder")
    parser.add_argument("--out", type=Path, default=Path("reports"))
    parser.add_argument("--db", default=None, help="Also store the hits with market data in this SQLite file")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--json-logs", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, format_json=args.json_logs)
    logger = get_logger("run_study")

    config = ConfigLoader.create(args.config_dir).build_config(args.study)
    bodies = [parse_body(b) for b in args.bodies]

    ephemeris = SwissEphemeris(ephe_path=args.ephe_path, use_moshier=args.ephe_path is None)
    prices = load_price_series(args.prices)

    request = SearchRequest(
        start_utc=args.start,
        end_utc=args.end,
        step=timedelta(minutes=config.scan.step_minutes),
        tolerance_deg=config.scan.tolerance_deg,
        bodies=tuple(bodies),
        max_gap_to_merge=timedelta(minutes=config.scan.step_minutes * config.scan.max_gap_multiplier),
        require_same_sign=args.same_sign,
    )

    try:
        periods = TransitSearchEngine(ephemeris, get_condition(args.condition)).find_periods(request)
    except InputValidationError as e:
        logger.error("Invalid scan request", error=str(e), context=e.context)
        return 2

    event_code = f"{'-'.join(b.name for b in bodies)} {args.condition}"
    runner = EventStudyRunner(prices, config)

    try:
        result = runner.run(event_code, periods)
    except InputValidationError as e:
        logger.error("Invalid event study", error=str(e), context=e.context)
        return 2
    except BaselineSamplingError as e:
        logger.error("Baseline sampling failed", requested=e.requested, accepted=e.accepted)
        return 1

    args.out.mkdir(parents=True, exist_ok=True)
    export_periods_csv(args.out / "periods.csv", periods, bodies, args.condition, request.tolerance_deg)
    export_hits_csv(args.out / "hits.csv", periods, bodies, prices)
    export_event_metrics_csv(args.out / "event_metrics.csv", result.event_rows)
    export_event_metrics_csv(args.out / "baseline_metrics.csv", result.baseline_rows)

    if args.db:
        try:
            condition_code = f"{args.condition}_same_sign" if args.same_sign else args.condition
            EventStore(args.db).save_period_hits(condition_code, periods, prices)
        except PersistenceError as e:
            logger.error("Could not store period hits", error=str(e), target=e.target)
            return 1

    print(result.event_summary.narrative)
    print(result.baseline_summary.narrative)
    if result.comparison is not None:
        print(result.comparison.summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
