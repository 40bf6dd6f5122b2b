#!/usr/bin/env python3
"""
Detect N-body clusters with the Swiss Ephemeris and store them in SQLite.

Usage:
    python scripts/scan_clusters.py --bodies SUN MERCURY VENUS MARS \
        --start 2024-01-01 --end 2024-06-01 --db events.db
"""

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from astro_events.config.loader import ConfigLoader
from astro_events.data import load_price_series
from astro_events.ephemeris import parse_body
from astro_events.ephemeris.swisseph_provider import SwissEphemeris
from astro_events.errors import PersistenceError
from astro_events.logging import configure_logging, get_logger
from astro_events.persistence import EventStore
from astro_events.search import LONGITUDE_SPAN, SAME_DEGREE_IN_SIGN, ClusterDetector, ConjunctionSpec


def parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--bodies", nargs="+", required=True, help="Candidate bodies")
    parser.add_argument("--start", type=parse_date, required=True, help="Start date (UTC)")
    parser.add_argument("--end", type=parse_date, required=True, help="End date (UTC)")
    parser.add_argument("--mode", default=LONGITUDE_SPAN, choices=[LONGITUDE_SPAN, SAME_DEGREE_IN_SIGN])
    parser.add_argument("--prices", nargs="*", default=[], help="Optional price CSV file(s)")
    parser.add_argument("--study", default="default", help="Study id in config/studies.yaml")
    parser.add_argument("--config-dir", type=Path, default=project_root / "config")
    parser.add_argument("--ephe-path", default=None, help="Swiss Ephemeris data folder")
    parser.add_argument("--db", default="events.db", help="SQLite database file")
    parser.add_argument("--store-states", action="store_true", help="Also store sampled planet states")
    parser.add_argument(
        "--period-index", type=int, default=None,
        help="Period index of this run (default: next free index in the database)",
    )
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level)
    logger = get_logger("scan_clusters")

    params = ConfigLoader.create(args.config_dir).build_config(args.study).cluster
    bodies = tuple(parse_body(b) for b in args.bodies)
    step = timedelta(minutes=params.step_minutes)

    ephemeris = SwissEphemeris(ephe_path=args.ephe_path, use_moshier=args.ephe_path is None)
    prices = load_price_series(args.prices) if args.prices else None

    try:
        store = EventStore(args.db)
        period_index = args.period_index
        if period_index is None:
            period_index = store.next_period_index(args.mode)
    except PersistenceError as e:
        logger.error("Could not open event store", error=str(e), target=e.target)
        return 1

    try:
        spec = ConjunctionSpec(
            condition_code=args.mode,
            bodies_universe=bodies,
            min_bodies=params.min_bodies,
            tolerance_deg=params.tolerance_deg,
            require_same_sign=params.require_same_sign,
        )
        events = list(
            ClusterDetector(ephemeris, prices).generate(args.start, args.end, spec, step, period_index)
        )
    except ValueError as e:
        logger.error("Invalid cluster scan", error=str(e))
        return 2

    try:
        store.save_events(events)
        if args.store_states:
            store.sample_planet_states(ephemeris, args.start, args.end, step, bodies)
    except PersistenceError as e:
        logger.error("Could not store events", error=str(e), target=e.target)
        return 1

    for event in events:
        names = "+".join(p.body.name for p in event.bodies)
        print(f"{event.time_utc.isoformat()}  {names}  span={event.metric:.3f}")
    print(store.get_stats())
    return 0


if __name__ == "__main__":
    sys.exit(main())
