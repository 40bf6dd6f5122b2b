"""Tests for the run_study command line script."""

import csv
import importlib.util
from pathlib import Path

import pytest
import structlog

pytest.importorskip("swisseph")

from astro_events.persistence import EventStore

REPO_ROOT = Path(__file__).parents[2]

# 2024-01-11T00:00:00Z; the new moon falls at about 11:57 UTC that day
JAN_11 = 1704931200


def load_script():
    spec = importlib.util.spec_from_file_location("run_study", REPO_ROOT / "scripts" / "run_study.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def write_prices(path, first_ts, hours):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["timestamp", "open", "high", "low", "close", "volume"])
        for i in range(hours):
            writer.writerow([first_ts + i * 3600, 100, 100, 100, 100, 10])
    return path


@pytest.fixture
def run_study():
    yield load_script()
    structlog.reset_defaults()


def study_args(prices, out, *extra):
    return [
        "--prices", str(prices),
        "--bodies", "SUN", "MOON",
        "--start", "2024-01-10",
        "--end", "2024-01-12",
        "--config-dir", str(REPO_ROOT / "config"),
        "--out", str(out),
        *extra,
    ]


class TestRunStudyScript:
    """Test argument handling and exit codes of the study script."""

    def test_same_sign_flag(self, run_study):
        """--same-sign is off unless given."""
        parser = run_study.build_parser()
        base = ["--prices", "p.csv", "--bodies", "SUN", "MOON", "--start", "2024-01-01", "--end", "2024-02-01"]

        assert parser.parse_args(base).same_sign is False
        assert parser.parse_args(base + ["--same-sign"]).same_sign is True

    def test_short_history_is_invalid_input(self, run_study, tmp_path):
        """History shorter than the pre and post windows exits with 2 before writing reports."""
        prices = write_prices(tmp_path / "btc.csv", JAN_11 + 10 * 3600, 3)
        out = tmp_path / "out"

        assert run_study.main(study_args(prices, out)) == 2
        assert not (out / "periods.csv").exists()

    def test_reports_and_stored_hits(self, run_study, tmp_path):
        """A full run writes hits with market columns and stores them per condition."""
        prices = write_prices(tmp_path / "btc.csv", JAN_11 - 10 * 86400, 30 * 24)
        out = tmp_path / "out"
        db = tmp_path / "events.db"

        assert run_study.main(study_args(prices, out, "--same-sign", "--db", str(db))) == 0

        with open(out / "hits.csv", newline="", encoding="utf-8") as f:
            hits = list(csv.DictReader(f))
        assert hits
        assert hits[0]["ret_prev_hit"] == "0.0000"
        assert hits[0]["bar_close"] == "100.0"

        stored = EventStore(str(db)).get_events("longitude_span_same_sign")
        assert len(stored) == len(hits)
        assert all(e.ret_from_period_start == 0.0 for e in stored)
