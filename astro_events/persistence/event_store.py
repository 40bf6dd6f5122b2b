"""SQLite persistence for conjunction events, period hits and sampled planet states."""

import json
import sqlite3
import threading
from collections.abc import Iterable, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

import structlog

from ..data.models import PriceBar
from ..data.series import PriceSeries
from ..ephemeris import Body, BodyState, Ephemeris, TableEphemeris
from ..errors import PersistenceError
from ..geometry import minimal_circular_span
from ..metrics.hit_market import HitMarket, enrich_period_hits
from ..search.clusters import BodyPosition, ConjunctionEvent
from ..search.models import Period
from ..utils.time import time_grid


@dataclass
class StoredEvent:
    """Event row read back from the store, with its body rows."""
    event_id: int
    condition_code: str
    period_index: int
    hit_index: int
    minutes_from_start: int
    time_utc: datetime
    metric: Optional[float]
    metadata: dict[str, Any]
    cluster_key: str
    bodies: list[BodyPosition] = field(default_factory=list)
    bar: Optional[PriceBar] = None
    ret_prev_hit: Optional[float] = None
    ret_from_period_start: Optional[float] = None
    created_at: Optional[str] = None


class EventStore:
    """SQLite-based event persistence layer."""

    def __init__(self, db_path: str = "events.db"):
        self.db_path = Path(db_path)
        self.logger = structlog.get_logger("event.store")
        self._lock = threading.Lock()

        # Create database and tables
        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    event_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    condition_code TEXT NOT NULL,
                    period_index INTEGER NOT NULL,
                    hit_index INTEGER NOT NULL,
                    minutes_from_start INTEGER NOT NULL,
                    time_utc TEXT NOT NULL,
                    metric REAL,
                    meta_json TEXT,
                    cluster_key TEXT NOT NULL,
                    bar_ts TEXT,
                    bar_open REAL,
                    bar_high REAL,
                    bar_low REAL,
                    bar_close REAL,
                    bar_volume REAL,
                    ret_prev_hit REAL,
                    ret_from_period_start REAL,
                    created_at TEXT NOT NULL,
                    UNIQUE(condition_code, period_index, hit_index)
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS event_bodies (
                    event_id INTEGER NOT NULL REFERENCES events(event_id) ON DELETE CASCADE,
                    body_code INTEGER NOT NULL,
                    lon REAL NOT NULL,
                    speed REAL NOT NULL,
                    sign INTEGER NOT NULL,
                    deg_in_sign REAL NOT NULL,
                    PRIMARY KEY(event_id, body_code)
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS planet_state (
                    time_utc TEXT NOT NULL,
                    body_code INTEGER NOT NULL,
                    lon REAL NOT NULL,
                    speed REAL NOT NULL,
                    is_retro INTEGER NOT NULL,
                    sign INTEGER NOT NULL,
                    deg_in_sign REAL NOT NULL,
                    PRIMARY KEY(time_utc, body_code)
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_events_time ON events(time_utc)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_events_cluster_key ON events(cluster_key)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_planet_state_body_time ON planet_state(body_code, time_utc)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection; sqlite errors surface as PersistenceError."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", error=str(e), db_path=str(self.db_path))
            raise PersistenceError(
                f"Database error: {e}", operation="sqlite", target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def _upsert_event(
        self,
        conn: sqlite3.Connection,
        event: ConjunctionEvent,
        now: str,
        market: Optional[HitMarket] = None,
    ) -> int:
        bar = event.bar
        conn.execute("""
            INSERT INTO events (
                condition_code, period_index, hit_index, minutes_from_start, time_utc,
                metric, meta_json, cluster_key,
                bar_ts, bar_open, bar_high, bar_low, bar_close, bar_volume,
                ret_prev_hit, ret_from_period_start, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(condition_code, period_index, hit_index) DO UPDATE SET
                minutes_from_start = excluded.minutes_from_start,
                time_utc = excluded.time_utc,
                metric = excluded.metric,
                meta_json = excluded.meta_json,
                cluster_key = excluded.cluster_key,
                bar_ts = excluded.bar_ts,
                bar_open = excluded.bar_open,
                bar_high = excluded.bar_high,
                bar_low = excluded.bar_low,
                bar_close = excluded.bar_close,
                bar_volume = excluded.bar_volume,
                ret_prev_hit = excluded.ret_prev_hit,
                ret_from_period_start = excluded.ret_from_period_start
        """, (
            event.condition_code,
            event.period_index,
            event.hit_index,
            event.minutes_from_start,
            event.time_utc.isoformat(),
            event.metric,
            json.dumps(event.metadata, sort_keys=True),
            event.cluster_key,
            bar.ts.isoformat() if bar else None,
            bar.open if bar else None,
            bar.high if bar else None,
            bar.low if bar else None,
            bar.close if bar else None,
            bar.volume if bar else None,
            market.ret_prev_hit if market else None,
            market.ret_from_period_start if market else None,
            now,
        ))

        event_id = conn.execute("""
            SELECT event_id FROM events
            WHERE condition_code = ? AND period_index = ? AND hit_index = ?
        """, (event.condition_code, event.period_index, event.hit_index)).fetchone()[0]

        # Body rows are replaced wholesale on re-run
        conn.execute("DELETE FROM event_bodies WHERE event_id = ?", (event_id,))
        conn.executemany("""
            INSERT INTO event_bodies (event_id, body_code, lon, speed, sign, deg_in_sign)
            VALUES (?, ?, ?, ?, ?, ?)
        """, [
            (event_id, int(p.body), p.longitude, p.speed, p.sign, p.degree_in_sign)
            for p in event.bodies
        ])
        return event_id

    def save_event(self, event: ConjunctionEvent) -> int:
        """
        Insert or update one event and replace its body rows.

        Returns:
            The event id (stable across re-runs of the same hit)
        """
        return self.save_events([event])[0]

    def save_events(self, events: Iterable[ConjunctionEvent]) -> list[int]:
        """Upsert several events in one transaction."""
        with self._lock:
            with self._get_connection() as conn:
                now = datetime.now(timezone.utc).isoformat()
                ids = [self._upsert_event(conn, event, now) for event in events]
                conn.commit()

        self.logger.info("Events stored", count=len(ids))
        return ids

    def next_period_index(self, condition_code: str) -> int:
        """First period index not yet used by ``condition_code``."""
        with self._get_connection() as conn:
            row = conn.execute("""
                SELECT MAX(period_index) FROM events WHERE condition_code = ?
            """, (condition_code,)).fetchone()
        return 0 if row[0] is None else row[0] + 1

    def save_period_hits(
        self,
        condition_code: str,
        periods: Sequence[Period],
        prices: Optional[PriceSeries] = None,
        first_period_index: Optional[int] = None,
    ) -> list[int]:
        """
        Store every hit of ``periods`` as an event row.

        Each hit keeps its body states and the span of their longitudes as
        metric. With ``prices`` the row also gets the bar at or before the hit
        and the returns since the previous hit and since the period start.

        Args:
            first_period_index: Index of ``periods[0]``; defaults to the next
                free index of ``condition_code`` so earlier scans are kept

        Returns:
            Event ids in hit order
        """
        if first_period_index is None:
            first_period_index = self.next_period_index(condition_code)

        rows = []
        for offset, period in enumerate(periods):
            period_index = first_period_index + offset
            market = enrich_period_hits(period, prices, period_index) if prices is not None else None
            for hit_index, hit in enumerate(period.hits):
                bodies = tuple(
                    BodyPosition.from_state(Body(b), state.longitude, state.speed)
                    for b, state in hit.bodies.items()
                )
                event = ConjunctionEvent(
                    condition_code=condition_code,
                    period_index=period_index,
                    hit_index=hit_index,
                    minutes_from_start=round((hit.time_utc - period.start_utc).total_seconds() / 60.0),
                    time_utc=hit.time_utc,
                    bodies=bodies,
                    metric=minimal_circular_span(p.longitude for p in bodies),
                    metadata={
                        "period_start_utc": period.start_utc.isoformat(),
                        "period_end_utc": period.end_utc.isoformat(),
                    },
                    bar=market[hit_index].bar if market else None,
                )
                rows.append((event, market[hit_index] if market else None))

        with self._lock:
            with self._get_connection() as conn:
                now = datetime.now(timezone.utc).isoformat()
                ids = [self._upsert_event(conn, event, now, m) for event, m in rows]
                conn.commit()

        self.logger.info(
            "Period hits stored",
            condition=condition_code,
            periods=len(periods),
            first_period_index=first_period_index,
            count=len(ids),
        )
        return ids

    def get_events(self, condition_code: Optional[str] = None) -> list[StoredEvent]:
        """Stored events ordered by time, optionally filtered by condition."""
        with self._get_connection() as conn:
            if condition_code is None:
                rows = conn.execute("""
                    SELECT * FROM events ORDER BY time_utc, event_id
                """).fetchall()
            else:
                rows = conn.execute("""
                    SELECT * FROM events WHERE condition_code = ?
                    ORDER BY time_utc, event_id
                """, (condition_code,)).fetchall()

            events = [self._row_to_stored_event(row) for row in rows]
            for event in events:
                body_rows = conn.execute("""
                    SELECT * FROM event_bodies WHERE event_id = ? ORDER BY body_code
                """, (event.event_id,)).fetchall()
                event.bodies = [
                    BodyPosition(
                        body=Body(r["body_code"]),
                        longitude=r["lon"],
                        speed=r["speed"],
                        sign=r["sign"],
                        degree_in_sign=r["deg_in_sign"],
                    )
                    for r in body_rows
                ]

        return events

    def save_planet_states(self, time_utc: datetime, states: Mapping[Body, BodyState]) -> int:
        """Insert or replace the states of one instant."""
        return self._write_planet_states([(time_utc, body, state) for body, state in states.items()])

    def sample_planet_states(
        self,
        ephemeris: Ephemeris,
        start_utc: datetime,
        end_utc: datetime,
        step: timedelta,
        bodies: Sequence[Body],
    ) -> int:
        """
        Sample ``ephemeris`` on a grid and store every state.

        Returns:
            Number of rows written
        """
        rows = []
        for t in time_grid(start_utc, end_utc, step):
            states = ephemeris.get_states(t, bodies)
            rows.extend((t, body, states[body]) for body in bodies)
        return self._write_planet_states(rows)

    def _write_planet_states(self, rows: Sequence[tuple[datetime, Body, BodyState]]) -> int:
        with self._lock:
            with self._get_connection() as conn:
                conn.executemany("""
                    INSERT OR REPLACE INTO planet_state (
                        time_utc, body_code, lon, speed, is_retro, sign, deg_in_sign
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """, [
                    (
                        t.isoformat(),
                        int(body),
                        state.normalized_longitude,
                        state.speed,
                        int(state.is_retrograde),
                        state.zodiac_sign,
                        state.degree_in_sign,
                    )
                    for t, body, state in rows
                ])
                conn.commit()

        self.logger.debug("Planet states stored", rows=len(rows))
        return len(rows)

    def load_planet_states(self, bodies: Optional[Sequence[Body]] = None) -> TableEphemeris:
        """Replay stored planet states as an in-memory ephemeris."""
        with self._get_connection() as conn:
            if bodies:
                placeholders = ",".join("?" for _ in bodies)
                rows = conn.execute(
                    f"SELECT time_utc, body_code, lon, speed FROM planet_state "
                    f"WHERE body_code IN ({placeholders})",
                    [int(b) for b in bodies],
                ).fetchall()
            else:
                rows = conn.execute("""
                    SELECT time_utc, body_code, lon, speed FROM planet_state
                """).fetchall()

        table = TableEphemeris()
        table.add_many(
            (datetime.fromisoformat(r["time_utc"]), Body(r["body_code"]), BodyState(r["lon"], r["speed"]))
            for r in rows
        )
        return table

    def get_stats(self) -> dict[str, Any]:
        """Row counts per table and events per condition."""
        with self._get_connection() as conn:
            by_condition = {
                row[0]: row[1]
                for row in conn.execute("""
                    SELECT condition_code, COUNT(*) FROM events GROUP BY condition_code
                """)
            }
            return {
                "total_events": conn.execute("SELECT COUNT(*) FROM events").fetchone()[0],
                "events_by_condition": by_condition,
                "planet_states": conn.execute("SELECT COUNT(*) FROM planet_state").fetchone()[0],
            }

    def _row_to_stored_event(self, row: sqlite3.Row) -> StoredEvent:
        """Convert database row to StoredEvent object."""
        bar = None
        if row["bar_open"] is not None:
            bar = PriceBar(
                ts=datetime.fromisoformat(row["bar_ts"]),
                open=row["bar_open"],
                high=row["bar_high"],
                low=row["bar_low"],
                close=row["bar_close"],
                volume=row["bar_volume"],
            )

        return StoredEvent(
            event_id=row["event_id"],
            condition_code=row["condition_code"],
            period_index=row["period_index"],
            hit_index=row["hit_index"],
            minutes_from_start=row["minutes_from_start"],
            time_utc=datetime.fromisoformat(row["time_utc"]),
            metric=row["metric"],
            metadata=json.loads(row["meta_json"]) if row["meta_json"] else {},
            cluster_key=row["cluster_key"],
            bar=bar,
            ret_prev_hit=row["ret_prev_hit"],
            ret_from_period_start=row["ret_from_period_start"],
            created_at=row["created_at"],
        )
