"""
CSV writers for detected periods, their hits and per-event metrics.

Timestamps are ISO8601 UTC, angles use 4 decimals, ratios are written as
fractions unless the column name ends in ``_pct``.
"""

import csv
from collections.abc import Sequence
from pathlib import Path
from typing import Optional, Union

import structlog

from ..analytics.aggregator import ClassifiedEvent
from ..data.series import PriceSeries
from ..ephemeris import Body
from ..metrics.hit_market import HitMarket, enrich_period_hits
from ..metrics.period_stats import PeriodMarketStats
from ..metrics.volatility import VolatilityWindow
from ..search.models import Period
from ..utils.time import format_utc

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]

EVENT_METRICS_HEADER = [
    "event_index", "event_start_utc", "event_end_utc", "t0_utc",
    "return_pre", "return_event", "return_post",
    "max_dd_pre", "max_dd_event", "max_dd_post",
    "max_ru_pre", "max_ru_event", "max_ru_post",
    "range_pre", "range_event", "range_post",
    "vol_pre", "vol_event", "vol_post", "vol_ratio_post",
    "market_regime", "reaction_pattern", "direction_bias", "summary",
]


def _f4(x: float) -> str:
    return f"{x:.4f}"


def _write(path: PathLike, header: Sequence[str], rows: Sequence[Sequence[object]]) -> int:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)
    logger.info("CSV exported", path=str(path), rows=len(rows))
    return len(rows)


def export_periods_csv(
    path: PathLike,
    periods: Sequence[Period],
    bodies: Sequence[Body],
    mode: str,
    tolerance_deg: float,
) -> int:
    """One row per period: bounds, duration, bodies, condition, tolerance, hit count."""
    body_names = "+".join(Body(b).name for b in bodies)
    rows = [
        [
            format_utc(p.start_utc),
            format_utc(p.end_utc),
            f"{p.duration_hours:.3f}",
            body_names,
            mode,
            tolerance_deg,
            len(p.hits),
        ]
        for p in periods
    ]
    return _write(
        path,
        ["start_utc", "end_utc", "duration_hours", "bodies", "mode", "tolerance_deg", "hits"],
        rows,
    )


HITS_MARKET_HEADER = [
    "bar_ts", "bar_open", "bar_high", "bar_low", "bar_close", "bar_volume",
    "ret_prev_hit", "ret_from_period_start",
]


def _market_cells(row: HitMarket) -> list[object]:
    bar = row.bar
    if bar is None:
        return [""] * len(HITS_MARKET_HEADER)
    return [
        format_utc(bar.ts), bar.open, bar.high, bar.low, bar.close, bar.volume,
        _f4(row.ret_prev_hit), _f4(row.ret_from_period_start),
    ]


def export_hits_csv(
    path: PathLike,
    periods: Sequence[Period],
    bodies: Sequence[Body],
    prices: Optional[PriceSeries] = None,
) -> int:
    """
    One row per hit with longitude, speed, sign and degree of every body.

    With ``prices`` the row also carries the bar at or before the hit and the
    returns since the previous hit and since the period start. Hits before the
    first bar leave those columns empty.
    """
    header = ["period_index", "hit_index", "minutes_from_start", "time_utc"]
    for b in bodies:
        name = Body(b).name
        header += [f"lon_{name}", f"speed_{name}", f"sign_{name}", f"deg_in_sign_{name}"]
    if prices is not None:
        header += HITS_MARKET_HEADER

    rows = []
    for p_index, period in enumerate(periods):
        market = enrich_period_hits(period, prices, p_index) if prices is not None else None
        for h_index, hit in enumerate(period.hits):
            row: list[object] = [
                p_index,
                h_index,
                round((hit.time_utc - period.start_utc).total_seconds() / 60.0),
                format_utc(hit.time_utc),
            ]
            for b in bodies:
                state = hit.bodies[b]
                row += [
                    _f4(state.normalized_longitude),
                    _f4(state.speed),
                    state.zodiac_sign,
                    _f4(state.degree_in_sign),
                ]
            if market is not None:
                row += _market_cells(market[h_index])
            rows.append(row)

    return _write(path, header, rows)


def export_event_metrics_csv(path: PathLike, rows: Sequence[ClassifiedEvent]) -> int:
    """All metrics fields, the three labels and the summary line per occurrence."""
    out = []
    for i, r in enumerate(rows):
        m = r.metrics
        out.append([
            i,
            format_utc(m.event_start),
            format_utc(m.event_end),
            format_utc(m.t0),
            m.return_pre, m.return_event, m.return_post,
            m.max_dd_pre, m.max_dd_event, m.max_dd_post,
            m.max_ru_pre, m.max_ru_event, m.max_ru_post,
            m.range_pre, m.range_event, m.range_post,
            m.vol_pre, m.vol_event, m.vol_post, m.vol_ratio_post,
            r.regime.value,
            r.pattern.value,
            r.bias.value,
            f"{r.regime.value} | {r.pattern.value} | {r.bias.value}",
        ])
    return _write(path, EVENT_METRICS_HEADER, out)


def export_period_stats_csv(path: PathLike, stats: Sequence[PeriodMarketStats]) -> int:
    rows = [
        [
            s.period_index, format_utc(s.start_utc), format_utc(s.end_utc), s.duration_hours,
            s.open, s.close, s.high, s.low,
            s.change_pct, s.max_up_pct, s.max_down_pct,
            s.total_volume, s.avg_volume, s.bars,
        ]
        for s in stats
    ]
    return _write(
        path,
        [
            "period_index", "start_utc", "end_utc", "duration_hours",
            "open", "close", "high", "low",
            "change_pct", "max_up_pct", "max_down_pct",
            "total_volume", "avg_volume", "bars",
        ],
        rows,
    )


def export_volatility_csv(path: PathLike, windows: Sequence[VolatilityWindow]) -> int:
    rows = [
        [
            format_utc(w.start_utc), format_utc(w.end_utc), w.window_bars,
            w.range_pct, w.volume, w.open, w.high, w.low, w.close,
        ]
        for w in windows
    ]
    return _write(
        path,
        ["start_utc", "end_utc", "window_bars", "range_pct", "volume", "open", "high", "low", "close"],
        rows,
    )
