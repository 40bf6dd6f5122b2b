"""
CSV parsers converting raw OHLCV exports into :class:`PriceBar` objects.

Timestamps are Unix epochs in seconds or milliseconds; the unit is guessed
from magnitude (values above 10^10 are milliseconds).
"""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import structlog

from ..errors import DataQualityError, MalformedDataError, TemporalDataError
from ..utils.time import from_unix
from .models import PriceBar
from .normalizer import normalize_bars
from .series import PriceSeries

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CsvLayout:
    """Column positions of a price CSV file."""
    timestamp: int = 0
    open: int = 1
    high: int = 2
    low: int = 3
    close: int = 4
    volume: int = 5
    has_header: bool = True


def parse_price_row(fields: list[str], layout: CsvLayout, line_no: int = 0) -> PriceBar:
    """
    Parse one CSV row.

    Raises:
        TemporalDataError: If the timestamp is not an integer
        MalformedDataError: If a price/volume column is missing or not numeric
    """
    raw = ",".join(fields)

    try:
        ts_value = int(fields[layout.timestamp].strip())
    except (IndexError, ValueError) as e:
        raise TemporalDataError(
            f"Invalid timestamp on line {line_no}",
            timestamp=fields[layout.timestamp] if len(fields) > layout.timestamp else None,
        ) from e

    values = {}
    for name in ("open", "high", "low", "close", "volume"):
        index = getattr(layout, name)
        try:
            values[name] = float(fields[index])
        except (IndexError, ValueError) as e:
            raise MalformedDataError(
                f"Invalid {name} on line {line_no}",
                raw_data=raw,
                expected_format="timestamp,open,high,low,close,volume",
            ) from e

    return PriceBar(ts=from_unix(ts_value), **values)


def load_price_csv(path: Union[str, Path], layout: CsvLayout = CsvLayout(),
                   delimiter: str = ",", drop_invalid: bool = False) -> list[PriceBar]:
    """
    Load bars from a CSV file in file order.

    Blank lines are skipped. With ``drop_invalid`` a row that fails to parse
    is logged and skipped instead of aborting the load.

    Raises:
        TemporalDataError / MalformedDataError: On a bad row when
            ``drop_invalid`` is False
    """
    path = Path(path)
    bars = []
    dropped = 0

    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.reader(f, delimiter=delimiter)
        for line_no, fields in enumerate(reader, start=1):
            if line_no == 1 and layout.has_header:
                continue
            if not fields or all(not x.strip() for x in fields):
                continue
            try:
                bars.append(parse_price_row(fields, layout, line_no))
            except DataQualityError as e:
                if not drop_invalid:
                    raise
                dropped += 1
                logger.warning("Dropping malformed price row", path=str(path), line=line_no, error=str(e))

    logger.info("Price file loaded", path=str(path), bars=len(bars), dropped=dropped)
    return bars


def load_price_series(paths: Union[str, Path, list], layout: CsvLayout = CsvLayout(),
                      drop_invalid: bool = False) -> PriceSeries:
    """
    Load one or more CSV files into a single normalized series.

    Missing files are skipped with a warning; overlapping files are
    de-duplicated by timestamp (last loaded wins). ``drop_invalid`` applies
    to unparseable rows and to bars rejected by :func:`normalize_bars`.
    """
    if isinstance(paths, (str, Path)):
        paths = [paths]

    bars: list[PriceBar] = []
    for p in paths:
        if not Path(p).exists():
            logger.warning("Price file missing", path=str(p))
            continue
        bars.extend(load_price_csv(p, layout, drop_invalid=drop_invalid))

    return normalize_bars(bars, drop_invalid=drop_invalid)
