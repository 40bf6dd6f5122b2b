"""Tests for CSV loading and bar normalization."""

from datetime import datetime, timedelta, timezone

import pytest

from astro_events.data import (
    CsvLayout,
    PriceBar,
    load_price_csv,
    load_price_series,
    normalize_bars,
    parse_price_row,
)
from astro_events.errors import EmptyInputError, MalformedDataError, TemporalDataError

T0 = 1704067200  # 2024-01-01T00:00:00Z


class TestParsePriceRow:
    """Test single-row parsing."""

    def test_seconds(self):
        """Second-resolution epochs."""
        bar = parse_price_row([str(T0), "1", "2", "0.5", "1.5", "10"], CsvLayout())
        assert bar.ts == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert (bar.open, bar.high, bar.low, bar.close, bar.volume) == (1.0, 2.0, 0.5, 1.5, 10.0)

    def test_milliseconds(self):
        """Values above 10^10 are milliseconds."""
        bar = parse_price_row([str(T0 * 1000), "1", "1", "1", "1", "0"], CsvLayout())
        assert bar.ts == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_custom_layout(self):
        """Columns can be reordered."""
        layout = CsvLayout(timestamp=5, open=0, high=1, low=2, close=3, volume=4)
        bar = parse_price_row(["1", "2", "0.5", "1.5", "10", str(T0)], layout)
        assert bar.close == 1.5

    def test_bad_timestamp(self):
        """Non-integer timestamps raise TemporalDataError."""
        with pytest.raises(TemporalDataError):
            parse_price_row(["yesterday", "1", "1", "1", "1", "1"], CsvLayout())

    def test_missing_column(self):
        """Short rows raise MalformedDataError."""
        with pytest.raises(MalformedDataError):
            parse_price_row([str(T0), "1", "1", "1"], CsvLayout())


class TestLoadPriceSeries:
    """Test file loading end to end."""

    def write(self, path, rows):
        lines = ["timestamp,open,high,low,close,volume"] + [",".join(map(str, r)) for r in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    def test_load_and_sort(self, tmp_path):
        """File order is normalized to ascending time."""
        path = self.write(tmp_path / "btc.csv", [
            (T0 + 3600, 2, 2, 2, 2, 1),
            (T0, 1, 1, 1, 1, 1),
        ])

        assert len(load_price_csv(path)) == 2
        series = load_price_series(path)
        assert [b.close for b in series] == [1.0, 2.0]

    def test_overlap_last_wins(self, tmp_path):
        """Duplicated timestamps keep the later file's bar."""
        a = self.write(tmp_path / "a.csv", [(T0, 1, 1, 1, 1, 1)])
        b = self.write(tmp_path / "b.csv", [(T0, 5, 5, 5, 5, 1), (T0 + 3600, 6, 6, 6, 6, 1)])

        series = load_price_series([a, b])
        assert [b.close for b in series] == [5.0, 6.0]

    def test_missing_file_skipped(self, tmp_path):
        """Missing files are skipped; no bars at all is an error."""
        a = self.write(tmp_path / "a.csv", [(T0, 1, 1, 1, 1, 1)])
        assert len(load_price_series([a, tmp_path / "missing.csv"])) == 1
        with pytest.raises(EmptyInputError):
            load_price_series(tmp_path / "missing.csv")

    def test_unparseable_row_raises(self, tmp_path):
        """A non-numeric column aborts the load by default."""
        path = self.write(tmp_path / "btc.csv", [(T0, 1, 1, 1, 1, 1), (T0 + 3600, "n/a", 2, 2, 2, 1)])

        with pytest.raises(MalformedDataError):
            load_price_series(path)

    def test_unparseable_rows_dropped(self, tmp_path):
        """drop_invalid skips rows that fail to parse as well as invalid bars."""
        path = self.write(tmp_path / "btc.csv", [
            (T0, 1, 1, 1, 1, 1),
            (T0 + 3600, "n/a", 2, 2, 2, 1),
            ("noon", 3, 3, 3, 3, 1),
            (T0 + 7200, 4, 4, 4, 4, -1),
            (T0 + 10800, 5, 5, 5, 5, 1),
        ])

        assert len(load_price_csv(path, drop_invalid=True)) == 3
        series = load_price_series(path, drop_invalid=True)
        assert [b.close for b in series] == [1.0, 5.0]


class TestNormalizeBars:
    """Test validation during normalization."""

    def test_nan_rejected(self, epoch):
        """NaN prices are malformed."""
        with pytest.raises(MalformedDataError):
            normalize_bars([PriceBar(epoch, float("nan"), 1, 1, 1, 1)])

    def test_drop_invalid(self, epoch):
        """Malformed bars can be dropped instead."""
        bars = [
            PriceBar(epoch, 1, 1, 1, 1, -5),
            PriceBar(epoch + timedelta(hours=1), 1, 1, 1, 1, 5),
        ]
        series = normalize_bars(bars, drop_invalid=True)
        assert len(series) == 1
        assert series.first.volume == 5
