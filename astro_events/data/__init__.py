"""Price series models, loading and normalization"""

from .models import PriceBar
from .normalizer import normalize_bars
from .parsers import CsvLayout, load_price_csv, load_price_series, parse_price_row
from .series import PriceSeries

__all__ = [
    "CsvLayout",
    "PriceBar",
    "PriceSeries",
    "load_price_csv",
    "load_price_series",
    "normalize_bars",
    "parse_price_row",
]
