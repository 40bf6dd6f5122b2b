"""
Data quality error classifications for price series ingestion.

These exceptions describe problems in raw price files. They are raised
by the loading boundary only; the metrics engine never raises them.
"""

from typing import Any, Optional


class DataQualityError(Exception):
    """Base class for data quality issues found while loading price data."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class TemporalDataError(DataQualityError):
    """Timestamp that cannot be interpreted or placed in sequence."""

    def __init__(self, message: str, timestamp: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timestamp = timestamp


class MalformedDataError(DataQualityError):
    """Data exists but is in incorrect format."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
