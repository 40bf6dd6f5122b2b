"""
Error classification system for the event study pipeline.

Input validation failures are caller errors and fail fast. Data quality
errors come from the price ingestion boundary. System failures cover the
ephemeris oracle, persistence and baseline sampling.
"""

from .input_validation import (
    InputValidationError,
    TimeRangeError,
    TimezoneError,
    EmptyInputError,
    ConditionContractError,
    EmptySummaryError,
)
from .data_quality import (
    DataQualityError,
    TemporalDataError,
    MalformedDataError,
)
from .system_failures import (
    SystemFailureError,
    EphemerisError,
    PersistenceError,
    BaselineSamplingError,
)

__all__ = [
    # Input Validation
    "InputValidationError",
    "TimeRangeError",
    "TimezoneError",
    "EmptyInputError",
    "ConditionContractError",
    "EmptySummaryError",
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "MalformedDataError",
    # System Failures
    "SystemFailureError",
    "EphemerisError",
    "PersistenceError",
    "BaselineSamplingError",
]
