"""
Input validation error classifications.

These exceptions signal a caller contract violation: malformed time ranges,
non-UTC timestamps, empty inputs or a condition used with the wrong number
of bodies. They are raised before any state is produced and never retried.
"""

from datetime import datetime
from typing import Any, Optional


class InputValidationError(ValueError):
    """Base class for caller errors detected before computation starts."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class TimeRangeError(InputValidationError):
    """Interval or step that cannot describe a time grid."""

    def __init__(self, message: str, start: Optional[datetime] = None,
                 end: Optional[datetime] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.start = start
        self.end = end


class TimezoneError(InputValidationError):
    """Timestamp that is naive or not expressed in UTC."""

    def __init__(self, message: str, timestamp: Optional[datetime] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timestamp = timestamp


class EmptyInputError(InputValidationError):
    """Required collection (bodies, price bars, rows) is empty."""

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.data_type = data_type


class ConditionContractError(InputValidationError):
    """Condition evaluated with a body list it does not support."""

    def __init__(self, message: str, condition: Optional[str] = None,
                 body_count: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.condition = condition
        self.body_count = body_count


class EmptySummaryError(InputValidationError):
    """Class summary without occurrences passed where data is required."""

    def __init__(self, message: str, event_code: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.event_code = event_code
