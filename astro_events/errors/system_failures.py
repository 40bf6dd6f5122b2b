"""
System failure error classifications.

These exceptions represent failures of collaborators (ephemeris oracle,
database) or of a sampling procedure that could not reach its target.
"""

from typing import Any, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class EphemerisError(SystemFailureError):
    """Ephemeris oracle failed or returned an incomplete mapping."""

    def __init__(self, message: str, body: Optional[str] = None,
                 time_utc: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.body = body
        self.time_utc = time_utc


class PersistenceError(SystemFailureError):
    """Database or file system persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class BaselineSamplingError(SystemFailureError):
    """Rejection sampler exhausted its attempts before reaching the count."""

    def __init__(self, message: str, requested: Optional[int] = None,
                 accepted: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.requested = requested
        self.accepted = accepted
