"""
Centralized logging configuration for the event study pipeline.

This module provides standardized logging configuration using structlog
for all components. Scanner and study components bind a ``subsystem``
field so records from a long batch run can be filtered per stage.
"""
import logging
import sys
from datetime import datetime
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_scan_logger(name: str) -> FilteringBoundLogger:
    """Logger bound to the grid scanner / cluster detector subsystem."""
    # initial values keep the proxy lazy, so configure_logging() still applies
    return structlog.get_logger(name, subsystem="scanner")


def get_study_logger(name: str) -> FilteringBoundLogger:
    """Logger bound to the metrics / classification / aggregation subsystem."""
    return structlog.get_logger(name, subsystem="event_study")


def log_period_detected(
    logger: FilteringBoundLogger,
    condition: str,
    bodies: list[str],
    start_utc: datetime,
    end_utc: datetime,
    hit_count: int,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a merged period with standardized field names.

    Args:
        logger: Structlog logger instance
        condition: Code of the condition that produced the hits
        bodies: Body names taking part in the condition
        start_utc: First hit time
        end_utc: Last hit time
        hit_count: Number of hits merged into the period
        context: Additional context data
    """
    bound_logger = logger.bind(
        condition=condition,
        bodies=bodies,
        start_utc=start_utc.isoformat(),
        end_utc=end_utc.isoformat(),
        hit_count=hit_count,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.debug("Period detected")


def log_classification(
    logger: FilteringBoundLogger,
    t0: datetime,
    regime: str,
    pattern: str,
    bias: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the three narrative labels assigned to one event occurrence.

    Args:
        logger: Structlog logger instance
        t0: Representative time of the occurrence
        regime: Market regime label
        pattern: Reaction pattern label
        bias: Direction bias label
        context: Additional context data
    """
    bound_logger = logger.bind(
        t0=t0.isoformat(),
        regime=regime,
        pattern=pattern,
        bias=bias,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.debug("Occurrence classified")
