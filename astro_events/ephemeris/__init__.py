"""
Ephemeris oracle contract and implementations.

The core only depends on :class:`Ephemeris`; concrete providers either
replay stored states (:class:`TableEphemeris`) or compute them with the
Swiss Ephemeris (:mod:`astro_events.ephemeris.swisseph_provider`).
"""

from .base import Ephemeris, validate_query
from .bodies import Body, parse_body
from .models import BodyState
from .table import TableEphemeris

__all__ = [
    "Body",
    "BodyState",
    "Ephemeris",
    "TableEphemeris",
    "parse_body",
    "validate_query",
]
