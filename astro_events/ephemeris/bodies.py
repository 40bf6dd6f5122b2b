"""Body identifiers. Values match the Swiss Ephemeris SE_* planet numbers."""

from enum import IntEnum
from typing import Union


class Body(IntEnum):
    """Swiss Ephemeris bodies (subset)."""
    SUN = 0
    MOON = 1
    MERCURY = 2
    VENUS = 3
    MARS = 4
    JUPITER = 5
    SATURN = 6
    URANUS = 7
    NEPTUNE = 8
    PLUTO = 9
    MEAN_NODE = 10
    TRUE_NODE = 11
    MEAN_APOG = 12
    OSCU_APOG = 13
    EARTH = 14
    CHIRON = 15
    PHOLUS = 16
    CERES = 17
    PALLAS = 18


def parse_body(value: Union[str, int, Body]) -> Body:
    """
    Resolve a body from its enum, integer code or name.

    Names are matched case-insensitively; ``-`` and spaces are treated as ``_``.
    """
    if isinstance(value, Body):
        return value
    if isinstance(value, int):
        return Body(value)
    key = value.strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return Body[key]
    except KeyError:
        raise ValueError(f"Unknown body: {value!r}") from None
