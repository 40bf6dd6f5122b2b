"""Circular normalization, covering arcs and signed angle differences"""

from collections.abc import Iterable

FULL_CIRCLE_DEG = 360.0
SIGN_WIDTH_DEG = 30.0


def normalize(x: float, modulus: float = FULL_CIRCLE_DEG) -> float:
    """
    Reduce ``x`` to ``[0, modulus)`` with a floored modulo.

    Args:
        x: Angle, may be negative or larger than the modulus
        modulus: Circle size (360 for longitude, 30 for degree-in-sign)

    Returns:
        Normalized angle
    """
    r = x % modulus
    # -1e-18 % 360 rounds to 360.0 in floating point
    if r >= modulus:
        r -= modulus
    return r


def normalize360(x: float) -> float:
    """Normalize a longitude to ``[0, 360)``."""
    return normalize(x, FULL_CIRCLE_DEG)


def sign_index(longitude: float) -> int:
    """Zodiac sign of a longitude, 0..11."""
    return int(normalize360(longitude) // SIGN_WIDTH_DEG)


def degree_in_sign(longitude: float) -> float:
    """Position within the 30 degree sign, ``[0, 30)``."""
    lon = normalize360(longitude)
    return lon - SIGN_WIDTH_DEG * sign_index(lon)


def minimal_circular_span(values: Iterable[float], modulus: float = FULL_CIRCLE_DEG) -> float:
    """
    Length of the smallest arc covering every value on a circle.

    The values are normalized and sorted; the covering arc is the circle
    minus the largest gap between neighbours, where the gap from the last
    value back around to the first one is a candidate too. This is not
    ``max - min``: 10 and 350 on a 360 circle span 20, not 340.

    Args:
        values: Angles in any range
        modulus: Circle size

    Returns:
        Covering arc length, 0 for fewer than two values
    """
    points = sorted(normalize(v, modulus) for v in values)
    if len(points) < 2:
        return 0.0

    max_gap = 0.0
    for prev, cur in zip(points, points[1:]):
        max_gap = max(max_gap, cur - prev)

    # wrap gap across the 0/modulus boundary
    max_gap = max(max_gap, modulus - (points[-1] - points[0]))

    return modulus - max_gap


def minimal_signed_angle_diff(a: float, b: float) -> float:
    """
    Signed difference ``a - b`` mapped into ``[-180, 180]``.

    Both angles are normalized first, so the raw difference lies in
    ``(-360, 360)`` and one correction of 360 is enough.
    """
    d = normalize360(a) - normalize360(b)
    if d > 180.0:
        d -= FULL_CIRCLE_DEG
    elif d < -180.0:
        d += FULL_CIRCLE_DEG
    return d


def abs_angle_diff(a: float, b: float) -> float:
    """Unsigned shortest distance between two angles, ``[0, 180]``."""
    return abs(minimal_signed_angle_diff(a, b))
