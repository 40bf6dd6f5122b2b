"""
Swiss Ephemeris adapter: UTC in, longitudes and speeds out.

No scanning, no file IO beyond pointing the library at its data files.
"""

import os
import threading
from collections.abc import Sequence
from datetime import datetime
from typing import Optional

import swisseph as swe

from ..errors import EphemerisError
from .base import Ephemeris, validate_query
from .bodies import Body
from .models import BodyState

# swisseph keeps global state (ephemeris path, sidereal mode)
_swe_lock = threading.Lock()


def to_julian_day_ut(time_utc: datetime) -> float:
    """Convert a UTC datetime to a Julian day number in UT."""
    seconds = time_utc.second + time_utc.microsecond / 1_000_000
    _jd_et, jd_ut = swe.utc_to_jd(
        time_utc.year, time_utc.month, time_utc.day,
        time_utc.hour, time_utc.minute, seconds,
        swe.GREG_CAL,
    )
    return jd_ut


class SwissEphemeris(Ephemeris):
    """Ephemeris computed with pyswisseph."""

    def __init__(
        self,
        ephe_path: Optional[str] = None,
        use_moshier: bool = False,
        sidereal: bool = False,
        sid_mode: int = swe.SIDM_LAHIRI,
    ):
        """
        Args:
            ephe_path: Folder holding .se1 files; ignored when missing
            use_moshier: Use the built-in analytical ephemeris (no files needed)
            sidereal: Return sidereal instead of tropical longitudes
            sid_mode: Ayanamsha used when ``sidereal`` is set
        """
        if ephe_path and os.path.isdir(ephe_path):
            swe.set_ephe_path(ephe_path)

        flags = swe.FLG_MOSEPH if use_moshier else swe.FLG_SWIEPH
        flags |= swe.FLG_SPEED
        if sidereal:
            flags |= swe.FLG_SIDEREAL

        self.flags = flags
        self.sidereal = sidereal
        self.sid_mode = sid_mode

    def get_states(self, time_utc: datetime, bodies: Sequence[Body]) -> dict[Body, BodyState]:
        validate_query(time_utc, bodies)

        jd_ut = to_julian_day_ut(time_utc)
        result = {}
        with _swe_lock:
            # the ayanamsha is global, another instance may have changed it
            if self.sidereal:
                swe.set_sid_mode(self.sid_mode, 0, 0)
            for body in bodies:
                try:
                    xx, _ret = swe.calc_ut(jd_ut, int(body), self.flags)
                except swe.Error as e:
                    raise EphemerisError(
                        f"swe_calc_ut failed: {e}",
                        body=Body(body).name,
                        time_utc=time_utc.isoformat(),
                    ) from e
                # xx[0] = longitude, xx[3] = speed in longitude (deg/day)
                result[body] = BodyState(longitude=xx[0] % 360.0, speed=xx[3])
        return result
