"""Immutable per-body snapshot returned by the ephemeris oracle."""

from dataclasses import dataclass

from ..geometry import degree_in_sign, normalize360, sign_index


@dataclass(frozen=True)
class BodyState:
    """Angular position and velocity of one body at one instant."""
    longitude: float            # degrees, normalized on access
    speed: float                # degrees/day, negative when retrograde

    @property
    def normalized_longitude(self) -> float:
        """Longitude in ``[0, 360)``."""
        return normalize360(self.longitude)

    @property
    def zodiac_sign(self) -> int:
        """Sign index 0..11."""
        return sign_index(self.longitude)

    @property
    def degree_in_sign(self) -> float:
        """Position within the sign, ``[0, 30)``."""
        return degree_in_sign(self.longitude)

    @property
    def is_retrograde(self) -> bool:
        return self.speed < 0
