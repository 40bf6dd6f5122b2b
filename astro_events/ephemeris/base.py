"""Abstract ephemeris oracle."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from ..errors import EmptyInputError
from ..utils.time import ensure_utc
from .bodies import Body
from .models import BodyState


def validate_query(time_utc: datetime, bodies: Sequence[Body]) -> None:
    """
    Check the oracle preconditions shared by every provider.

    Raises:
        TimezoneError: If ``time_utc`` is not UTC
        EmptyInputError: If ``bodies`` is empty
    """
    ensure_utc(time_utc, "time_utc")
    if not bodies:
        raise EmptyInputError("bodies must be non-empty", data_type="bodies")


class Ephemeris(ABC):
    """
    Source of body positions.

    Implementations must be deterministic and safe for concurrent reads:
    the batch scanner calls :meth:`get_states` from several threads at once.
    """

    @abstractmethod
    def get_states(self, time_utc: datetime, bodies: Sequence[Body]) -> dict[Body, BodyState]:
        """
        Return the state of every requested body at ``time_utc``.

        Args:
            time_utc: UTC instant
            bodies: Non-empty list of bodies

        Returns:
            Mapping body -> state containing exactly the requested bodies
        """
        pass

    def get_state(self, time_utc: datetime, body: Body) -> BodyState:
        """Convenience lookup of a single body."""
        return self.get_states(time_utc, [body])[body]
