"""In-memory ephemeris replaying previously sampled states."""

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Optional

from ..errors import EphemerisError
from ..utils.time import ensure_utc
from .base import Ephemeris, validate_query
from .bodies import Body
from .models import BodyState


class TableEphemeris(Ephemeris):
    """
    Ephemeris backed by a table of exact-time samples.

    Lookups are exact: the scanner must step on the same grid the table was
    sampled on. Missing entries raise :class:`EphemerisError`.
    """

    def __init__(self, rows: Optional[Mapping[datetime, Mapping[Body, BodyState]]] = None):
        self._rows: dict[datetime, dict[Body, BodyState]] = {}
        for time_utc, states in (rows or {}).items():
            for body, state in states.items():
                self.add(time_utc, body, state)

    def add(self, time_utc: datetime, body: Body, state: BodyState) -> None:
        """Register one sampled state."""
        ensure_utc(time_utc, "time_utc")
        self._rows.setdefault(time_utc, {})[Body(body)] = state

    def add_many(self, samples: Iterable[tuple[datetime, Body, BodyState]]) -> None:
        for time_utc, body, state in samples:
            self.add(time_utc, body, state)

    @property
    def times(self) -> list[datetime]:
        """Sampled instants in ascending order."""
        return sorted(self._rows)

    def __len__(self) -> int:
        return sum(len(states) for states in self._rows.values())

    def get_states(self, time_utc: datetime, bodies: Sequence[Body]) -> dict[Body, BodyState]:
        validate_query(time_utc, bodies)

        row = self._rows.get(time_utc)
        if row is None:
            raise EphemerisError("No samples at requested time", time_utc=time_utc.isoformat())

        result = {}
        for body in bodies:
            state = row.get(body)
            if state is None:
                raise EphemerisError(
                    "Body missing from sample",
                    body=Body(body).name,
                    time_utc=time_utc.isoformat(),
                )
            result[body] = state
        return result
