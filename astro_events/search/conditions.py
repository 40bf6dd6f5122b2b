"""
Condition evaluators deciding whether a snapshot of body states matches.

Every condition receives the full snapshot returned by the ephemeris and
the request describing which bodies to look at and how tight the match
must be. Conditions are stateless and can be shared between scans.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from ..ephemeris import Body, BodyState
from ..errors import ConditionContractError
from ..geometry import SIGN_WIDTH_DEG, minimal_circular_span
from .models import SearchRequest


class EventCondition(ABC):
    """Predicate over a snapshot of body states."""

    code: str = "condition"

    @abstractmethod
    def is_match(self, states: Mapping[Body, BodyState], request: SearchRequest) -> bool:
        """
        Evaluate the condition.

        Args:
            states: Snapshot containing at least ``request.bodies``
            request: Scan request (tolerance, bodies, same-sign flag)

        Returns:
            True when the snapshot satisfies the condition
        """
        pass


class LongitudeConjunctionCondition(EventCondition):
    """
    Classic conjunction in ecliptic longitude (0..360, wrap-safe).

    With ``require_same_sign`` every body must also sit in the same sign.
    """

    code = "longitude_span"

    def is_match(self, states: Mapping[Body, BodyState], request: SearchRequest) -> bool:
        selected = [states[b] for b in request.bodies]

        if request.require_same_sign:
            signs = {s.zodiac_sign for s in selected}
            if len(signs) > 1:
                return False

        span = minimal_circular_span([s.longitude for s in selected], 360.0)
        return span <= request.tolerance_deg


class SameDegreeInSignCondition(EventCondition):
    """Same degree within the sign, compared on a 0..30 circle. Signs may differ."""

    code = "same_degree_in_sign"

    def is_match(self, states: Mapping[Body, BodyState], request: SearchRequest) -> bool:
        degrees = [states[b].degree_in_sign for b in request.bodies]
        return minimal_circular_span(degrees, SIGN_WIDTH_DEG) <= request.tolerance_deg


class RetrogradeCondition(EventCondition):
    """Single body moving backwards (negative longitude speed)."""

    code = "retrograde"

    def is_match(self, states: Mapping[Body, BodyState], request: SearchRequest) -> bool:
        if len(request.bodies) != 1:
            raise ConditionContractError(
                "RetrogradeCondition requires exactly 1 body",
                condition=self.code,
                body_count=len(request.bodies),
            )
        return states[request.bodies[0]].speed < 0


CONDITIONS: dict[str, type[EventCondition]] = {
    LongitudeConjunctionCondition.code: LongitudeConjunctionCondition,
    SameDegreeInSignCondition.code: SameDegreeInSignCondition,
    RetrogradeCondition.code: RetrogradeCondition,
}


def get_condition(code: str) -> EventCondition:
    """Instantiate a condition by its code."""
    try:
        return CONDITIONS[code]()
    except KeyError:
        raise ValueError(f"Unknown condition: {code!r}") from None
