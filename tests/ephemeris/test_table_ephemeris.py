"""Tests for body identifiers, body states and the table ephemeris."""

from datetime import datetime, timedelta

import pytest

from astro_events.ephemeris import Body, BodyState, TableEphemeris, parse_body
from astro_events.errors import EmptyInputError, EphemerisError, TimezoneError


class TestParseBody:
    """Test body resolution from user input."""

    def test_by_name(self):
        """Names are case-insensitive."""
        assert parse_body("mars") is Body.MARS

    def test_with_space(self):
        """Spaces map to underscores."""
        assert parse_body("mean node") is Body.MEAN_NODE

    def test_by_code(self):
        """Swiss Ephemeris numbers map to bodies."""
        assert parse_body(4) is Body.MARS
        assert parse_body(Body.SUN) is Body.SUN

    def test_unknown(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            parse_body("vulcan")


class TestBodyState:
    """Test derived fields of a body state."""

    def test_derived_fields(self):
        """Sign and degree come from the normalized longitude."""
        state = BodyState(longitude=395.0, speed=0.5)
        assert state.normalized_longitude == pytest.approx(35)
        assert state.zodiac_sign == 1
        assert state.degree_in_sign == pytest.approx(5)
        assert not state.is_retrograde

    def test_retrograde(self):
        """Negative speed means retrograde."""
        assert BodyState(longitude=10.0, speed=-0.1).is_retrograde


class TestTableEphemeris:
    """Test replaying sampled states."""

    def test_lookup(self, epoch):
        """Stored states come back for the exact instant."""
        table = TableEphemeris({epoch: {Body.SUN: BodyState(280.0, 1.0), Body.MOON: BodyState(10.0, 13.0)}})

        states = table.get_states(epoch, [Body.SUN, Body.MOON])

        assert states[Body.SUN].longitude == 280.0
        assert states[Body.MOON].speed == 13.0
        assert len(table) == 2

    def test_times_sorted(self, epoch):
        """Sampled instants are returned in order."""
        table = TableEphemeris()
        table.add(epoch + timedelta(hours=1), Body.SUN, BodyState(1.0, 1.0))
        table.add(epoch, Body.SUN, BodyState(0.0, 1.0))
        assert table.times == [epoch, epoch + timedelta(hours=1)]

    def test_missing_time(self, epoch):
        """Unsampled instants raise EphemerisError."""
        table = TableEphemeris({epoch: {Body.SUN: BodyState(0.0, 1.0)}})
        with pytest.raises(EphemerisError):
            table.get_states(epoch + timedelta(minutes=1), [Body.SUN])

    def test_missing_body(self, epoch):
        """Bodies absent from a sample raise EphemerisError."""
        table = TableEphemeris({epoch: {Body.SUN: BodyState(0.0, 1.0)}})
        with pytest.raises(EphemerisError) as exc_info:
            table.get_states(epoch, [Body.SUN, Body.MARS])
        assert exc_info.value.body == "MARS"

    def test_rejects_naive_time(self, epoch):
        """Queries must be UTC."""
        table = TableEphemeris({epoch: {Body.SUN: BodyState(0.0, 1.0)}})
        with pytest.raises(TimezoneError):
            table.get_states(datetime(2024, 1, 1), [Body.SUN])

    def test_rejects_empty_bodies(self, epoch):
        """Queries need at least one body."""
        table = TableEphemeris({epoch: {Body.SUN: BodyState(0.0, 1.0)}})
        with pytest.raises(EmptyInputError):
            table.get_states(epoch, [])
