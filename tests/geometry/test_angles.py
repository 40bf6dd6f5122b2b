"""Tests for circular angle helpers."""

import pytest

from astro_events.geometry import (
    abs_angle_diff,
    degree_in_sign,
    minimal_circular_span,
    minimal_signed_angle_diff,
    normalize,
    normalize360,
    sign_index,
)


class TestNormalize:
    """Test floored modulo normalization."""

    def test_negative_input(self):
        """Negative angles wrap into [0, 360)."""
        assert normalize360(-30) == 330

    def test_large_input(self):
        """Angles above the modulus are reduced."""
        assert normalize360(725) == 5

    def test_custom_modulus(self):
        """Degree-in-sign circle uses modulus 30."""
        assert normalize(35, 30) == 5

    def test_tiny_negative_stays_below_modulus(self):
        """Floating point edge case never returns the modulus itself."""
        r = normalize360(-1e-18)
        assert 0 <= r < 360


class TestSigns:
    """Test sign index and degree within sign."""

    @pytest.mark.parametrize("longitude,expected", [
        (0, 0), (29.999, 0), (30, 1), (359.9, 11), (-10, 11),
    ])
    def test_sign_index(self, longitude, expected):
        """Signs are 0-based 30 degree sectors."""
        assert sign_index(longitude) == expected

    def test_degree_in_sign(self):
        """Degree within the sector."""
        assert degree_in_sign(45) == pytest.approx(15)
        assert degree_in_sign(-10) == pytest.approx(20)


class TestMinimalCircularSpan:
    """Test the covering-arc measure."""

    def test_wraps_across_zero(self):
        """10 and 350 are 20 apart, not 340."""
        assert minimal_circular_span([10, 350]) == pytest.approx(20)

    def test_invariant_under_full_turns(self):
        """Adding 360 to a value does not change the span."""
        assert minimal_circular_span([370, 350]) == pytest.approx(20)
        assert minimal_circular_span([10, 350 - 720]) == pytest.approx(20)

    def test_evenly_spread_points(self):
        """Three points 120 apart need a 240 arc."""
        assert minimal_circular_span([0, 120, 240]) == pytest.approx(240)

    def test_fewer_than_two_values(self):
        """Empty and single inputs have zero span."""
        assert minimal_circular_span([]) == 0
        assert minimal_circular_span([42]) == 0

    def test_sign_circle(self):
        """On the 30 degree circle 1 and 29 are 2 apart."""
        assert minimal_circular_span([1, 29], 30) == pytest.approx(2)

    def test_not_max_minus_min(self):
        """Unwrapped cluster span is plain distance."""
        assert minimal_circular_span([10, 20, 30]) == pytest.approx(20)


class TestSignedDiff:
    """Test signed shortest differences."""

    def test_across_zero(self):
        """Differences cross the 0/360 boundary the short way."""
        assert minimal_signed_angle_diff(10, 350) == pytest.approx(20)
        assert minimal_signed_angle_diff(350, 10) == pytest.approx(-20)

    def test_opposition(self):
        """Exactly opposite angles stay at the interval bound."""
        assert minimal_signed_angle_diff(90, 270) == pytest.approx(-180)
        assert abs_angle_diff(0, 180) == pytest.approx(180)
