#!/usr/bin/env python3
"""
test_maneuvers.py - Tests for Setpoint Tables

Tests for:
- Maneuver dataclass and MAVSDK conversion
- Forward and omnidirectional mission profiles

Run with:
    pytest tests/test_maneuvers.py -v
"""

import pytest

from automissions.common.maneuvers import (
    FORWARD_PROFILE,
    HOVER,
    OMNIDIRECTIONAL_PROFILE,
    Maneuver,
    hover,
)


class TestManeuver:
    """Tests for Maneuver dataclass."""

    def test_default_is_hover(self):
        """Test default values are a zero setpoint."""
        maneuver = Maneuver("Idle")
        assert maneuver.is_hover is True
        assert maneuver.duration_s == 0.0

    def test_hover_constant(self):
        """Test the pre-start setpoint is zero and instant."""
        assert HOVER.is_hover
        assert HOVER.duration_s == 0.0
        assert hover(2.0).duration_s == 2.0

    def test_to_velocity_body(self):
        """Test conversion to VelocityBodyYawspeed."""
        velocity = Maneuver("Test", 0.5, -0.5, 0.25, 22.5, 4.0).to_velocity_body()
        assert velocity.forward_m_s == 0.5
        assert velocity.right_m_s == -0.5
        assert velocity.down_m_s == 0.25
        assert velocity.yawspeed_deg_s == 22.5

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            Maneuver("Bad", duration_s=-1.0)

    def test_string_representation(self):
        s = str(Maneuver("Fly forward", forward_m_s=0.5, duration_s=4.0))
        assert "Fly forward" in s
        assert "+0.50" in s
        assert "4.0s" in s


class TestForwardProfile:
    """Tests for the forward program's table."""

    def test_takeoff_parameters(self):
        assert FORWARD_PROFILE.takeoff_altitude_m == 1.0
        assert FORWARD_PROFILE.takeoff_speed_m_s == 0.25

    def test_table(self):
        names = [m.name for m in FORWARD_PROFILE.maneuvers]
        assert names == ["Hover", "Fly forward", "Hover"]

        forward = FORWARD_PROFILE.maneuvers[1]
        assert forward.forward_m_s == 0.5
        assert forward.right_m_s == 0.0
        assert forward.down_m_s == 0.0
        assert forward.duration_s == 4.0

    def test_total_duration(self):
        assert FORWARD_PROFILE.total_duration_s == pytest.approx(8.0)


class TestOmnidirectionalProfile:
    """Tests for the omnidirectional program's table."""

    def test_takeoff_parameters(self):
        assert OMNIDIRECTIONAL_PROFILE.takeoff_altitude_m == 1.5
        assert OMNIDIRECTIONAL_PROFILE.takeoff_speed_m_s == 0.25

    def test_starts_and_ends_with_hover(self):
        maneuvers = OMNIDIRECTIONAL_PROFILE.maneuvers
        assert len(maneuvers) == 10
        assert maneuvers[0].is_hover and maneuvers[0].duration_s == 2.0
        assert maneuvers[-1].is_hover and maneuvers[-1].duration_s == 2.0

    def test_diagonals(self):
        diagonals = OMNIDIRECTIONAL_PROFILE.maneuvers[1:5]
        components = [(m.forward_m_s, m.right_m_s, m.down_m_s) for m in diagonals]
        assert components == [
            (0.5, 0.5, -0.25),
            (0.5, -0.5, 0.25),
            (-0.5, -0.5, -0.25),
            (-0.5, 0.5, 0.25),
        ]
        assert all(m.yawspeed_deg_s == 0.0 for m in diagonals)

    def test_quarter_circles_turn_full_circle(self):
        """Four quarter circles at 22.5 deg/s for 4s turn 360 degrees."""
        circles = OMNIDIRECTIONAL_PROFILE.maneuvers[5:9]
        turned = sum(m.yawspeed_deg_s * m.duration_s for m in circles)
        assert turned == pytest.approx(360.0)
        # Alternating climb and descent leaves altitude unchanged
        assert sum(m.down_m_s * m.duration_s for m in circles) == pytest.approx(0.0)

    def test_total_duration(self):
        assert OMNIDIRECTIONAL_PROFILE.total_duration_s == pytest.approx(36.0)


class TestProfileOverrides:
    """Tests for MissionProfile copies."""

    def test_with_takeoff_altitude(self):
        profile = FORWARD_PROFILE.with_takeoff_altitude(3.0)
        assert profile.takeoff_altitude_m == 3.0
        assert profile.maneuvers == FORWARD_PROFILE.maneuvers
        # Original is untouched
        assert FORWARD_PROFILE.takeoff_altitude_m == 1.0

    def test_non_positive_altitude_rejected(self):
        with pytest.raises(ValueError):
            FORWARD_PROFILE.with_takeoff_altitude(0.0)

    @pytest.mark.parametrize("altitude", [float("nan"), float("inf")])
    def test_non_finite_altitude_rejected(self, altitude):
        with pytest.raises(ValueError):
            FORWARD_PROFILE.with_takeoff_altitude(altitude)
