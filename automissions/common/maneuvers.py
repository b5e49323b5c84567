#!/usr/bin/env python3
"""
maneuvers.py - Body-Frame Velocity Setpoint Tables

Each program flies a fixed table of velocity setpoints in body coordinates
(forward-right-down). A setpoint is held for its duration before the next
one is sent.

Usage:
    from automissions.common.maneuvers import FORWARD_PROFILE

    for maneuver in FORWARD_PROFILE.maneuvers:
        print(maneuver)
"""

import math
from dataclasses import dataclass, replace
from typing import Tuple

from mavsdk.offboard import VelocityBodyYawspeed


@dataclass(frozen=True)
class Maneuver:
    """
    A single body-frame velocity setpoint.

    Attributes:
        name: Label logged when the setpoint is sent.
        forward_m_s: Forward velocity (m/s). Negative = backward.
        right_m_s: Right velocity (m/s). Negative = left.
        down_m_s: Down velocity (m/s). Negative = up.
        yawspeed_deg_s: Yaw rate (deg/s). Positive = clockwise.
        duration_s: How long the setpoint is held (seconds).
    """
    name: str
    forward_m_s: float = 0.0
    right_m_s: float = 0.0
    down_m_s: float = 0.0
    yawspeed_deg_s: float = 0.0
    duration_s: float = 0.0

    def __post_init__(self):
        if self.duration_s < 0:
            raise ValueError(f"Maneuver duration must be >= 0: {self.duration_s}")

    @property
    def is_hover(self) -> bool:
        """True if all velocity components are zero."""
        return (
            self.forward_m_s == 0.0
            and self.right_m_s == 0.0
            and self.down_m_s == 0.0
            and self.yawspeed_deg_s == 0.0
        )

    def to_velocity_body(self) -> VelocityBodyYawspeed:
        """Convert to a MAVSDK offboard setpoint."""
        return VelocityBodyYawspeed(
            self.forward_m_s,
            self.right_m_s,
            self.down_m_s,
            self.yawspeed_deg_s,
        )

    def __str__(self) -> str:
        return (
            f"{self.name}: fwd={self.forward_m_s:+.2f} right={self.right_m_s:+.2f} "
            f"down={self.down_m_s:+.2f} m/s, yaw={self.yawspeed_deg_s:+.1f} deg/s "
            f"for {self.duration_s:.1f}s"
        )


def hover(duration_s: float = 0.0) -> Maneuver:
    """Zero-velocity setpoint held for duration_s."""
    return Maneuver("Hover", duration_s=duration_s)


# Sent once before offboard start, otherwise the mode switch is rejected
HOVER = hover()


@dataclass(frozen=True)
class MissionProfile:
    """
    Takeoff parameters and setpoint table for one program.

    Attributes:
        name: Program name.
        description: One-line description for --help.
        takeoff_altitude_m: Takeoff altitude (m).
        takeoff_speed_m_s: Current speed set before takeoff (m/s).
        maneuvers: Setpoints flown in offboard mode, in order.
    """
    name: str
    description: str
    takeoff_altitude_m: float
    takeoff_speed_m_s: float
    maneuvers: Tuple[Maneuver, ...]

    @property
    def total_duration_s(self) -> float:
        """Time spent in the setpoint table (seconds)."""
        return sum(m.duration_s for m in self.maneuvers)

    def with_takeoff_altitude(self, altitude: float) -> "MissionProfile":
        """Return a copy with a different takeoff altitude."""
        if not math.isfinite(altitude) or altitude <= 0:
            raise ValueError(f"Takeoff altitude must be positive: {altitude}")
        return replace(self, takeoff_altitude_m=altitude)


FORWARD_PROFILE = MissionProfile(
    name="offboard_forward",
    description="Orthogonal velocity control in body coordinates (forward-right-down)",
    takeoff_altitude_m=1.0,
    takeoff_speed_m_s=0.25,
    maneuvers=(
        hover(2.0),
        Maneuver("Fly forward", forward_m_s=0.5, duration_s=4.0),
        hover(2.0),
    ),
)

OMNIDIRECTIONAL_PROFILE = MissionProfile(
    name="offboard_omnidirectional",
    description="Omnidirectional velocity control in body coordinates (forward-right-down)",
    takeoff_altitude_m=1.5,
    takeoff_speed_m_s=0.25,
    maneuvers=(
        hover(2.0),
        # Diagonals
        Maneuver("Fly forward, right, up", 0.5, 0.5, -0.25, duration_s=4.0),
        Maneuver("Fly forward, left, down", 0.5, -0.5, 0.25, duration_s=4.0),
        Maneuver("Fly backward, left, up", -0.5, -0.5, -0.25, duration_s=4.0),
        Maneuver("Fly backward, right, down", -0.5, 0.5, 0.25, duration_s=4.0),
        # Quarter circles (22.5 deg/s for 4s = 90 deg each)
        Maneuver("Fly quarter circle up", 0.0, 0.5, -0.25, 22.5, duration_s=4.0),
        Maneuver("Fly quarter circle down", 0.0, 0.5, 0.25, 22.5, duration_s=4.0),
        Maneuver("Fly quarter circle up", 0.0, 0.5, -0.25, 22.5, duration_s=4.0),
        Maneuver("Fly quarter circle down", 0.0, 0.5, 0.25, 22.5, duration_s=4.0),
        hover(2.0),
    ),
)
