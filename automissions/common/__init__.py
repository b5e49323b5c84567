"""
Common utilities for the offboard mission programs.

Modules:
    connection: Connection URL parsing and validation.
    maneuvers: Body-frame setpoint tables and mission profiles.
    drone_helpers: Common drone operations (connect, arm, takeoff, land, etc.)
    mission: The mission sequence and command line entry point.
    config: Mission timing configuration.
"""

from .connection import (
    ConnectionType,
    ConnectionUrl,
    parse_connection_url,
    usage,
)

from .maneuvers import (
    Maneuver,
    MissionProfile,
    HOVER,
    hover,
    FORWARD_PROFILE,
    OMNIDIRECTIONAL_PROFILE,
)

from .config import MissionConfig

from .drone_helpers import (
    connect_drone,
    wait_until_ready,
    arm,
    takeoff,
    wait_for_in_air,
    fly_body_velocity,
    land,
    setup_logging,
    create_argument_parser,
    is_shutdown_requested,
    reset_shutdown_request,
    setup_signal_handlers,
)

from .mission import (
    run_mission,
    run_cli,
)

__all__ = [
    # connection
    "ConnectionType",
    "ConnectionUrl",
    "parse_connection_url",
    "usage",
    # maneuvers
    "Maneuver",
    "MissionProfile",
    "HOVER",
    "hover",
    "FORWARD_PROFILE",
    "OMNIDIRECTIONAL_PROFILE",
    # config
    "MissionConfig",
    # drone_helpers
    "connect_drone",
    "wait_until_ready",
    "arm",
    "takeoff",
    "wait_for_in_air",
    "fly_body_velocity",
    "land",
    "setup_logging",
    "create_argument_parser",
    "is_shutdown_requested",
    "reset_shutdown_request",
    "setup_signal_handlers",
    # mission
    "run_mission",
    "run_cli",
]
