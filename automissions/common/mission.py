#!/usr/bin/env python3
"""
mission.py - Scripted Offboard Mission Runner

Runs the linear sequence shared by both programs:

    connect -> discover -> wait for health -> arm -> takeoff
    -> wait for in-air -> offboard setpoint table -> land -> settle

The first failing step ends the run with exit status 1. There are no
retries: after a failure in the air the vehicle is left to its own
failsafes.
"""

import asyncio
import logging
from typing import List, Optional

from .config import MissionConfig
from .connection import ConnectionUrl, parse_connection_url
from .drone_helpers import (
    arm,
    connect_drone,
    create_argument_parser,
    fly_body_velocity,
    is_shutdown_requested,
    land,
    setup_logging,
    setup_signal_handlers,
    takeoff,
    wait_for_in_air,
    wait_until_ready,
)
from .maneuvers import MissionProfile

logger = logging.getLogger(__name__)


def log_mission_summary(connection: ConnectionUrl, profile: MissionProfile):
    """Log the mission banner."""
    logger.info("=" * 50)
    logger.info(profile.description)
    logger.info("=" * 50)
    logger.info(f"  Connection: {connection}")
    logger.info(f"  Takeoff altitude: {profile.takeoff_altitude_m}m")
    logger.info(f"  Takeoff speed: {profile.takeoff_speed_m_s} m/s")
    logger.info(
        f"  Setpoints: {len(profile.maneuvers)} "
        f"({profile.total_duration_s:.0f}s in offboard)"
    )
    logger.info("=" * 50)


async def run_mission(
    connection: ConnectionUrl,
    profile: MissionProfile,
    config: Optional[MissionConfig] = None,
) -> bool:
    """
    Execute the scripted offboard mission.

    Args:
        connection: Parsed connection URL.
        profile: Takeoff parameters and setpoint table.
        config: Timing configuration (default: MissionConfig()).

    Returns:
        bool: True if the mission completed and the vehicle landed.
    """
    config = config or MissionConfig()
    log_mission_summary(connection, profile)

    drone = await connect_drone(connection, timeout=config.discovery_timeout)
    if drone is None:
        return False

    try:
        if not await wait_until_ready(
            drone,
            poll_interval=config.poll_interval,
            timeout=config.health_timeout,
        ):
            return False

        if is_shutdown_requested():
            logger.warning("Mission cancelled by user before arming")
            return False

        if not await arm(drone):
            return False

        if not await takeoff(
            drone,
            altitude=profile.takeoff_altitude_m,
            speed=profile.takeoff_speed_m_s,
        ):
            return False

        if not await wait_for_in_air(drone, timeout=config.in_air_timeout):
            return False

        if not await fly_body_velocity(drone, profile.maneuvers):
            return False

        if not await land(
            drone,
            poll_interval=config.poll_interval,
            settle_time=config.settle_time,
        ):
            return False

    except Exception:
        logger.exception("Mission aborted by unexpected error")
        return False

    if is_shutdown_requested():
        logger.warning("Mission was interrupted by user")
        return False

    logger.info("=" * 50)
    logger.info(f"{profile.name} complete!")
    logger.info("=" * 50)
    return True


def run_cli(profile: MissionProfile, argv: Optional[List[str]] = None, prog: Optional[str] = None) -> int:
    """
    Command line entry point shared by both programs.

    Args:
        profile: Mission profile to fly.
        argv: Arguments (default: sys.argv[1:]).
        prog: Program name shown in usage.

    Returns:
        int: Exit status, 0 on success and 1 on any failure.
    """
    parser = create_argument_parser(
        description=profile.description,
        prog=prog,
        altitude_default=profile.takeoff_altitude_m,
    )
    args = parser.parse_args(argv)

    try:
        connection = parse_connection_url(args.connection_url)
    except ValueError as e:
        parser.error(str(e))

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    setup_signal_handlers()

    if args.altitude is not None:
        profile = profile.with_takeoff_altitude(args.altitude)

    config = MissionConfig.from_args(
        discovery_timeout=args.discovery_timeout,
        in_air_timeout=args.in_air_timeout,
        health_timeout=args.health_timeout,
    )
    logger.debug(f"Timing: {config.to_dict()}")

    try:
        success = asyncio.run(run_mission(connection, profile, config))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        success = False

    return 0 if success else 1
