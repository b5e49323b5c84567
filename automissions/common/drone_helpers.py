#!/usr/bin/env python3
"""
drone_helpers.py - Common Drone Operations

Provides the vehicle operations shared by the offboard programs:
- Connection and autopilot discovery
- Health check wait
- Arming and takeoff
- Offboard velocity control in body coordinates
- Landing
- Logging, signal handling and argument parsing

Every operation logs its progress and returns False (or None for
connect_drone) on failure, after logging the library result.

Usage:
    from automissions.common import (
        connect_drone,
        wait_until_ready,
        arm,
        takeoff,
        wait_for_in_air,
        fly_body_velocity,
        land,
    )

    drone = await connect_drone(parse_connection_url("udp://:14540"))
    if drone and await wait_until_ready(drone) and await arm(drone):
        ...
"""

import argparse
import asyncio
import logging
import math
import signal
import sys
import time
from typing import Iterable, Optional

from mavsdk import System
from mavsdk.action import ActionError
from mavsdk.offboard import OffboardError
from mavsdk.telemetry import LandedState

from .connection import ConnectionUrl, usage
from .maneuvers import HOVER, Maneuver

# Module-level logger
logger = logging.getLogger(__name__)

# Global shutdown flag for signal handling
_shutdown_requested = False

# Longest uninterrupted sleep while holding a setpoint
_HOLD_SLICE_S = 0.1


def _signal_handler(signum, frame):
    """
    Handle shutdown signals (Ctrl+C, SIGTERM).

    The first signal requests a graceful stop (hover, land). A second one
    raises KeyboardInterrupt so the program can be left during the landing
    wait, which does not check the shutdown flag.
    """
    global _shutdown_requested
    if _shutdown_requested:
        logger.error("Second shutdown signal, aborting without waiting for touchdown")
        raise KeyboardInterrupt
    logger.warning("Shutdown requested (Ctrl+C), press again to abort")
    _shutdown_requested = True


def is_shutdown_requested() -> bool:
    """
    Check if shutdown has been requested.

    Returns:
        bool: True if shutdown was requested via signal.
    """
    return _shutdown_requested


def reset_shutdown_request():
    """Clear the shutdown flag."""
    global _shutdown_requested
    _shutdown_requested = False


def setup_signal_handlers():
    """Set up signal handlers for graceful shutdown."""
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)


def setup_logging(
    level: int = logging.INFO,
    format_string: str = "%(asctime)s [%(levelname)s] %(message)s",
    datefmt: str = "%H:%M:%S",
) -> logging.Logger:
    """
    Configure logging for drone scripts.

    Args:
        level: Logging level (default: INFO).
        format_string: Log message format.
        datefmt: Date format string.

    Returns:
        logging.Logger: Configured root logger.
    """
    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt=datefmt,
    )
    root = logging.getLogger()
    root.setLevel(level)
    return root


class UsageArgumentParser(argparse.ArgumentParser):
    """
    Argument parser that reports errors with the connection URL usage text.

    Bad arguments exit with status 1, like every other failure.
    """

    def error(self, message):
        sys.stderr.write(usage(self.prog))
        sys.stderr.write(f"{self.prog}: error: {message}\n")
        sys.exit(1)


def _positive_float(value: str) -> float:
    """argparse type for strictly positive floats."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not math.isfinite(number) or number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number: {value}")
    return number


def create_argument_parser(
    description: str,
    prog: Optional[str] = None,
    altitude_default: float = 1.0,
) -> argparse.ArgumentParser:
    """
    Create the standard argument parser for the offboard programs.

    Args:
        description: Script description.
        prog: Program name shown in usage (default: argv[0]).
        altitude_default: Takeoff altitude shown in --altitude help.

    Returns:
        argparse.ArgumentParser: Configured parser.
    """
    parser = UsageArgumentParser(prog=prog, description=description)

    parser.add_argument(
        "connection_url",
        help="tcp://[server_host][:server_port], udp://[bind_host][:bind_port] "
             "or serial:///path/to/serial/dev[:baudrate]",
    )

    parser.add_argument(
        "--altitude",
        type=_positive_float,
        default=None,
        help=f"Takeoff altitude in meters (default: {altitude_default})",
    )

    timing_group = parser.add_argument_group("Timing Options")

    timing_group.add_argument(
        "--discovery-timeout",
        type=_positive_float,
        default=None,
        help="Seconds to wait for an autopilot. "
             "Default: AUTOMISSIONS_DISCOVERY_TIMEOUT env or 3",
    )

    timing_group.add_argument(
        "--in-air-timeout",
        type=_positive_float,
        default=None,
        help="Seconds to wait for the vehicle to report in-air after takeoff. "
             "Default: AUTOMISSIONS_IN_AIR_TIMEOUT env or 13",
    )

    timing_group.add_argument(
        "--health-timeout",
        type=_positive_float,
        default=None,
        help="Seconds to wait for health checks. "
             "Default: AUTOMISSIONS_HEALTH_TIMEOUT env or wait forever",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser


async def connect_drone(
    connection: ConnectionUrl,
    timeout: float = 3.0,
) -> Optional[System]:
    """
    Connect to a drone and wait for an autopilot to be discovered.

    Args:
        connection: Parsed connection URL.
        timeout: Discovery timeout in seconds.

    Returns:
        System: Connected MAVSDK System, or None if failed.
    """
    address = connection.get_system_address()
    logger.info(f"Connecting to drone: {address}")

    drone = System()
    try:
        await drone.connect(system_address=address)
    except Exception as e:
        logger.error(f"Connection failed: {e}")
        return None

    logger.info("Waiting to discover system...")

    async def _wait_connected() -> bool:
        async for state in drone.core.connection_state():
            if state.is_connected:
                return True
        return False

    try:
        discovered = await asyncio.wait_for(_wait_connected(), timeout=timeout)
    except asyncio.TimeoutError:
        discovered = False

    if not discovered:
        logger.error("No autopilot found.")
        return None

    logger.info("Discovered autopilot")
    return drone


async def wait_until_ready(
    drone: System,
    poll_interval: float = 1.0,
    timeout: Optional[float] = None,
) -> bool:
    """
    Wait until all health checks pass.

    Args:
        drone: Connected MAVSDK System.
        poll_interval: Seconds between "waiting" messages.
        timeout: Timeout in seconds, None to wait forever.

    Returns:
        bool: True if the vehicle is ready to arm.
    """

    async def _wait_healthy() -> bool:
        last_report = None
        async for all_ok in drone.telemetry.health_all_ok():
            if all_ok:
                return True

            if is_shutdown_requested():
                logger.warning("Health check wait cancelled by user")
                return False

            now = time.monotonic()
            if last_report is None or now - last_report >= poll_interval:
                logger.info("Waiting for system to be ready")
                last_report = now

            # Yield immediately so the telemetry stream does not back up
            await asyncio.sleep(0)
        return False

    try:
        ready = await asyncio.wait_for(_wait_healthy(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"System not ready after {timeout}s")
        return False

    if ready:
        logger.info("System is ready")
    return ready


async def arm(drone: System) -> bool:
    """
    Arm the vehicle.

    Args:
        drone: Connected MAVSDK System.

    Returns:
        bool: True if armed.
    """
    try:
        await drone.action.arm()
    except ActionError as e:
        logger.error(f"Arming failed: {e}")
        return False

    logger.info("Armed")
    return True


async def takeoff(drone: System, altitude: float, speed: float) -> bool:
    """
    Set takeoff altitude and speed, then take off.

    Args:
        drone: Connected, armed MAVSDK System.
        altitude: Takeoff altitude in meters.
        speed: Current speed in m/s.

    Returns:
        bool: True if the takeoff command was accepted.
    """
    logger.info(f"Taking off to {altitude}m at {speed} m/s")
    try:
        await drone.action.set_takeoff_altitude(altitude)
        await drone.action.set_current_speed(speed)
        await drone.action.takeoff()
    except ActionError as e:
        logger.error(f"Takeoff failed: {e}")
        return False

    return True


async def wait_for_in_air(drone: System, timeout: float = 13.0) -> bool:
    """
    Wait for the landed state to report in-air after takeoff.

    Args:
        drone: MAVSDK System that has been commanded to take off.
        timeout: Timeout in seconds.

    Returns:
        bool: True if the vehicle is in the air.
    """

    async def _wait_in_air() -> bool:
        async for state in drone.telemetry.landed_state():
            logger.debug(f"Landed state: {state}")
            if state == LandedState.IN_AIR:
                return True
        return False

    try:
        in_air = await asyncio.wait_for(_wait_in_air(), timeout=timeout)
    except asyncio.TimeoutError:
        in_air = False

    if not in_air:
        logger.error("Takeoff timed out.")
        return False

    logger.info("Taking off has finished")
    return True


async def _hold(duration_s: float):
    """Sleep for duration_s, returning early if shutdown is requested."""
    deadline = time.monotonic() + duration_s
    while not is_shutdown_requested():
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        await asyncio.sleep(min(remaining, _HOLD_SLICE_S))


async def fly_body_velocity(drone: System, maneuvers: Iterable[Maneuver]) -> bool:
    """
    Fly a setpoint table using offboard velocity control in body coordinates.

    Sends a hover setpoint, starts offboard mode, sends each setpoint and
    holds it for its duration, then stops offboard mode. A shutdown request
    skips the rest of the table and leaves the vehicle hovering.

    Args:
        drone: Connected MAVSDK System in the air.
        maneuvers: Setpoints to fly, in order.

    Returns:
        bool: True if offboard control ran and stopped cleanly.
    """
    logger.info("Starting Offboard velocity control in body coordinates")

    try:
        # Send it once before starting offboard, otherwise it will be rejected
        await drone.offboard.set_velocity_body(HOVER.to_velocity_body())
        await drone.offboard.start()
    except OffboardError as e:
        logger.error(f"Offboard start failed: {e}")
        return False
    logger.info("Offboard started")

    for maneuver in maneuvers:
        if is_shutdown_requested():
            break

        logger.info(maneuver.name)
        logger.debug(f"  {maneuver}")
        try:
            await drone.offboard.set_velocity_body(maneuver.to_velocity_body())
        except OffboardError as e:
            logger.error(f"Setpoint '{maneuver.name}' failed: {e}")
            return False
        await _hold(maneuver.duration_s)

    if is_shutdown_requested():
        logger.warning("Maneuvers interrupted by user, hovering")
        try:
            await drone.offboard.set_velocity_body(HOVER.to_velocity_body())
        except OffboardError as e:
            logger.error(f"Hover setpoint failed: {e}")
            return False

    try:
        await drone.offboard.stop()
    except OffboardError as e:
        logger.error(f"Offboard stop failed: {e}")
        return False
    logger.info("Offboard stopped")

    return True


async def land(
    drone: System,
    poll_interval: float = 1.0,
    settle_time: float = 3.0,
) -> bool:
    """
    Land and wait for touchdown, then wait for auto-disarm.

    Args:
        drone: Connected MAVSDK System.
        poll_interval: Seconds between "landing" messages.
        settle_time: Seconds to wait after touchdown.

    Returns:
        bool: True if the vehicle landed.
    """
    try:
        await drone.action.land()
    except ActionError as e:
        logger.error(f"Landing failed: {e}")
        return False

    landed = False
    last_report = None
    async for in_air in drone.telemetry.in_air():
        if not in_air:
            landed = True
            break

        now = time.monotonic()
        if last_report is None or now - last_report >= poll_interval:
            logger.info("Vehicle is landing...")
            last_report = now

        # Yield immediately so the telemetry stream does not back up
        await asyncio.sleep(0)

    if not landed:
        logger.error("In-air telemetry ended before touchdown")
        return False
    logger.info("Landed!")

    # Wait to ensure safety and auto-disarm
    await asyncio.sleep(settle_time)
    logger.info("Finished...")
    return True
