"""
Pytest configuration and shared fixtures for mission tests.

This module provides:
- Async test support via pytest-asyncio
- A scripted stand-in for mavsdk.System that records every command
- Test markers configuration
"""

import asyncio
from dataclasses import replace
from types import SimpleNamespace

import pytest

from mavsdk.action import ActionError, ActionResult
from mavsdk.offboard import OffboardError, OffboardResult
from mavsdk.telemetry import LandedState

from automissions.common import drone_helpers
from automissions.common.config import MissionConfig


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "asyncio: mark test as async"
    )
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers",
        "flight: mark test as requiring a simulated vehicle"
    )


def action_error(origin: str) -> ActionError:
    """Build the ActionError MAVSDK raises for a denied command."""
    return ActionError(
        ActionResult(ActionResult.Result.COMMAND_DENIED, "Command denied"),
        origin,
    )


def offboard_error(origin: str) -> OffboardError:
    """Build the OffboardError MAVSDK raises for a rejected offboard command."""
    return OffboardError(
        OffboardResult(OffboardResult.Result.NO_SETPOINT_SET, "No setpoint set"),
        origin,
    )


async def _stream(values, hang: bool):
    """Yield values, then optionally keep the stream open without new values."""
    for value in values:
        yield value
        await asyncio.sleep(0)
    while hang:
        await asyncio.sleep(0.01)


class FakeDrone:
    """
    Scripted stand-in for mavsdk.System.

    Telemetry streams replay the configured sequences. Commands are recorded
    in `calls` as (name, args) tuples and raise the matching MAVSDK error
    when their name is listed in `fail`.

    Attributes:
        connected: Whether the connection state ever reports connected.
        health: Values replayed by telemetry.health_all_ok().
        landed_states: Values replayed by telemetry.landed_state().
        in_air_states: Values replayed by telemetry.in_air().
        fail: Names of commands that should fail (e.g. "arm", "offboard.start").
        connect_error: Exception raised by connect(), if any.
    """

    def __init__(self):
        self.connected = True
        self.health = [False, False, True]
        self.landed_states = [LandedState.ON_GROUND, LandedState.TAKING_OFF, LandedState.IN_AIR]
        self.in_air_states = [True, True, False]
        self.fail = set()
        self.connect_error = None
        self.calls = []
        self.address = None

        self.core = SimpleNamespace(connection_state=self._connection_state)
        self.telemetry = SimpleNamespace(
            health_all_ok=lambda: _stream(self.health, hang=True),
            landed_state=lambda: _stream(self.landed_states, hang=True),
            in_air=lambda: _stream(self.in_air_states, hang=False),
        )
        self.action = SimpleNamespace(
            arm=self._command("arm", action_error),
            set_takeoff_altitude=self._command("set_takeoff_altitude", action_error),
            set_current_speed=self._command("set_current_speed", action_error),
            takeoff=self._command("takeoff", action_error),
            land=self._command("land", action_error),
        )
        self.offboard = SimpleNamespace(
            set_velocity_body=self._command("offboard.set_velocity_body", offboard_error),
            start=self._command("offboard.start", offboard_error),
            stop=self._command("offboard.stop", offboard_error),
        )

    async def connect(self, system_address=None):
        self.address = system_address
        if self.connect_error is not None:
            raise self.connect_error

    def _connection_state(self):
        states = [SimpleNamespace(is_connected=False)]
        if self.connected:
            states.append(SimpleNamespace(is_connected=True))
        return _stream(states, hang=True)

    def _command(self, name, make_error):
        async def command(*args):
            self.calls.append((name, args))
            if name in self.fail:
                raise make_error(f"{name}()")
        return command

    @property
    def call_names(self):
        """Names of recorded commands, in order."""
        return [name for name, _ in self.calls]

    def setpoints(self):
        """VelocityBodyYawspeed setpoints sent, in order."""
        return [args[0] for name, args in self.calls if name == "offboard.set_velocity_body"]


@pytest.fixture
def fake_drone(monkeypatch):
    """
    Fixture providing a FakeDrone that connect_drone() will create.

    Yields:
        FakeDrone: The scripted vehicle.
    """
    drone = FakeDrone()
    monkeypatch.setattr(drone_helpers, "System", lambda: drone)
    yield drone


@pytest.fixture
def fast_config():
    """
    Fixture providing a MissionConfig with no waiting.

    Returns:
        MissionConfig: Short timeouts, zero poll interval and settle time.
    """
    return MissionConfig(
        discovery_timeout=0.5,
        in_air_timeout=0.5,
        health_timeout=None,
        poll_interval=0.0,
        settle_time=0.0,
    )


@pytest.fixture
def instant():
    """
    Fixture providing a function that zeroes every setpoint duration.

    Returns:
        Callable[[MissionProfile], MissionProfile]: Profile converter.
    """
    def _instant(profile):
        maneuvers = tuple(replace(m, duration_s=0.0) for m in profile.maneuvers)
        return replace(profile, maneuvers=maneuvers)
    return _instant


@pytest.fixture(autouse=True)
def clear_shutdown_request():
    """Make sure no test starts or ends with a pending shutdown request."""
    drone_helpers.reset_shutdown_request()
    yield
    drone_helpers.reset_shutdown_request()
