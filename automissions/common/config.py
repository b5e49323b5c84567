#!/usr/bin/env python3
"""
config.py - Mission Timing Configuration

Timeouts and wait intervals shared by both programs. Values come from the
defaults below, then environment variables, then command line overrides.

Environment Variables:
    AUTOMISSIONS_DISCOVERY_TIMEOUT  - Seconds to wait for an autopilot (default: 3)
    AUTOMISSIONS_IN_AIR_TIMEOUT     - Seconds to wait for in-air after takeoff (default: 13)
    AUTOMISSIONS_HEALTH_TIMEOUT     - Seconds to wait for health checks (default: unset, wait forever)
    AUTOMISSIONS_POLL_INTERVAL      - Seconds between status messages (default: 1)
    AUTOMISSIONS_SETTLE_TIME        - Seconds to wait after touchdown for auto-disarm (default: 3)
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "AUTOMISSIONS_"


def _env_float(name: str, default: Optional[float], allow_zero: bool = False) -> Optional[float]:
    """
    Read a float from the environment, keeping the default if unset or malformed.

    Values that are not finite, negative, or zero (unless allow_zero) are
    malformed.
    """
    value = os.environ.get(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return default
    try:
        number = float(value)
    except ValueError:
        number = None
    if number is None or not math.isfinite(number) or number < 0 or (number == 0 and not allow_zero):
        logger.warning(f"Ignoring invalid {ENV_PREFIX + name}={value!r}, using {default}")
        return default
    return number


@dataclass
class MissionConfig:
    """
    Timing configuration for a mission run.

    Attributes:
        discovery_timeout: Seconds to wait for an autopilot to be discovered.
        in_air_timeout: Seconds to wait for the landed state to report in-air.
        health_timeout: Seconds to wait for health checks, None to wait forever.
        poll_interval: Seconds between "waiting" status messages.
        settle_time: Seconds to wait after touchdown for auto-disarm.
    """

    discovery_timeout: float = 3.0
    # 10s for the climb plus a 3s grace period
    in_air_timeout: float = 13.0
    health_timeout: Optional[float] = None
    poll_interval: float = 1.0
    settle_time: float = 3.0

    @classmethod
    def from_env(cls) -> "MissionConfig":
        """
        Create configuration from environment variables.

        Returns:
            MissionConfig: Configuration populated from environment.
        """
        defaults = cls()
        return cls(
            discovery_timeout=_env_float("DISCOVERY_TIMEOUT", defaults.discovery_timeout),
            in_air_timeout=_env_float("IN_AIR_TIMEOUT", defaults.in_air_timeout),
            health_timeout=_env_float("HEALTH_TIMEOUT", defaults.health_timeout),
            poll_interval=_env_float("POLL_INTERVAL", defaults.poll_interval, allow_zero=True),
            settle_time=_env_float("SETTLE_TIME", defaults.settle_time, allow_zero=True),
        )

    @classmethod
    def from_args(
        cls,
        discovery_timeout: Optional[float] = None,
        in_air_timeout: Optional[float] = None,
        health_timeout: Optional[float] = None,
    ) -> "MissionConfig":
        """
        Create configuration from arguments with environment fallback.

        Args:
            discovery_timeout: Discovery timeout override.
            in_air_timeout: In-air timeout override.
            health_timeout: Health check timeout override.

        Returns:
            MissionConfig: Configuration with argument overrides.
        """
        config = cls.from_env()

        if discovery_timeout is not None:
            config.discovery_timeout = discovery_timeout
        if in_air_timeout is not None:
            config.in_air_timeout = in_air_timeout
        if health_timeout is not None:
            config.health_timeout = health_timeout

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "discovery_timeout": self.discovery_timeout,
            "in_air_timeout": self.in_air_timeout,
            "health_timeout": self.health_timeout,
            "poll_interval": self.poll_interval,
            "settle_time": self.settle_time,
        }
