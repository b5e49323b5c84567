#!/usr/bin/env python3
"""
offboard_omnidirectional.py - Omnidirectional Velocity Control Example

Offboard velocity control in body coordinates (forward-right-down):
1. Connect to the drone and wait for it to be ready
2. Arm and take off to 1.5m at 0.25 m/s
3. Enter offboard mode
4. Fly the four diagonals (forward/backward, left/right, up/down)
5. Fly two climbing and two descending quarter circles (22.5 deg/s yaw)
6. Hover, exit offboard mode and land

Usage:
    python3 -m automissions.offboard_omnidirectional <connection_url>

Example:
    offboard-omnidirectional udp://:14540
    offboard-omnidirectional tcp://192.168.1.100:5760 --verbose
"""

import sys

from automissions.common import OMNIDIRECTIONAL_PROFILE, run_cli

PROFILE = OMNIDIRECTIONAL_PROFILE


def main():
    """Main entry point."""
    sys.exit(run_cli(PROFILE))


if __name__ == "__main__":
    main()
