#!/usr/bin/env python3
"""
offboard_forward.py - Orthogonal Velocity Control Example

Offboard velocity control in body coordinates (forward-right-down):
1. Connect to the drone and wait for it to be ready
2. Arm and take off to 1.0m at 0.25 m/s
3. Enter offboard mode
4. Hover 2s, fly forward at 0.5 m/s for 4s, hover 2s
5. Exit offboard mode and land

Usage:
    python3 -m automissions.offboard_forward <connection_url>

Example:
    offboard-forward udp://:14540
    offboard-forward serial:///dev/ttyACM0:57600
"""

import sys

from automissions.common import FORWARD_PROFILE, run_cli

PROFILE = FORWARD_PROFILE


def main():
    """Main entry point."""
    sys.exit(run_cli(PROFILE))


if __name__ == "__main__":
    main()
