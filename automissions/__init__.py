"""
Scripted Offboard Missions

This package contains two example programs that fly a multicopter through
a fixed sequence of body-frame velocity setpoints using MAVSDK.

Programs:
    offboard_forward.py          - Hover, fly forward, hover
    offboard_omnidirectional.py  - Diagonals and climbing/descending quarter circles

Common Module:
    automissions/common/         - Shared utilities for both programs
        connection.py            - Connection URL parsing and validation
        maneuvers.py             - Setpoint tables and mission profiles
        drone_helpers.py         - Connect, arm, takeoff, offboard, land helpers
        mission.py               - The linear mission sequence and CLI
        config.py                - Timeouts and wait intervals

Connection URLs:
    - TCP: tcp://[server_host][:server_port]
    - UDP: udp://[bind_host][:bind_port]
    - Serial: serial:///path/to/serial/dev[:baudrate]

Usage:
    # Connect to PX4 SITL
    offboard-forward udp://:14540

    # Run as a module
    python3 -m automissions.offboard_omnidirectional udp://:14540 --verbose
"""
