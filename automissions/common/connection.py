#!/usr/bin/env python3
"""
connection.py - MAVLink Connection URL Handling

Parses and validates the connection URL given on the command line and turns
it into the system address handed to MAVSDK.

URL Formats:
    - tcp://[server_host][:server_port]     (also tcpin://, tcpout://)
    - udp://[bind_host][:bind_port]         (also udpin://, udpout://)
    - serial:///path/to/serial/dev[:baudrate]

UDP:
    The bare udp:// form is deprecated in MAVSDK. It is rewritten to
    udpin:// so that it keeps its meaning (listen on the bind address).

Usage:
    from automissions.common.connection import parse_connection_url

    connection = parse_connection_url("udp://:14540")
    print(connection)                         # UDP: 0.0.0.0:14540
    connection.get_system_address()           # 'udpin://0.0.0.0:14540'
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConnectionType(Enum):
    """MAVLink transport families."""
    TCP = "tcp"
    UDP = "udp"
    SERIAL = "serial"


# Default configuration values
DEFAULTS = {
    "tcp_port": 5760,
    "udp_host": "0.0.0.0",  # Listen on all interfaces
    "udp_port": 14540,
    "serial_baud": 57600,
}

# Scheme -> transport family
SCHEMES = {
    "tcp": ConnectionType.TCP,
    "tcpin": ConnectionType.TCP,
    "tcpout": ConnectionType.TCP,
    "udp": ConnectionType.UDP,
    "udpin": ConnectionType.UDP,
    "udpout": ConnectionType.UDP,
    "serial": ConnectionType.SERIAL,
    "serial_flowcontrol": ConnectionType.SERIAL,
}


@dataclass
class ConnectionUrl:
    """
    A validated MAVLink connection URL.

    Attributes:
        connection_type: Transport family (tcp, udp, or serial).
        scheme: Scheme exactly as given (lowercased).
        host: Host or bind address for TCP/UDP, None if omitted.
        port: Port for TCP/UDP, None if omitted.
        device: Serial device path for serial URLs.
        baud: Serial baud rate, None if omitted.
        raw: The URL as given on the command line.
    """
    connection_type: ConnectionType
    scheme: str
    raw: str
    host: Optional[str] = None
    port: Optional[int] = None
    device: Optional[str] = None
    baud: Optional[int] = None

    def get_system_address(self) -> str:
        """
        Generate the MAVSDK system address for this URL.

        Returns:
            str: MAVSDK-compatible connection string.
        """
        if self.scheme == "udp":
            # udp:// is deprecated in MAVSDK, udpin:// keeps the bind semantics
            host = self.host or DEFAULTS["udp_host"]
            port = self.port or DEFAULTS["udp_port"]
            return f"udpin://{host}:{port}"
        return self.raw

    def __str__(self) -> str:
        """String representation showing current settings."""
        if self.connection_type == ConnectionType.SERIAL:
            baud = self.baud or DEFAULTS["serial_baud"]
            return f"Serial: {self.device} @ {baud} baud"
        elif self.connection_type == ConnectionType.TCP:
            port = self.port or DEFAULTS["tcp_port"]
            return f"TCP: {self.host or 'localhost'}:{port}"
        else:
            port = self.port or DEFAULTS["udp_port"]
            return f"UDP: {self.host or DEFAULTS['udp_host']}:{port}"


def _parse_port(value: str, url: str) -> int:
    """Parse and range-check a TCP/UDP port."""
    try:
        port = int(value)
    except ValueError:
        raise ValueError(f"Invalid port '{value}' in connection URL: {url}")
    if port < 1 or port > 65535:
        raise ValueError(f"Port out of range (1-65535): {port}")
    return port


def parse_connection_url(url: str) -> ConnectionUrl:
    """
    Parse and validate a MAVLink connection URL.

    Args:
        url: Connection URL, e.g. "udp://:14540" or "serial:///dev/ttyACM0:57600".

    Returns:
        ConnectionUrl: The parsed URL.

    Raises:
        ValueError: If the URL is malformed or uses an unknown scheme.

    Examples:
        >>> parse_connection_url("tcp://192.168.1.100:5760").port
        5760

        >>> parse_connection_url("serial:///dev/ttyUSB0:921600").baud
        921600
    """
    if not url or not url.strip():
        raise ValueError("Connection URL is empty")

    url = url.strip()
    if "://" not in url:
        raise ValueError(f"Connection URL is missing a scheme (e.g. udp://): {url}")

    scheme, rest = url.split("://", 1)
    scheme = scheme.lower()
    if scheme not in SCHEMES:
        raise ValueError(
            f"Unknown connection scheme '{scheme}'. "
            "Use tcp://, udp://, or serial://"
        )

    connection_type = SCHEMES[scheme]

    if connection_type == ConnectionType.SERIAL:
        device, baud = rest, None
        # Baud rate is the part after the last ':' (device paths have none)
        if ":" in rest:
            device, baud_str = rest.rsplit(":", 1)
            try:
                baud = int(baud_str)
            except ValueError:
                raise ValueError(f"Invalid baud rate '{baud_str}' in connection URL: {url}")
            if baud <= 0:
                raise ValueError(f"Baud rate must be positive: {baud}")
        if not device:
            raise ValueError(f"Serial connection URL has no device path: {url}")
        return ConnectionUrl(
            connection_type=connection_type,
            scheme=scheme,
            raw=url,
            device=device,
            baud=baud,
        )

    host, port = rest, None
    if ":" in rest:
        host, port_str = rest.rsplit(":", 1)
        port = _parse_port(port_str, url)

    return ConnectionUrl(
        connection_type=connection_type,
        scheme=scheme,
        raw=url,
        host=host or None,
        port=port,
    )


def usage(prog: str) -> str:
    """
    Build the usage text shown for missing or invalid arguments.

    Args:
        prog: Program name.

    Returns:
        str: Multi-line usage message.
    """
    return (
        f"Usage : {prog} <connection_url>\n"
        "Connection URL format should be :\n"
        " For TCP : tcp://[server_host][:server_port]\n"
        " For UDP : udp://[bind_host][:bind_port]\n"
        " For Serial : serial:///path/to/serial/dev[:baudrate]\n"
        "For example, to connect to the simulator use URL: udp://:14540\n"
    )
