"""Transport layer: the UDP socket to a single device."""

from .udp_connection import UDPConnection, WIZ_PORT
