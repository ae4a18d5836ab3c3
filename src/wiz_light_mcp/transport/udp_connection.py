"""UDP connection to a single WiZ light.

WiZ devices listen on UDP port 38899 and answer each JSON request with a
single JSON datagram. The socket is ``connect()``-ed to the device, so only
datagrams from that peer are delivered to it.
"""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable

from ..exceptions import ReceiveError, SendError, WizConnectionError

logger = logging.getLogger(__name__)

WIZ_PORT = 38899
RECV_BUFFER_SIZE = 1024
READ_TIMEOUT_MS = 1000
MAX_STALE_DATAGRAMS = 3


class UDPConnection:
    """Manages the UDP socket to one WiZ device.

    Usage::

        with UDPConnection("192.168.1.20") as conn:
            reply = conn.exchange(b'{"method":"getPilot","id":1}')

    Send/receive pairs are serialized with a lock: replies carry no usable
    correlation id, so two overlapping exchanges could read each other's
    datagrams.
    """

    def __init__(
        self,
        host: str,
        port: int = WIZ_PORT,
        timeout_ms: int | None = READ_TIMEOUT_MS,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout_ms = timeout_ms
        self._sock: socket.socket | None = None
        self._lock = threading.Lock()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def address(self) -> tuple[str, int]:
        return self._host, self._port

    def open(self) -> None:
        """Resolve the device address and create a connected UDP socket.

        Raises:
            WizConnectionError: If the port or timeout is out of range, or
                resolution or socket setup fails.
        """
        if self._sock is not None:
            return

        port = self._port
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
            raise WizConnectionError(f"Invalid UDP port {port!r}, expected 0-65535")
        if self._timeout_ms is not None and self._timeout_ms < 0:
            raise WizConnectionError(
                f"Invalid read timeout {self._timeout_ms!r} ms, expected >= 0"
            )

        try:
            infos = socket.getaddrinfo(
                self._host, self._port, type=socket.SOCK_DGRAM
            )
        except (socket.gaierror, UnicodeError) as e:
            raise WizConnectionError(
                f"Could not resolve WiZ device {self._host}:{self._port}: {e}"
            ) from e

        family, socktype, proto, _, sockaddr = infos[0]
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as e:
            raise WizConnectionError(f"Could not create UDP socket: {e}") from e

        try:
            sock.connect(sockaddr)
            if self._timeout_ms is not None:
                sock.settimeout(self._timeout_ms / 1000)
        except (OSError, ValueError, OverflowError) as e:
            sock.close()
            raise WizConnectionError(
                f"Could not connect UDP socket to {self._host}:{self._port}: {e}"
            ) from e

        self._sock = sock
        logger.info("Connected to WiZ device at %s:%s", self._host, self._port)

    def close(self) -> None:
        """Close the UDP socket."""
        if self._sock is None:
            return

        try:
            self._sock.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)
        finally:
            self._sock = None
            logger.info("Disconnected from %s:%s", self._host, self._port)

    def __enter__(self) -> UDPConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def exchange(
        self,
        payload: bytes,
        accept: Callable[[bytes], bool] | None = None,
    ) -> bytes:
        """Send one datagram and read the reply.

        Args:
            payload: Encoded request.
            accept: Optional predicate deciding whether a received datagram
                is the reply to this request. Rejected datagrams are dropped
                and another read is made, up to ``MAX_STALE_DATAGRAMS`` times.

        Returns:
            The bytes of the reply datagram.

        Raises:
            WizConnectionError: If the connection is not open.
            SendError: If the write fails.
            ReceiveError: If the read fails or times out.
        """
        with self._lock:
            sock = self._sock
            if sock is None:
                raise WizConnectionError("Not connected to device")

            self._drain(sock)

            try:
                sock.send(payload)
            except OSError as e:
                raise SendError(str(e)) from e
            logger.debug("-> %s:%s %r", self._host, self._port, payload)

            for _ in range(MAX_STALE_DATAGRAMS + 1):
                data = self._receive(sock)
                if accept is None or accept(data):
                    return data
                logger.warning("Discarding unrelated datagram: %r", data)

            raise ReceiveError(
                f"no matching reply among {MAX_STALE_DATAGRAMS + 1} datagrams"
            )

    def _drain(self, sock: socket.socket) -> None:
        """Discard datagrams already queued, such as replies that arrived
        after their exchange timed out."""
        timeout = sock.gettimeout()
        sock.setblocking(False)
        try:
            while True:
                try:
                    data = sock.recv(RECV_BUFFER_SIZE)
                except (BlockingIOError, InterruptedError):
                    break
                except OSError as e:
                    # e.g. a queued ICMP port-unreachable from an earlier send
                    logger.debug("Error while draining socket: %s", e)
                    break
                logger.warning("Discarding stale datagram: %r", data)
        finally:
            sock.settimeout(timeout)

    def _receive(self, sock: socket.socket) -> bytes:
        try:
            data = sock.recv(RECV_BUFFER_SIZE)
        except socket.timeout as e:
            raise ReceiveError(
                f"timed out after {self._timeout_ms} ms", timeout=True
            ) from e
        except OSError as e:
            raise ReceiveError(str(e)) from e
        logger.debug("<- %s:%s %r", self._host, self._port, data)
        return data
