"""WiZ device client.

One :class:`WizClient` talks to one device. Every public method makes one
blocking round trip (``set_scene`` makes two) and either returns the
decoded reply or raises a :class:`~wiz_light_mcp.exceptions.WizError`.

Usage::

    with WizClient("192.168.1.20") as light:
        light.turn_on()
        light.set_brightness(60)
        light.set_scene(31)
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .config import ClientConfig
from .exceptions import DecodingError, DeviceError, DeviceTypeUndeterminedError, SceneNotAvailableError
from .models.pilot import PilotState
from .models.system import DeviceCapabilities, SystemConfig
from .protocol.commands import (
    build_pulse,
    build_query,
    build_registration,
    build_set_brightness,
    build_set_cold_white,
    build_set_ratio,
    build_set_rgb,
    build_set_scene,
    build_set_speed,
    build_set_state,
    build_set_temperature,
    build_set_warm_white,
)
from .protocol.messages import Method, WizMessage, WizResponse, peek_method
from .protocol.parser import parse_pilot, parse_system_config
from .transport.udp_connection import READ_TIMEOUT_MS, WIZ_PORT, UDPConnection

logger = logging.getLogger(__name__)


def _reply_to(method: Method) -> Callable[[bytes], bool]:
    """Accept datagrams answering ``method``.

    Undecodable datagrams are accepted so the decode error reaches the
    caller instead of being dropped.
    """
    def accept(data: bytes) -> bool:
        reply_method = peek_method(data)
        return reply_method is None or reply_method == method.value

    return accept


class WizClient:
    """Typed operations over the UDP connection to one WiZ device."""

    def __init__(
        self,
        host: str,
        port: int = WIZ_PORT,
        timeout_ms: int | None = READ_TIMEOUT_MS,
        connection: UDPConnection | None = None,
    ) -> None:
        """Create a client and open its socket.

        Args:
            host: Device IP address or hostname.
            port: Device UDP port.
            timeout_ms: Reply read timeout; None blocks forever.
            connection: Pre-built connection to use instead of opening one.

        Raises:
            WizConnectionError: If the address cannot be resolved or the
                socket cannot be created.
        """
        if connection is None:
            connection = UDPConnection(host, port, timeout_ms)
            connection.open()
        self._connection = connection

    @classmethod
    def from_config(cls, config: ClientConfig) -> WizClient:
        return cls(config.host, config.port, config.timeout_ms)

    @property
    def connection(self) -> UDPConnection:
        return self._connection

    def close(self) -> None:
        """Release the socket. Safe to call more than once."""
        self._connection.close()

    def __enter__(self) -> WizClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ─── REQUEST PATH ───────────────────────────────────────────────

    def call(
        self, method: Method | str, params: dict[str, Any] | None = None
    ) -> WizResponse:
        """Send an arbitrary request and return the decoded reply.

        ``params`` are checked against the keys allowed for ``method``
        before anything is sent.

        Raises:
            EncodingError: If the method is unknown, a param is not allowed
                for it, or the message cannot be serialized.
            SendError: If the request cannot be written.
            ReceiveError: If no reply can be read.
            DecodingError: If the reply is malformed.
            DeviceError: If the device reports an error.
        """
        return self._send(WizMessage(method, params or {}))

    def _send(self, message: WizMessage) -> WizResponse:
        """Exchange a built message; raises as documented on :meth:`call`."""
        payload = message.encode()
        data = self._connection.exchange(payload, accept=_reply_to(message.method))
        response = WizResponse.decode(data)
        if response.failed:
            logger.debug(
                "%s rejected by device: %s", message.method.value, response.error
            )
        response.raise_for_error()
        return response

    # ─── QUERIES ────────────────────────────────────────────────────

    def get_pilot(self) -> WizResponse:
        """Return the current light state (colour, brightness, scene...)."""
        return self._send(build_query(Method.GET_PILOT))

    def get_system_config(self) -> WizResponse:
        """Return the system configuration (module name, firmware, ids)."""
        return self._send(build_query(Method.GET_SYSTEM_CONFIG))

    def get_user_config(self) -> WizResponse:
        return self._send(build_query(Method.GET_USER_CONFIG))

    def get_model_config(self) -> WizResponse:
        return self._send(build_query(Method.GET_MODEL_CONFIG))

    def get_dev_info(self) -> WizResponse:
        return self._send(build_query(Method.GET_DEV_INFO))

    def get_pilot_state(self) -> PilotState:
        """Return the current light state as a PilotState."""
        response = self.get_pilot()
        state = parse_pilot(response)
        if state is None:
            raise DecodingError(f"getPilot reply has no result: {response.to_dict()}")
        return state

    def get_system_config_model(self) -> SystemConfig:
        """Return the system configuration as a SystemConfig."""
        response = self.get_system_config()
        config = parse_system_config(response)
        if config is None:
            raise DecodingError(
                f"getSystemConfig reply has no result: {response.to_dict()}"
            )
        return config

    # ─── CAPABILITIES ───────────────────────────────────────────────

    def get_capabilities(self) -> DeviceCapabilities:
        """Derive the device class from a single getSystemConfig query.

        Transport errors propagate unchanged.

        Raises:
            DeviceTypeUndeterminedError: If the device rejects the query or
                its reply does not carry a string module name.
        """
        try:
            config = self.get_system_config_model()
        except (DeviceError, DecodingError) as e:
            raise DeviceTypeUndeterminedError(
                f"error getting system config: {e}"
            ) from e

        module_name = config.module_name
        if not isinstance(module_name, str) or not module_name:
            raise DeviceTypeUndeterminedError(
                f"error figuring out device type: bad moduleName {module_name!r}"
            )
        return config.capabilities

    def is_rgb(self) -> bool:
        """True when the device has RGB plus cool and warm white LEDs."""
        return self.get_capabilities().is_rgb

    def is_tw(self) -> bool:
        """True when the device has cool and warm white LEDs."""
        return self.get_capabilities().is_tw

    def is_dw(self) -> bool:
        """True when the device has dimmable white LEDs only."""
        return self.get_capabilities().is_dw

    def is_scene_available(self, scene_id: int) -> bool:
        """Return True if the device class supports ``scene_id``."""
        return self.get_capabilities().supports_scene(scene_id)

    def available_scenes(self) -> dict[int, str]:
        """Return every scene the device supports, by id."""
        return self.get_capabilities().scenes()

    # ─── STATE ──────────────────────────────────────────────────────

    def turn_on(self) -> WizResponse:
        return self._send(build_set_state(True))

    def turn_off(self) -> WizResponse:
        return self._send(build_set_state(False))

    def set_brightness(self, brightness: int) -> WizResponse:
        """Set brightness, 10-100."""
        return self._send(build_set_brightness(brightness))

    def set_rgb(self, r: int, g: int, b: int) -> WizResponse:
        """Set RGB colour, each channel 0-255."""
        return self._send(build_set_rgb(r, g, b))

    def set_cold_white(self, value: int) -> WizResponse:
        """Set the cold white LED level, 0-255."""
        return self._send(build_set_cold_white(value))

    def set_warm_white(self, value: int) -> WizResponse:
        """Set the warm white LED level, 0-255."""
        return self._send(build_set_warm_white(value))

    def set_temperature(self, kelvin: int) -> WizResponse:
        """Set colour temperature, 2000-9000 K."""
        return self._send(build_set_temperature(kelvin))

    def set_speed(self, speed: int) -> WizResponse:
        """Set the colour-change speed of the active scene, 10-200."""
        return self._send(build_set_speed(speed))

    def set_ratio(self, ratio: int) -> WizResponse:
        """Set the up/down light ratio, 1-100."""
        return self._send(build_set_ratio(ratio))

    def set_scene(self, scene_id: int) -> WizResponse:
        """Activate a scene after checking the device class supports it.

        Raises:
            SceneNotAvailableError: If the device cannot show the scene.
        """
        message = build_set_scene(scene_id)
        if not self.is_scene_available(scene_id):
            raise SceneNotAvailableError(scene_id)
        return self._send(message)

    def set_rhythm(self, rhythm_id: int) -> WizResponse:
        """Activate a rhythm (room schedule).

        The wire format for rhythms is unknown (it may involve setSchdPset,
        setSchd or setPilot), so nothing is sent.
        """
        raise NotImplementedError(f"rhythm control is not supported (rhythm {rhythm_id})")

    def pulse(self) -> WizResponse:
        """Briefly dip the brightness so the bulb can be located."""
        return self._send(build_pulse())

    def registration(self, phone_ip: str, phone_mac: str, register: bool) -> WizResponse:
        """Opt in to, or out of, the device's syncPilot heartbeat pushes.

        Pushes go to ``phone_ip`` on UDP port 38900; this client does not
        listen for them.
        """
        return self._send(build_registration(phone_ip, phone_mac, register))
