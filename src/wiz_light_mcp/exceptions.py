"""Exception hierarchy for the WiZ client.

Every error raised by this package derives from :class:`WizError`, so
callers can catch the whole family at once, or tell "could not reach the
device" (:class:`TransportError`) apart from "the device rejected the
command" (:class:`DeviceError`).
"""

from __future__ import annotations


class WizError(Exception):
    """Base class for all WiZ client errors."""


class WizConnectionError(WizError, ConnectionError):
    """Address resolution or socket setup failed, or the connection is closed.

    Named WizConnectionError to avoid shadowing the builtin ConnectionError,
    which it still subclasses.
    """


class TransportError(WizError):
    """A datagram could not be exchanged with the device."""


class SendError(TransportError):
    """Writing the request datagram failed."""

    def __init__(self, reason: str) -> None:
        self.reason: str = reason
        super().__init__(f"error sending data: {reason}")


class ReceiveError(TransportError):
    """Reading the reply datagram failed.

    Attributes:
        reason: Specific failure reason
        timeout: True when no reply arrived before the read timeout
    """

    def __init__(self, reason: str, timeout: bool = False) -> None:
        self.reason: str = reason
        self.timeout: bool = timeout
        super().__init__(f"error receiving response: {reason}")


class EncodingError(WizError):
    """A request could not be built or serialized."""


class DecodingError(WizError):
    """A reply was not valid JSON or did not have the expected shape."""


class ValidationError(WizError, ValueError):
    """A caller-supplied parameter is outside its documented range."""


class SceneNotAvailableError(WizError):
    """The scene is not supported by the detected device class."""

    def __init__(self, scene_id: int) -> None:
        self.scene_id: int = scene_id
        super().__init__(f"scene not available: {scene_id}")


class DeviceTypeUndeterminedError(WizError):
    """The device class could not be derived from its system config."""


class DeviceError(WizError):
    """The device answered with a populated error object.

    Attributes:
        code: Protocol error code reported by the device
        message: Error message reported by the device
    """

    def __init__(self, code: int, message: str = "") -> None:
        self.code: int = code
        self.message: str = message
        super().__init__(f"device error {code}: {message}" if message else f"device error {code}")
