"""Request and reply envelopes for the WiZ UDP JSON protocol.

Request::

    {"method": "<name>", "id": <int>, "params": {...}}

``params`` is omitted when empty. Devices reject requests carrying keys the
method does not know, so each method has a fixed set of allowed keys
(:data:`PARAM_KEYS`) and a message only ever holds a subset of it.

Reply::

    {"method": "<name>", "id": <int>, "env": "<str>",
     "result": {...}, "error": {"code": <int>, "message": "<str>"}}

``result`` is a flat record whose populated keys depend on the query.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from ..exceptions import DecodingError, DeviceError, EncodingError

# Replies are not correlated by id, so any constant works.
REQUEST_ID = 1


class Method(str, Enum):
    """Protocol methods used by this client."""

    GET_PILOT = "getPilot"
    GET_SYSTEM_CONFIG = "getSystemConfig"
    GET_USER_CONFIG = "getUserConfig"
    GET_MODEL_CONFIG = "getModelConfig"
    GET_DEV_INFO = "getDevInfo"
    SET_STATE = "setState"
    SET_PILOT = "setPilot"
    PULSE = "pulse"
    REGISTRATION = "registration"


PARAM_KEYS: dict[Method, frozenset[str]] = {
    Method.GET_PILOT: frozenset(),
    Method.GET_SYSTEM_CONFIG: frozenset(),
    Method.GET_USER_CONFIG: frozenset(),
    Method.GET_MODEL_CONFIG: frozenset(),
    Method.GET_DEV_INFO: frozenset(),
    Method.SET_STATE: frozenset({"state"}),
    Method.SET_PILOT: frozenset({
        "state", "dimming", "r", "g", "b", "c", "w",
        "temp", "speed", "ratio", "sceneId",
    }),
    Method.PULSE: frozenset({"delta", "duration"}),
    Method.REGISTRATION: frozenset({"phoneIp", "phoneMac", "register"}),
}


@dataclass
class WizMessage:
    """An outbound request."""

    method: Method
    params: dict[str, Any] = field(default_factory=dict)
    id: int = REQUEST_ID

    def __post_init__(self) -> None:
        try:
            self.method = Method(self.method)
        except ValueError as e:
            raise EncodingError(f"Unknown method {self.method!r}") from e

        unknown = set(self.params) - PARAM_KEYS[self.method]
        if unknown:
            raise EncodingError(
                f"{self.method.value} does not accept params: {sorted(unknown)}"
            )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"method": self.method.value, "id": self.id}
        if self.params:
            d["params"] = dict(self.params)
        return d

    def encode(self) -> bytes:
        """Serialize to a compact JSON datagram."""
        try:
            return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodingError(f"Could not serialize {self.method.value}: {e}") from e

    @classmethod
    def decode(cls, data: bytes) -> WizMessage:
        """Parse a request datagram back into a message."""
        obj = _load_object(data)
        params = obj.get("params") or {}
        if not isinstance(params, dict):
            raise DecodingError("params must be an object")
        try:
            return cls(
                method=obj.get("method"),
                params=params,
                id=obj.get("id", REQUEST_ID),
            )
        except EncodingError as e:
            raise DecodingError(str(e)) from e


def _wire(name: str) -> Any:
    return field(default=None, metadata={"wire": name})


@dataclass
class DeviceResult:
    """The ``result`` record of a reply.

    Every field defaults to None, which means "not part of this reply".
    Keys this client does not know are kept in ``extra``.
    """

    # Almost always present
    mac: str | None = _wire("mac")
    src: str | None = _wire("src")
    success: bool | None = _wire("success")

    # getPilot
    rssi: int | None = _wire("rssi")
    state: bool | None = _wire("state")
    scene_id: int | None = _wire("sceneId")
    schd_pset_id: int | None = _wire("schdPsetId")
    r: int | None = _wire("r")
    g: int | None = _wire("g")
    b: int | None = _wire("b")
    c: int | None = _wire("c")
    w: int | None = _wire("w")
    dimming: int | None = _wire("dimming")
    speed: int | None = _wire("speed")
    ratio: int | None = _wire("ratio")
    temp: int | None = _wire("temp")

    # getDevInfo
    dev_mac: str | None = _wire("devMac")

    # getUserConfig
    fade_in: int | None = _wire("fadeIn")
    fade_out: int | None = _wire("fadeOut")
    dft_dim: int | None = _wire("dftDim")
    op_mode: int | None = _wire("opMode")
    po: bool | None = _wire("po")
    min_dimming: int | None = _wire("minDimming")
    tap_sensor: int | None = _wire("tapSensor")

    # getSystemConfig
    home_id: int | None = _wire("homeId")
    room_id: int | None = _wire("roomId")
    rgn: str | None = _wire("rgn")
    module_name: str | None = _wire("moduleName")
    fw_version: str | None = _wire("fwVersion")
    group_id: int | None = _wire("groupId")
    ping: int | None = _wire("ping")
    drv_conf: list[int] | None = _wire("drvConf")

    # getModelConfig
    ps: int | None = _wire("ps")
    pwm_freq: int | None = _wire("pwmFreq")
    pwm_range: list[int] | None = _wire("pwmRange")
    wcr: int | None = _wire("wcr")
    nowc: int | None = _wire("nowc")
    cct_range: list[int] | None = _wire("cctRange")
    ext_range: list[int] | None = _wire("extRange")
    render_factor: list[int] | None = _wire("renderFactor")
    white_range: list[int] | None = _wire("whiteRange")
    wizc1: dict[str, Any] | None = _wire("wizc1")
    wizc2: dict[str, Any] | None = _wire("wizc2")

    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeviceResult:
        known = {f.metadata["wire"]: f.name for f in fields(cls) if "wire" in f.metadata}
        kwargs: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in data.items():
            if key in known:
                kwargs[known[key]] = value
            else:
                extra[key] = value
        return cls(extra=extra, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Return only the populated fields, keyed by their wire names."""
        d = {
            f.metadata["wire"]: getattr(self, f.name)
            for f in fields(self)
            if "wire" in f.metadata and getattr(self, f.name) is not None
        }
        d.update(self.extra)
        return d


@dataclass
class DeviceErrorInfo:
    """The ``error`` object of a reply."""

    code: int | None = None
    message: str = ""


@dataclass
class WizResponse:
    """An inbound reply."""

    method: str
    id: int | None = None
    env: str | None = None
    result: DeviceResult | None = None
    error: DeviceErrorInfo | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None and bool(self.error.code)

    def raise_for_error(self) -> None:
        """Raise DeviceError if the device reported a non-zero error code."""
        if self.failed:
            raise DeviceError(self.error.code, self.error.message)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"method": self.method}
        if self.id is not None:
            d["id"] = self.id
        if self.env is not None:
            d["env"] = self.env
        if self.result is not None:
            d["result"] = self.result.to_dict()
        if self.error is not None:
            d["error"] = {"code": self.error.code, "message": self.error.message}
        return d

    @classmethod
    def decode(cls, data: bytes) -> WizResponse:
        """Parse a reply datagram.

        Raises:
            DecodingError: If the datagram is not a JSON object of the
                expected shape.
        """
        obj = _load_object(data)

        method = obj.get("method")
        if not isinstance(method, str) or not method:
            raise DecodingError(f"Reply has no method: {obj!r}")

        result = obj.get("result")
        if result is not None and not isinstance(result, dict):
            raise DecodingError(f"Reply result must be an object, got {result!r}")

        error = obj.get("error")
        if error is not None and not isinstance(error, dict):
            raise DecodingError(f"Reply error must be an object, got {error!r}")

        return cls(
            method=method,
            id=obj.get("id"),
            env=obj.get("env"),
            result=DeviceResult.from_dict(result) if result is not None else None,
            error=DeviceErrorInfo(
                code=error.get("code"),
                message=error.get("message", ""),
            ) if error is not None else None,
        )


def peek_method(data: bytes) -> str | None:
    """Return the ``method`` of a datagram without full decoding.

    Returns None if the datagram is not a JSON object.
    """
    try:
        obj = json.loads(data)
    except (UnicodeDecodeError, ValueError):
        return None
    if not isinstance(obj, dict):
        return None
    method = obj.get("method")
    return method if isinstance(method, str) else None


def _load_object(data: bytes) -> dict[str, Any]:
    try:
        obj = json.loads(data)
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodingError(f"Invalid JSON datagram: {e}") from e
    if not isinstance(obj, dict):
        raise DecodingError(f"Expected a JSON object, got {type(obj).__name__}")
    return obj
