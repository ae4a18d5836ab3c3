"""Tests for the WizClient operations, against a fake connection."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from wiz_light_mcp.client import WizClient
from wiz_light_mcp.exceptions import (
    DecodingError,
    DeviceError,
    DeviceTypeUndeterminedError,
    EncodingError,
    ReceiveError,
    SceneNotAvailableError,
    SendError,
    ValidationError,
)
from wiz_light_mcp.protocol.messages import Method
from wiz_light_mcp.transport.udp_connection import UDPConnection


def _reply(method: str, result: dict | None = None, error: dict | None = None) -> bytes:
    body: dict = {"method": method, "id": 1, "env": "pro"}
    if error is not None:
        body["error"] = error
    else:
        body["result"] = result if result is not None else {"success": True}
    return json.dumps(body).encode()


def _make_client(module_name: str = "ESP01_SHRGB1C_31", replies: dict | None = None):
    """Build a client whose connection answers each method from ``replies``.

    Returns the client and the mock connection; sent requests are available
    as decoded dicts through ``_sent(conn)``.
    """
    replies = dict(replies or {})
    replies.setdefault(
        "getSystemConfig",
        _reply("getSystemConfig", {"mac": "a8bb50aabbcc", "moduleName": module_name, "fwVersion": "1.22.0"}),
    )

    def exchange(payload: bytes, accept=None) -> bytes:
        method = json.loads(payload)["method"]
        return replies.get(method, _reply(method))

    conn = MagicMock()
    conn.exchange.side_effect = exchange
    return WizClient("192.168.1.20", connection=conn), conn


def _sent(conn: MagicMock) -> list[dict]:
    return [json.loads(c.args[0]) for c in conn.exchange.call_args_list]


# ─── REQUESTS ────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "call, method, params",
    [
        (lambda c: c.turn_on(), "setState", {"state": True}),
        (lambda c: c.turn_off(), "setState", {"state": False}),
        (lambda c: c.set_brightness(55), "setPilot", {"dimming": 55}),
        (lambda c: c.set_rgb(20, 30, 255), "setPilot", {"r": 20, "g": 30, "b": 255}),
        (lambda c: c.set_cold_white(255), "setPilot", {"c": 255}),
        (lambda c: c.set_warm_white(10), "setPilot", {"w": 10}),
        (lambda c: c.set_temperature(2700), "setPilot", {"temp": 2700}),
        (lambda c: c.set_speed(200), "setPilot", {"speed": 200}),
        (lambda c: c.set_ratio(1), "setPilot", {"ratio": 1}),
        (lambda c: c.pulse(), "pulse", {"delta": -100, "duration": 300}),
        (
            lambda c: c.registration("192.168.1.5", "AABBCCDDEEFF", False),
            "registration",
            {"phoneIp": "192.168.1.5", "phoneMac": "AABBCCDDEEFF", "register": False},
        ),
    ],
)
def test_command_sends_exact_params(call, method, params):
    client, conn = _make_client()
    response = call(client)
    assert response.result.success is True
    assert _sent(conn) == [{"method": method, "id": 1, "params": params}]


@pytest.mark.parametrize(
    "call, method",
    [
        (lambda c: c.get_pilot(), "getPilot"),
        (lambda c: c.get_system_config(), "getSystemConfig"),
        (lambda c: c.get_user_config(), "getUserConfig"),
        (lambda c: c.get_model_config(), "getModelConfig"),
        (lambda c: c.get_dev_info(), "getDevInfo"),
    ],
)
def test_queries_send_no_params(call, method):
    client, conn = _make_client()
    response = call(client)
    assert response.method == method
    assert _sent(conn) == [{"method": method, "id": 1}]


def test_get_pilot_state():
    client, _ = _make_client(replies={
        "getPilot": _reply("getPilot", {"state": True, "sceneId": 31, "dimming": 40, "rssi": -60}),
    })
    state = client.get_pilot_state()
    assert state.state is True
    assert state.scene == "Pulse"
    assert state.dimming == 40
    assert state.r is None


def test_call_builds_message_from_method_and_params():
    client, conn = _make_client()
    response = client.call("setPilot", {"dimming": 40})
    assert response.method == "setPilot"
    assert _sent(conn) == [{"method": "setPilot", "id": 1, "params": {"dimming": 40}}]


def test_call_without_params():
    client, conn = _make_client()
    client.call(Method.GET_DEV_INFO)
    assert _sent(conn) == [{"method": "getDevInfo", "id": 1}]


@pytest.mark.parametrize(
    "method, params",
    [
        ("getPilot", {"state": True}),
        ("setState", {"state": True, "dimming": 50}),
        ("setFoo", None),
    ],
)
def test_call_rejects_bad_request_before_sending(method, params):
    client, conn = _make_client()
    with pytest.raises(EncodingError):
        client.call(method, params)
    conn.exchange.assert_not_called()


def test_reply_predicate_matches_request_method():
    client, conn = _make_client()
    client.get_pilot()
    accept = conn.exchange.call_args.kwargs["accept"]
    assert accept(_reply("getPilot"))
    assert not accept(b'{"method":"syncPilot","params":{"state":true}}')
    # Undecodable datagrams reach the decoder so the error is reported
    assert accept(b"garbage")


# ─── VALIDATION ──────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.set_brightness(9),
        lambda c: c.set_brightness(101),
        lambda c: c.set_rgb(-1, 0, 0),
        lambda c: c.set_rgb(0, 256, 0),
        lambda c: c.set_cold_white(256),
        lambda c: c.set_warm_white(-1),
        lambda c: c.set_temperature(1999),
        lambda c: c.set_temperature(9001),
        lambda c: c.set_speed(9),
        lambda c: c.set_speed(201),
        lambda c: c.set_ratio(0),
        lambda c: c.set_ratio(101),
    ],
)
def test_out_of_range_makes_no_network_call(call):
    client, conn = _make_client()
    with pytest.raises(ValidationError):
        call(client)
    conn.exchange.assert_not_called()


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.set_brightness(10),
        lambda c: c.set_brightness(100),
        lambda c: c.set_rgb(0, 0, 0),
        lambda c: c.set_rgb(255, 255, 255),
        lambda c: c.set_temperature(2000),
        lambda c: c.set_temperature(9000),
    ],
)
def test_boundaries_are_sent(call):
    client, conn = _make_client()
    call(client)
    assert conn.exchange.call_count == 1


# ─── SCENES ──────────────────────────────────────────────────────────

def test_rgb_scene_availability_uses_one_query():
    client, conn = _make_client("ESP01_SHRGB1C_31")
    assert client.is_scene_available(31) is True
    assert conn.exchange.call_count == 1
    assert client.is_scene_available(9999) is False
    assert conn.exchange.call_count == 2
    assert [m["method"] for m in _sent(conn)] == ["getSystemConfig", "getSystemConfig"]


def test_dw_scene_availability():
    client, _ = _make_client("ESP01_DW1_01")
    assert client.is_scene_available(9) is True
    assert client.is_scene_available(17) is False


def test_unknown_device_class_fails_closed():
    client, _ = _make_client("ESP01_PLUG_01")
    assert client.is_scene_available(9) is False
    assert client.available_scenes() == {}


def test_capability_helpers():
    client, _ = _make_client("ESP01_SHTW1C_31")
    assert client.is_tw() is True
    assert client.is_rgb() is False
    assert client.is_dw() is False


def test_set_scene_sends_after_check():
    client, conn = _make_client("ESP01_SHRGB1C_31")
    client.set_scene(31)
    assert _sent(conn) == [
        {"method": "getSystemConfig", "id": 1},
        {"method": "setPilot", "id": 1, "params": {"sceneId": 31}},
    ]


def test_set_scene_not_available():
    client, conn = _make_client("ESP01_DW1_01")
    with pytest.raises(SceneNotAvailableError) as exc_info:
        client.set_scene(17)
    assert exc_info.value.scene_id == 17
    assert "17" in str(exc_info.value)
    # Only the capability query went out
    assert [m["method"] for m in _sent(conn)] == ["getSystemConfig"]


def test_capability_query_rejected_by_device():
    client, _ = _make_client(replies={
        "getSystemConfig": _reply("getSystemConfig", error={"code": -32601, "message": "Method not found"}),
    })
    with pytest.raises(DeviceTypeUndeterminedError) as exc_info:
        client.is_scene_available(9)
    assert isinstance(exc_info.value.__cause__, DeviceError)


def test_capability_query_without_module_name():
    client, _ = _make_client(replies={
        "getSystemConfig": _reply("getSystemConfig", {"mac": "a8bb50aabbcc"}),
    })
    with pytest.raises(DeviceTypeUndeterminedError):
        client.set_scene(9)


@pytest.mark.parametrize("module_name", [123, ["ESP01_SHRGB1C_31"], ""])
def test_capability_query_with_bad_module_name(module_name):
    client, conn = _make_client(replies={
        "getSystemConfig": _reply("getSystemConfig", {"moduleName": module_name}),
    })
    with pytest.raises(DeviceTypeUndeterminedError):
        client.set_scene(9)
    assert [m["method"] for m in _sent(conn)] == ["getSystemConfig"]


def test_set_rhythm_not_implemented():
    client, conn = _make_client()
    with pytest.raises(NotImplementedError):
        client.set_rhythm(1)
    conn.exchange.assert_not_called()


# ─── ERRORS ──────────────────────────────────────────────────────────

def test_device_error_reply_raises():
    client, _ = _make_client(replies={
        "setPilot": _reply("setPilot", error={"code": -32600, "message": "Invalid Request"}),
    })
    with pytest.raises(DeviceError) as exc_info:
        client.set_brightness(50)
    assert exc_info.value.code == -32600


def test_malformed_reply_raises_decoding_error():
    client, _ = _make_client(replies={"getPilot": b"{not json"})
    with pytest.raises(DecodingError):
        client.get_pilot()


def test_receive_error_propagates():
    client, conn = _make_client()
    conn.exchange.side_effect = ReceiveError("timed out", timeout=True)
    with pytest.raises(ReceiveError) as exc_info:
        client.turn_on()
    assert exc_info.value.timeout


ALL_OPERATIONS = [
    lambda c: c.get_pilot(),
    lambda c: c.get_system_config(),
    lambda c: c.get_user_config(),
    lambda c: c.get_model_config(),
    lambda c: c.get_dev_info(),
    lambda c: c.turn_on(),
    lambda c: c.turn_off(),
    lambda c: c.set_brightness(50),
    lambda c: c.set_rgb(1, 2, 3),
    lambda c: c.set_cold_white(100),
    lambda c: c.set_warm_white(100),
    lambda c: c.set_temperature(4000),
    lambda c: c.set_speed(100),
    lambda c: c.set_ratio(50),
    lambda c: c.set_scene(31),
    lambda c: c.is_scene_available(31),
    lambda c: c.pulse(),
    lambda c: c.registration("192.168.1.5", "AABBCCDDEEFF", True),
]


@pytest.mark.parametrize("call", ALL_OPERATIONS)
def test_write_failure_raises_send_error(call):
    """A failing socket write surfaces as SendError chained to the cause."""
    conn = UDPConnection("192.168.1.20")
    sock = MagicMock()
    sock.recv.side_effect = BlockingIOError()
    sock.send.side_effect = OSError("Network is unreachable")
    conn._sock = sock
    client = WizClient("192.168.1.20", connection=conn)

    with pytest.raises(SendError) as exc_info:
        call(client)

    assert isinstance(exc_info.value.__cause__, OSError)
    assert "Network is unreachable" in str(exc_info.value)
    # No reply was awaited, only the non-blocking drain read ran
    assert sock.recv.call_count == 1
    assert sock.send.call_count == 1


def test_context_manager_closes_connection():
    conn = MagicMock()
    with WizClient("192.168.1.20", connection=conn) as client:
        assert client.connection is conn
    conn.close.assert_called_once()
