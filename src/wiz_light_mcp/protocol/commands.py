"""High-level request builders.

Each builder validates its arguments before building a message and sends
exactly the params its operation needs.
"""

from __future__ import annotations

from ..exceptions import ValidationError
from .messages import Method, WizMessage

BRIGHTNESS_RANGE = (10, 100)
LED_RANGE = (0, 255)
TEMPERATURE_RANGE = (2000, 9000)
SPEED_RANGE = (10, 200)
RATIO_RANGE = (1, 100)

PULSE_DELTA = -100
PULSE_DURATION_MS = 300


def _check_range(name: str, value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    # bool is an int subclass but never a valid level
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if not low <= value <= high:
        raise ValidationError(f"{name} must be between {low} and {high}, got {value}")
    return value


def build_query(method: Method) -> WizMessage:
    """Build a parameterless query (getPilot, getSystemConfig, ...)."""
    return WizMessage(Method(method))


def build_set_state(on: bool) -> WizMessage:
    """Build a setState command to switch the light on or off."""
    return WizMessage(Method.SET_STATE, {"state": bool(on)})


def build_set_brightness(brightness: int) -> WizMessage:
    """Build a setPilot command changing the brightness.

    Args:
        brightness: Dimming level 10-100.
    """
    _check_range("brightness", brightness, BRIGHTNESS_RANGE)
    return WizMessage(Method.SET_PILOT, {"dimming": brightness})


def build_set_rgb(r: int, g: int, b: int) -> WizMessage:
    """Build a setPilot command setting the RGB colour (each 0-255)."""
    _check_range("r", r, LED_RANGE)
    _check_range("g", g, LED_RANGE)
    _check_range("b", b, LED_RANGE)
    return WizMessage(Method.SET_PILOT, {"r": r, "g": g, "b": b})


def build_set_cold_white(value: int) -> WizMessage:
    """Build a setPilot command for the cold white LEDs (0-255)."""
    _check_range("cold white", value, LED_RANGE)
    return WizMessage(Method.SET_PILOT, {"c": value})


def build_set_warm_white(value: int) -> WizMessage:
    """Build a setPilot command for the warm white LEDs (0-255)."""
    _check_range("warm white", value, LED_RANGE)
    return WizMessage(Method.SET_PILOT, {"w": value})


def build_set_temperature(kelvin: int) -> WizMessage:
    """Build a setPilot command setting colour temperature.

    Args:
        kelvin: Colour temperature 2000-9000 K.
    """
    _check_range("temperature", kelvin, TEMPERATURE_RANGE)
    return WizMessage(Method.SET_PILOT, {"temp": kelvin})


def build_set_speed(speed: int) -> WizMessage:
    """Build a setPilot command setting the scene effect speed (10-200)."""
    _check_range("speed", speed, SPEED_RANGE)
    return WizMessage(Method.SET_PILOT, {"speed": speed})


def build_set_ratio(ratio: int) -> WizMessage:
    """Build a setPilot command setting the up/down light ratio (1-100)."""
    _check_range("ratio", ratio, RATIO_RANGE)
    return WizMessage(Method.SET_PILOT, {"ratio": ratio})


def build_set_scene(scene_id: int) -> WizMessage:
    """Build a setPilot command selecting a scene.

    Availability for the device class is checked by the client, not here.
    """
    if isinstance(scene_id, bool) or not isinstance(scene_id, int):
        raise ValidationError(f"scene id must be an integer, got {scene_id!r}")
    return WizMessage(Method.SET_PILOT, {"sceneId": scene_id})


def build_pulse() -> WizMessage:
    """Build a pulse command: a short brightness dip to locate the bulb."""
    return WizMessage(
        Method.PULSE,
        {"delta": PULSE_DELTA, "duration": PULSE_DURATION_MS},
    )


def build_registration(phone_ip: str, phone_mac: str, register: bool) -> WizMessage:
    """Build a registration command.

    Registering asks the device to push ``syncPilot`` heartbeats to
    ``phone_ip`` on UDP port 38900.
    """
    return WizMessage(
        Method.REGISTRATION,
        {"phoneIp": phone_ip, "phoneMac": phone_mac, "register": bool(register)},
    )
