"""MCP server entry point for a WiZ smart light.

Exposes the client operations as tools and the scene catalog as resources
via the Model Context Protocol, using the official Python MCP SDK with
stdio transport.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import WizClient
from .config import ClientConfig
from .exceptions import WizError
from .models.scenes import SCENES
from .protocol.messages import WizResponse

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "wiz-light",
    instructions="MCP server for controlling a WiZ smart light on the local network",
)

# Global connection state
_client: WizClient | None = None


def _get_client() -> WizClient:
    """Get the active client, raising if not connected."""
    if _client is None or not _client.connection.connected:
        raise RuntimeError(
            "Not connected to a light. Use the 'connect' tool first."
        )
    return _client


def _reply(response: WizResponse) -> dict[str, Any]:
    return response.to_dict()


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(host: str | None = None, port: int | None = None) -> dict[str, Any]:
    """Open a UDP connection to a WiZ light.

    Defaults come from the WIZ_HOST, WIZ_PORT and WIZ_TIMEOUT_MS
    environment variables.

    Args:
        host: Light IP address or hostname.
        port: Light UDP port (default 38899).
    """
    global _client
    if _client is not None and _client.connection.connected:
        host_, port_ = _client.connection.address
        return {"connected": True, "message": "Already connected", "host": host_, "port": port_}

    env = dict(os.environ)
    if host is not None:
        env["WIZ_HOST"] = host
    config = ClientConfig.from_env(env)
    if port is not None:
        config.port = port

    client = WizClient.from_config(config)
    try:
        system = client.get_system_config_model()
    except WizError:
        client.close()
        raise
    _client = client
    logger.info("Connected to %s (%s, fw %s)", config.host, system.module_name, system.fw_version)

    result: dict[str, Any] = {"connected": True, "host": config.host, "port": config.port}
    result["module_name"] = system.module_name
    result["fw_version"] = system.fw_version
    return result


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the connection to the light."""
    global _client
    if _client is None:
        return {"disconnected": True}
    _client.close()
    _client = None
    return {"disconnected": True}


# ─── QUERY TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def get_pilot() -> dict[str, Any]:
    """Read the current light state: power, colour, brightness, scene."""
    return _get_client().get_pilot_state().to_dict()


@mcp.tool()
def get_system_config() -> dict[str, Any]:
    """Read the system configuration: module name, firmware, home/room ids."""
    return _get_client().get_system_config_model().to_dict()


@mcp.tool()
def get_user_config() -> dict[str, Any]:
    """Read the user configuration: fade times, default dimming, etc."""
    return _reply(_get_client().get_user_config())


@mcp.tool()
def get_model_config() -> dict[str, Any]:
    """Read the model configuration: PWM settings, white temperature ranges."""
    return _reply(_get_client().get_model_config())


@mcp.tool()
def get_device_info() -> dict[str, Any]:
    """Read device identification (MAC address)."""
    return _reply(_get_client().get_dev_info())


@mcp.tool()
def get_capabilities() -> dict[str, Any]:
    """Report the device class (RGB, tunable white, dimmable white)."""
    caps = _get_client().get_capabilities()
    return {"capabilities": caps.to_dict(), "scene_count": len(caps.scenes())}


# ─── LIGHT CONTROL TOOLS ──────────────────────────────────────────────

@mcp.tool()
def turn_on() -> dict[str, Any]:
    """Switch the light on."""
    return _reply(_get_client().turn_on())


@mcp.tool()
def turn_off() -> dict[str, Any]:
    """Switch the light off."""
    return _reply(_get_client().turn_off())


@mcp.tool()
def set_brightness(brightness: int) -> dict[str, Any]:
    """Set the brightness.

    Args:
        brightness: Dimming level 10-100.
    """
    return _reply(_get_client().set_brightness(brightness))


@mcp.tool()
def set_rgb(r: int, g: int, b: int) -> dict[str, Any]:
    """Set the light colour.

    Args:
        r: Red 0-255.
        g: Green 0-255.
        b: Blue 0-255.
    """
    return _reply(_get_client().set_rgb(r, g, b))


@mcp.tool()
def set_cold_white(value: int) -> dict[str, Any]:
    """Set the cold white LED level (0-255)."""
    return _reply(_get_client().set_cold_white(value))


@mcp.tool()
def set_warm_white(value: int) -> dict[str, Any]:
    """Set the warm white LED level (0-255)."""
    return _reply(_get_client().set_warm_white(value))


@mcp.tool()
def set_temperature(kelvin: int) -> dict[str, Any]:
    """Set the white colour temperature.

    Args:
        kelvin: 2000-9000.
    """
    return _reply(_get_client().set_temperature(kelvin))


@mcp.tool()
def set_speed(speed: int) -> dict[str, Any]:
    """Set the colour-change speed of the active scene (10-200)."""
    return _reply(_get_client().set_speed(speed))


@mcp.tool()
def set_ratio(ratio: int) -> dict[str, Any]:
    """Set the ratio between up and down light (1-100)."""
    return _reply(_get_client().set_ratio(ratio))


@mcp.tool()
def set_scene(scene_id: int) -> dict[str, Any]:
    """Activate a scene by id.

    The scene must be supported by the light's device class; see the
    wiz://scenes/available resource.

    Args:
        scene_id: Scene id from the catalog (1-33).
    """
    result = _reply(_get_client().set_scene(scene_id))
    result["scene"] = SCENES.get(scene_id)
    return result


@mcp.tool()
def pulse() -> dict[str, Any]:
    """Briefly dip the brightness to locate the light."""
    return _reply(_get_client().pulse())


@mcp.tool()
def registration(phone_ip: str, phone_mac: str, register: bool = True) -> dict[str, Any]:
    """Register (or unregister) for syncPilot heartbeat pushes.

    Args:
        phone_ip: Address the light should push to.
        phone_mac: MAC address identifying the registrant.
        register: False to unregister.
    """
    return _reply(_get_client().registration(phone_ip, phone_mac, register))


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("wiz://scenes")
def resource_scenes() -> str:
    """Full scene catalog."""
    return json.dumps({"scenes": {str(k): v for k, v in SCENES.items()}})


@mcp.resource("wiz://scenes/available")
def resource_available_scenes() -> str:
    """Scenes supported by the connected light."""
    scenes = _get_client().available_scenes()
    return json.dumps({"scenes": {str(k): v for k, v in scenes.items()}})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=os.environ.get("WIZ_LOG_LEVEL", "INFO").upper())
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
