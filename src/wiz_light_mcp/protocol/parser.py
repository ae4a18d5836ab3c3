"""Typed views of query replies."""

from __future__ import annotations

from ..models.pilot import PilotState
from ..models.system import SystemConfig
from .messages import Method, WizResponse


def parse_pilot(response: WizResponse) -> PilotState | None:
    """Parse a getPilot reply into a PilotState."""
    if response.method != Method.GET_PILOT or response.result is None:
        return None

    res = response.result
    return PilotState(
        state=res.state,
        dimming=res.dimming,
        scene_id=res.scene_id,
        r=res.r,
        g=res.g,
        b=res.b,
        c=res.c,
        w=res.w,
        temp=res.temp,
        speed=res.speed,
        ratio=res.ratio,
        rssi=res.rssi,
        mac=res.mac,
    )


def parse_system_config(response: WizResponse) -> SystemConfig | None:
    """Parse a getSystemConfig reply into a SystemConfig."""
    if response.method != Method.GET_SYSTEM_CONFIG or response.result is None:
        return None

    res = response.result
    return SystemConfig(
        mac=res.mac,
        module_name=res.module_name,
        fw_version=res.fw_version,
        home_id=res.home_id,
        room_id=res.room_id,
        group_id=res.group_id,
        rgn=res.rgn,
        ping=res.ping,
        drv_conf=res.drv_conf,
    )
