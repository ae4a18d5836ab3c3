"""System configuration model and the device class derived from it."""

from __future__ import annotations

from dataclasses import dataclass

from .scenes import DW_SCENES, SCENES, TW_SCENES


@dataclass(frozen=True)
class DeviceCapabilities:
    """Device hardware class, derived from the module name.

    The three checks are independent substring tests, so in principle more
    than one flag can be set.
    """

    is_rgb: bool = False
    is_tw: bool = False
    is_dw: bool = False

    @classmethod
    def from_module_name(cls, module_name: str) -> DeviceCapabilities:
        return cls(
            is_rgb="RGB" in module_name,
            is_tw="TW" in module_name,
            is_dw="DW" in module_name,
        )

    def supports_scene(self, scene_id: int) -> bool:
        """Return True if any of the device's classes allows the scene.

        A device matching no class supports no scene.
        """
        return (
            (self.is_rgb and scene_id in SCENES)
            or (self.is_tw and scene_id in TW_SCENES)
            or (self.is_dw and scene_id in DW_SCENES)
        )

    def scenes(self) -> dict[int, str]:
        """Return the scenes this device supports, by id."""
        return {
            scene_id: name
            for scene_id, name in SCENES.items()
            if self.supports_scene(scene_id)
        }

    def to_dict(self) -> dict:
        return {"rgb": self.is_rgb, "tw": self.is_tw, "dw": self.is_dw}


@dataclass
class SystemConfig:
    """Fields of a getSystemConfig reply."""

    mac: str | None = None
    module_name: str | None = None
    fw_version: str | None = None
    home_id: int | None = None
    room_id: int | None = None
    group_id: int | None = None
    rgn: str | None = None
    ping: int | None = None
    drv_conf: list[int] | None = None

    @property
    def capabilities(self) -> DeviceCapabilities:
        name = self.module_name if isinstance(self.module_name, str) else ""
        return DeviceCapabilities.from_module_name(name)

    def to_dict(self) -> dict:
        return {
            "mac": self.mac,
            "module_name": self.module_name,
            "fw_version": self.fw_version,
            "home_id": self.home_id,
            "room_id": self.room_id,
            "group_id": self.group_id,
            "region": self.rgn,
            "capabilities": self.capabilities.to_dict(),
        }
