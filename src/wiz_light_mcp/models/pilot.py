"""Light state model, from a getPilot reply."""

from __future__ import annotations

from dataclasses import dataclass, asdict

from .scenes import scene_name


@dataclass
class PilotState:
    """Current light state. Fields the device did not report are None."""

    state: bool | None = None
    dimming: int | None = None
    scene_id: int | None = None
    r: int | None = None
    g: int | None = None
    b: int | None = None
    c: int | None = None
    w: int | None = None
    temp: int | None = None
    speed: int | None = None
    ratio: int | None = None
    rssi: int | None = None
    mac: str | None = None

    @property
    def scene(self) -> str | None:
        # sceneId 0 means no scene is active
        if not self.scene_id:
            return None
        return scene_name(self.scene_id)

    def to_dict(self) -> dict:
        d = {k: v for k, v in asdict(self).items() if v is not None}
        if self.scene is not None:
            d["scene"] = self.scene
        return d
