"""Data models for light state, system config and the scene catalog."""

from .pilot import PilotState
from .scenes import DW_SCENES, SCENES, TW_SCENES
from .system import DeviceCapabilities, SystemConfig
