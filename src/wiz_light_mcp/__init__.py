"""Local-network control of WiZ smart lights over the UDP JSON protocol."""

from .client import WizClient

__version__ = "0.1.0"
__all__ = ["WizClient"]
