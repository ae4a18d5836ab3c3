"""Client configuration, read from the environment.

Variables:
    WIZ_HOST        Device IP address or hostname (required)
    WIZ_PORT        Device UDP port (default 38899)
    WIZ_TIMEOUT_MS  Reply read timeout in milliseconds (default 1000)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .transport.udp_connection import READ_TIMEOUT_MS, WIZ_PORT


@dataclass
class ClientConfig:
    """Connection settings for a single WiZ device."""

    host: str
    port: int = WIZ_PORT
    timeout_ms: int = READ_TIMEOUT_MS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a config from ``WIZ_*`` environment variables.

        Raises:
            ValueError: If WIZ_HOST is unset, or a numeric variable is not
                an integer or is out of range.
        """
        env = os.environ if environ is None else environ

        host = env.get("WIZ_HOST", "").strip()
        if not host:
            raise ValueError("WIZ_HOST is not set")

        port = _int_var(env, "WIZ_PORT", WIZ_PORT)
        if not 0 <= port <= 65535:
            raise ValueError(f"WIZ_PORT must be between 0 and 65535, got {port}")
        timeout_ms = _int_var(env, "WIZ_TIMEOUT_MS", READ_TIMEOUT_MS)
        if timeout_ms < 0:
            raise ValueError(f"WIZ_TIMEOUT_MS must not be negative, got {timeout_ms}")

        return cls(host=host, port=port, timeout_ms=timeout_ms)


def _int_var(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
