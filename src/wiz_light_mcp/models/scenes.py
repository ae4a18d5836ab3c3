"""Scene catalog and per-class scene subsets.

RGB devices (RGB plus cool and warm white LEDs) support every scene.
TW devices (cool and warm white LEDs) support most static white scenes.
DW devices (dimmable white only) support a handful of dimming scenes.
"""

from __future__ import annotations

from types import MappingProxyType

RHYTHM_SCENE_ID = 1000

SCENES: MappingProxyType[int, str] = MappingProxyType({
    1: "Ocean",
    2: "Romance",
    3: "Sunset",
    4: "Party",
    5: "Fireplace",
    6: "Cozy",
    7: "Forest",
    8: "Pastel Colors",
    9: "Wake up",
    10: "Bedtime",
    11: "Warm White",
    12: "Daylight",
    13: "Cool white",
    14: "Night light",
    15: "Focus",
    16: "Relax",
    17: "True colors",
    18: "TV time",
    19: "Plantgrowth",
    20: "Spring",
    21: "Summer",
    22: "Fall",
    23: "Deepdive",
    24: "Jungle",
    25: "Mojito",
    26: "Club",
    27: "Christmas",
    28: "Halloween",
    29: "Candlelight",
    30: "Golden white",
    31: "Pulse",
    32: "Steampunk",
    33: "Diwali",
    RHYTHM_SCENE_ID: "Rhythm",
})

TW_SCENES: frozenset[int] = frozenset(
    {6, 9, 10, 11, 12, 13, 14, 15, 16, 18, 29, 30, 31, 32}
)

DW_SCENES: frozenset[int] = frozenset({9, 10, 13, 14, 29, 30, 31, 32})


def scene_name(scene_id: int) -> str | None:
    """Return the catalog name for a scene id, or None if unknown."""
    return SCENES.get(scene_id)
