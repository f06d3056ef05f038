# imconv/palette_data.py
from __future__ import annotations

"""
Preset palettes and builders.

Exports:
  PRIMARIES : the six fully saturated RGB cube corners
  GREYS     : black to white in five steps
  PRINT_8   : PRIMARIES plus black and white, for limited-colour printing
  PRESETS   : name -> hex list
  build_palette(hex_list=PRINT_8) -> Palette
  preset_palette(name) -> Palette
"""

from typing import Dict, List, Sequence

from .palette import Palette

PRIMARIES: List[str] = [
    "#ff0000",
    "#00ff00",
    "#0000ff",
    "#00ffff",
    "#ff00ff",
    "#ffff00",
]

GREYS: List[str] = ["#000000", "#404040", "#808080", "#c0c0c0", "#ffffff"]

PRINT_8: List[str] = ["#000000", *PRIMARIES, "#ffffff"]

PRESETS: Dict[str, List[str]] = {
    "primaries": PRIMARIES,
    "greys": GREYS,
    "print8": PRINT_8,
}


def build_palette(hex_list: Sequence[str] = PRINT_8) -> Palette:
    """Palette from '#rrggbb' strings, in order."""
    return Palette.from_hex(hex_list)


def preset_palette(name: str) -> Palette:
    try:
        return build_palette(PRESETS[name])
    except KeyError:
        raise ValueError(
            f"unknown palette preset {name!r} (choose from {', '.join(sorted(PRESETS))})"
        ) from None


__all__ = [
    "PRIMARIES",
    "GREYS",
    "PRINT_8",
    "PRESETS",
    "build_palette",
    "preset_palette",
]
