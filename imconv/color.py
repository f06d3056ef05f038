# imconv/color.py
from __future__ import annotations

"""
Colour value objects.

Exports:
  Color : three normalized channels (r, g, b) with distance and gray/colour split.
  Pixel : a Color tagged with the palette index it was last matched to.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .constants import UNASSIGNED_INDEX
from .core_types import RGBArray, RGBTuple, clamp_value


@dataclass
class Color:
    """Normalized RGB colour. Channels are not clamped implicitly."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    @classmethod
    def from_array(cls, values: Sequence[float] | np.ndarray) -> "Color":
        return cls(float(values[0]), float(values[1]), float(values[2]))

    @classmethod
    def from_u8(cls, r: int, g: int, b: int) -> "Color":
        """Build from 0..255 channel bytes."""
        return cls(r / 255.0, g / 255.0, b / 255.0)

    def set(self, r: float, g: float, b: float) -> None:
        self.r = float(r)
        self.g = float(g)
        self.b = float(b)

    def from_color(self, color: "Color") -> None:
        """Copy the channels of another colour into this one."""
        self.set(color.r, color.g, color.b)

    def from_pixel(self, pixel: "Pixel") -> None:
        """Copy the channels of a pixel into this colour; the palette index is not copied."""
        self.set(pixel.r, pixel.g, pixel.b)

    def copy(self) -> "Color":
        return Color(self.r, self.g, self.b)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def as_array(self) -> RGBArray:
        return np.array([self.r, self.g, self.b], dtype=np.float64)

    def to_u8(self) -> RGBTuple:
        """Channels as truncated 0..255 ints, matching the pixel-map writer."""
        return (
            int(clamp_value(self.r * 255.0, 0.0, 255.0)),
            int(clamp_value(self.g * 255.0, 0.0, 255.0)),
            int(clamp_value(self.b * 255.0, 0.0, 255.0)),
        )

    @property
    def is_gray(self) -> bool:
        """True when all three channels are exactly equal."""
        return self.r == self.g == self.b

    def distance_from_color(self, other: "Color") -> float:
        """
        Squared Euclidean distance across the three channels.

        No square root is taken, so this ranks colours but is not a metric.
        """
        dr = other.r - self.r
        dg = other.g - self.g
        db = other.b - self.b
        return dr * dr + dg * dg + db * db

    def get_gray_and_color_components(self) -> Tuple["Color", "Color"]:
        """
        Split into (gray, color).

        gray  : the channel minimum replicated into all three channels
        color : each channel minus that minimum (at least one channel is 0)
        """
        floor = min(self.r, self.g, self.b)
        gray = Color(floor, floor, floor)
        residual = Color(self.r - floor, self.g - floor, self.b - floor)
        return gray, residual


@dataclass
class Pixel(Color):
    """A Color plus the palette index assigned by quantization."""

    palette_index: int = UNASSIGNED_INDEX

    def copy(self) -> "Pixel":
        return Pixel(self.r, self.g, self.b, self.palette_index)

    @property
    def is_assigned(self) -> bool:
        return self.palette_index != UNASSIGNED_INDEX


__all__ = ["Color", "Pixel"]
