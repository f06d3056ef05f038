# imconv/palette.py
from __future__ import annotations

"""
Fixed-size palette of normalized colours with nearest-match search.

Exports:
  Palette
"""

from typing import Sequence

import numpy as np

from .analysis import nearest_palette_indices
from .color import Color
from .constants import UNASSIGNED_INDEX
from .core_types import (
    ByteSource,
    PaletteMatch,
    RGBArray,
    as_byte_buffer,
    hex_list_to_u8_rgb_array,
)


class Palette:
    """
    Ordered colour table owned as a (N, 3) float64 array.

    Index access is bounds checked; negative indices are not wrapped.
    """

    def __init__(self, num_colors: int = 0) -> None:
        self._colors: RGBArray = np.zeros((0, 3), dtype=np.float64)
        self.set_num_colors(num_colors)

    # Construction

    @classmethod
    def from_bytes(cls, data: ByteSource, num_colors: int) -> "Palette":
        """Three bytes per colour (r, g, b), each divided by 255."""
        buf = as_byte_buffer(data)
        need = int(num_colors) * 3
        if buf.size < need:
            raise ValueError(
                f"palette buffer holds {buf.size} bytes, need {need} for {num_colors} colours"
            )
        pal = cls(num_colors)
        pal._colors = buf[:need].reshape(-1, 3).astype(np.float64) / 255.0
        return pal

    @classmethod
    def from_hex(cls, hex_list: Sequence[str]) -> "Palette":
        rgb_u8 = hex_list_to_u8_rgb_array(hex_list)
        return cls.from_bytes(rgb_u8, rgb_u8.shape[0])

    @classmethod
    def from_palette(cls, other: "Palette") -> "Palette":
        """Deep copy of every entry."""
        pal = cls(0)
        pal._colors = other._colors.copy()
        return pal

    def copy(self) -> "Palette":
        return Palette.from_palette(self)

    # Size / entries

    @property
    def num_colors(self) -> int:
        return int(self._colors.shape[0])

    def __len__(self) -> int:
        return self.num_colors

    def set_num_colors(self, num_colors: int) -> None:
        """Discard all entries and allocate num_colors zeroed colours."""
        if num_colors < 0:
            raise ValueError(f"num_colors must be >= 0 (got {num_colors})")
        self._colors = np.zeros((int(num_colors), 3), dtype=np.float64)

    def _check_index(self, index: int) -> int:
        if not 0 <= index < self.num_colors:
            raise IndexError(
                f"palette index {index} out of range [0, {self.num_colors})"
            )
        return int(index)

    def color_at_index(self, index: int) -> Color:
        return Color.from_array(self._colors[self._check_index(index)])

    def set_color_at_index(self, color: Color, index: int) -> None:
        self._colors[self._check_index(index)] = (color.r, color.g, color.b)

    def colors(self) -> RGBArray:
        """Copy of the (N, 3) entry table."""
        return self._colors.copy()

    def to_u8(self) -> np.ndarray:
        return np.clip(self._colors * 255.0, 0.0, 255.0).astype(np.uint8)

    def gray_indices(self) -> np.ndarray:
        """Indices of entries whose three channels are exactly equal."""
        c = self._colors
        return np.nonzero((c[:, 0] == c[:, 1]) & (c[:, 0] == c[:, 2]))[0]

    # Matching

    def get_closest_color_to(
        self,
        color: Color,
        include_grayscale: bool = True,
        exclude_index: int = UNASSIGNED_INDEX,
    ) -> PaletteMatch:
        """
        Nearest entry by squared RGB distance.

        include_grayscale=False skips exact-gray entries; exclude_index is
        always skipped. The first entry with the minimum distance wins.
        Returns PaletteMatch(-1, None) when nothing is eligible.
        """
        idx = int(
            nearest_palette_indices(
                color.as_array(), self._colors, include_grayscale, exclude_index
            )
        )
        if idx == UNASSIGNED_INDEX:
            return PaletteMatch(index=UNASSIGNED_INDEX, color=None)
        return PaletteMatch(index=idx, color=self.color_at_index(idx))

    def closest_indices(
        self,
        rgb: RGBArray,
        include_grayscale: bool = True,
        exclude_index: int = UNASSIGNED_INDEX,
    ) -> np.ndarray:
        """Vectorized get_closest_color_to over (..., 3) rows; -1 where nothing is eligible."""
        return nearest_palette_indices(
            np.asarray(rgb, dtype=np.float64),
            self._colors,
            include_grayscale,
            exclude_index,
        )

    def __repr__(self) -> str:
        return f"Palette(num_colors={self.num_colors})"


__all__ = ["Palette"]
