# imconv/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, errors, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from .color import Color

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str
ChannelOrder = Tuple[int, int, int]

U8Image = NDArray[np.uint8]  # (H, W, 3)
U8Plane = NDArray[np.uint8]  # (H, W)
RGBArray = NDArray[np.float64]  # (..., 3) normalized 0..1
IndexGrid = NDArray[np.int32]  # (H, W) palette indices
ByteSource = Union[bytes, bytearray, memoryview, np.ndarray]

# Errors


class DimensionMismatchError(ValueError):
    """Two images (or an image and a region) do not have compatible sizes."""


class PPMFormatError(ValueError):
    """Malformed or truncated binary pixel-map data."""


# Value objects


@dataclass(frozen=True)
class ColorRank:
    """One row of a histogram ranking: a palette index and its pixel count."""

    palette_index: int
    num_pixels: int


@dataclass(frozen=True)
class PaletteMatch:
    """
    Result of a nearest-colour search.

    index is -1 and color is None when no palette entry was eligible.
    """

    index: int
    color: Optional["Color"]

    @property
    def found(self) -> bool:
        return self.index >= 0


# Small helpers


def clamp_value(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi]."""
    return lo if value < lo else hi if value > hi else value


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        raise ValueError("hex must start with '#'")
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def hex_list_to_u8_rgb_array(hex_list: Sequence[str]) -> NDArray[np.uint8]:
    """
    Convert a sequence of hex strings ('#rrggbb' or 'rrggbb') to a (N,3) uint8 array.
    Uses hex_to_rgb for a single source of truth.
    """
    out = np.empty((len(hex_list), 3), dtype=np.uint8)
    for i, hx in enumerate(hex_list):
        out[i] = hex_to_rgb(hx if hx.startswith("#") else f"#{hx}")
    return out


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 3:
        raise TypeError("expected uint8 (H,W,3) image")
    return image


def as_byte_buffer(data: ByteSource) -> NDArray[np.uint8]:
    """
    Flat uint8 view of a raw byte source.
    numpy arrays must already be uint8; their values are never reinterpreted.
    """
    if isinstance(data, np.ndarray):
        if data.dtype != np.uint8:
            raise TypeError(f"expected uint8 buffer, got {data.dtype}")
        return data.reshape(-1)
    return np.frombuffer(data, dtype=np.uint8)


def assert_u8_plane(plane: np.ndarray) -> U8Plane:
    """Validate a uint8 (H,W) plane and return it typed as U8Plane."""
    if plane.dtype != np.uint8 or plane.ndim != 2:
        raise TypeError("expected uint8 (H,W) plane")
    return plane


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "ChannelOrder",
    "U8Image",
    "U8Plane",
    "RGBArray",
    "IndexGrid",
    "ByteSource",
    # errors
    "DimensionMismatchError",
    "PPMFormatError",
    # value objects
    "ColorRank",
    "PaletteMatch",
    # helpers
    "clamp_value",
    "rgb_to_hex",
    "hex_to_rgb",
    "hex_list_to_u8_rgb_array",
    "assert_u8_image_rgb",
    "assert_u8_plane",
    "as_byte_buffer",
]
