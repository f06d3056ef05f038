# imconv/image.py
from __future__ import annotations

"""
Image: an owned (H, W) grid of normalized RGB pixels plus palette indices.

Construction is split into an initializing step (zeros, raw bytes, copy,
resample, crop) and the separately named saturation-boost transform.
The ingestion helpers (from_bytes, from_ppm, open) run both.

Analysis delegates to imconv.analysis; file formats to imconv.image_io.
"""

import math
from pathlib import Path
from typing import List, Optional

import numpy as np

from .analysis import (
    apply_saturation_boost,
    average_color,
    normalize_u8,
    perceptual_error,
    rank_palette_indices,
    secondary_color,
)
from .color import Color, Pixel
from .constants import BGR_ORDER, DEFAULT_BOOST, RGB_ORDER, UNASSIGNED_INDEX
from .core_types import (
    ByteSource,
    ChannelOrder,
    ColorRank,
    DimensionMismatchError,
    IndexGrid,
    RGBArray,
    U8Image,
    as_byte_buffer,
    assert_u8_image_rgb,
)
from .image_io import (
    PathOrFile,
    load_image_rgb,
    quantize_to_u8,
    read_ppm,
    save_png,
    write_ppm,
    write_raw_mono,
)
from .palette import Palette
from .utils import print_config_line, warn


class Image:
    """
    Row-major pixel grid, origin top-left.

    Holds float64 RGB (height, width, 3) and int32 palette indices
    (height, width). Every cross-image operation copies values.
    """

    def __init__(self, width: int = 0, height: int = 0) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"image size must be >= 0 (got {width}x{height})")
        self._rgb: RGBArray = np.zeros((int(height), int(width), 3), dtype=np.float64)
        self._indices: IndexGrid = np.full(
            (int(height), int(width)), UNASSIGNED_INDEX, dtype=np.int32
        )

    # Construction

    @classmethod
    def _from_rgb(cls, rgb: RGBArray) -> "Image":
        im = cls(rgb.shape[1], rgb.shape[0])
        im._rgb[...] = rgb
        return im

    @classmethod
    def from_raw(
        cls,
        width: int,
        height: int,
        data: ByteSource,
        bytes_per_row: Optional[int] = None,
        bytes_per_pixel: int = 3,
        channel_order: ChannelOrder = RGB_ORDER,
    ) -> "Image":
        """
        Normalize a strided byte buffer into a new image without boosting.

        channel_order gives the byte offsets of red, green and blue inside
        each pixel.
        """
        if len(channel_order) != 3 or not all(
            0 <= c < bytes_per_pixel for c in channel_order
        ):
            raise ValueError(
                f"channel_order {tuple(channel_order)} invalid for {bytes_per_pixel} bytes per pixel"
            )
        if bytes_per_row is None:
            bytes_per_row = width * bytes_per_pixel

        im = cls(width, height)
        if width == 0 or height == 0:
            return im

        buf = as_byte_buffer(data)
        need = (height - 1) * bytes_per_row + (width - 1) * bytes_per_pixel + max(channel_order) + 1
        if buf.size < need:
            raise DimensionMismatchError(
                f"buffer holds {buf.size} bytes, {width}x{height} layout needs {need}"
            )

        rows = np.arange(height, dtype=np.int64)[:, None] * bytes_per_row
        cols = np.arange(width, dtype=np.int64)[None, :] * bytes_per_pixel
        offsets = (rows + cols)[..., None] + np.asarray(channel_order, dtype=np.int64)
        im._rgb[...] = normalize_u8(buf[offsets])
        return im

    @classmethod
    def from_bytes(
        cls,
        width: int,
        height: int,
        data: ByteSource,
        bytes_per_row: Optional[int] = None,
        bytes_per_pixel: int = 3,
        channel_order: ChannelOrder = RGB_ORDER,
        boost: float = DEFAULT_BOOST,
    ) -> "Image":
        """Ingest raw bytes: from_raw() followed by apply_boost()."""
        im = cls.from_raw(
            width, height, data, bytes_per_row, bytes_per_pixel, channel_order
        )
        im.apply_boost(boost)
        return im

    @classmethod
    def from_bgr_bytes(
        cls,
        width: int,
        height: int,
        bytes_per_row: int,
        bytes_per_pixel: int,
        data: ByteSource,
        boost: float = DEFAULT_BOOST,
    ) -> "Image":
        """Ingest a strided buffer stored blue, green, red (e.g. BGRA frame buffers)."""
        return cls.from_bytes(
            width, height, data, bytes_per_row, bytes_per_pixel, BGR_ORDER, boost
        )

    @classmethod
    def from_u8(cls, rgb_u8: U8Image, boost: float = DEFAULT_BOOST) -> "Image":
        """Ingest a uint8 (H,W,3) array."""
        im = cls._from_rgb(normalize_u8(assert_u8_image_rgb(rgb_u8)))
        im.apply_boost(boost)
        return im

    @classmethod
    def from_image(cls, other: "Image") -> "Image":
        """Verbatim copy of the colour grid. Palette indices start unassigned."""
        return cls._from_rgb(other._rgb)

    def copy(self) -> "Image":
        return Image.from_image(self)

    @classmethod
    def from_resampled(cls, src: "Image", width: int, height: int) -> "Image":
        """
        Nearest-neighbour stretch or shrink of src to width x height.
        Destination (x, y) samples floor(x * src_w / width), floor(y * src_h / height).
        """
        im = cls(width, height)
        if width == 0 or height == 0:
            return im
        if src.width == 0 or src.height == 0:
            raise DimensionMismatchError(
                f"cannot resample an empty {src.width}x{src.height} image to {width}x{height}"
            )
        x_scale = src.width / width
        y_scale = src.height / height
        xs = np.array([math.floor(x * x_scale) for x in range(width)], dtype=np.int64)
        ys = np.array([math.floor(y * y_scale) for y in range(height)], dtype=np.int64)
        xs = np.minimum(xs, src.width - 1)
        ys = np.minimum(ys, src.height - 1)
        im._rgb[...] = src._rgb[ys[:, None], xs[None, :]]
        return im

    def resampled(self, width: int, height: int) -> "Image":
        return Image.from_resampled(self, width, height)

    def _check_region(self, x: int, y: int, width: int, height: int) -> None:
        if (
            width < 0
            or height < 0
            or x < 0
            or y < 0
            or x + width > self.width
            or y + height > self.height
        ):
            raise DimensionMismatchError(
                f"region {width}x{height}+{x}+{y} outside {self.width}x{self.height} image"
            )

    @classmethod
    def from_sub_image(
        cls, src: "Image", x: int, y: int, width: int, height: int
    ) -> "Image":
        """Copy the width x height region of src whose top-left corner is (x, y)."""
        src._check_region(x, y, width, height)
        return cls._from_rgb(src._rgb[y : y + height, x : x + width])

    def cropped(self, x: int, y: int, width: int, height: int) -> "Image":
        return Image.from_sub_image(self, x, y, width, height)

    def copy_from_image_at_position(self, src: "Image", x: int, y: int) -> None:
        """Paste src so that its top-left pixel lands on (x, y)."""
        self._check_region(x, y, src.width, src.height)
        self._rgb[y : y + src.height, x : x + src.width] = src._rgb

    @classmethod
    def from_ppm(
        cls, source: PathOrFile, boost: float = DEFAULT_BOOST, debug: bool = False
    ) -> "Image":
        """Decode a P6 pixel map (path or binary file) and ingest it."""
        rgb_u8 = read_ppm(source)
        if debug:
            print_config_line(
                "ppm",
                [
                    ("Loaded", f"{rgb_u8.shape[1]}x{rgb_u8.shape[0]}"),
                    ("Boost", float(boost)),
                ],
                debug=True,
            )
        return cls.from_u8(rgb_u8, boost)

    @classmethod
    def open(
        cls, path: Path, boost: float = DEFAULT_BOOST, debug: bool = False
    ) -> "Image":
        """Decode any Pillow-readable image file and ingest it."""
        rgb_u8 = load_image_rgb(Path(path))
        if debug:
            print_config_line(
                "open",
                [
                    ("Opened", Path(path).name),
                    ("Size", f"{rgb_u8.shape[1]}x{rgb_u8.shape[0]}"),
                    ("Boost", float(boost)),
                ],
                debug=True,
            )
        return cls.from_u8(rgb_u8, boost)

    # Transforms

    def apply_boost(self, boost: float = DEFAULT_BOOST) -> None:
        """Saturation boost in place; see analysis.apply_saturation_boost."""
        self._rgb = apply_saturation_boost(self._rgb, boost)

    # Accessors

    @property
    def width(self) -> int:
        return int(self._rgb.shape[1])

    @property
    def height(self) -> int:
        return int(self._rgb.shape[0])

    @property
    def size(self) -> int:
        return self.width * self.height

    @property
    def rgb(self) -> RGBArray:
        """Copy of the (H, W, 3) colour grid."""
        return self._rgb.copy()

    @property
    def palette_indices(self) -> IndexGrid:
        """Copy of the (H, W) palette index grid."""
        return self._indices.copy()

    def pixel_at(self, x: int, y: int) -> Optional[Pixel]:
        """Pixel value at (x, y), or None outside the grid."""
        if 0 <= x < self.width and 0 <= y < self.height:
            r, g, b = self._rgb[y, x]
            return Pixel(float(r), float(g), float(b), int(self._indices[y, x]))
        return None

    def set_pixel(
        self, x: int, y: int, color: Color, palette_index: Optional[int] = None
    ) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        self._rgb[y, x] = (color.r, color.g, color.b)
        if palette_index is None and isinstance(color, Pixel):
            palette_index = color.palette_index
        if palette_index is not None:
            self._indices[y, x] = palette_index

    def to_u8(self) -> U8Image:
        return quantize_to_u8(self._rgb)

    # Quantization

    def assign_palette(
        self,
        palette: Palette,
        include_grayscale: bool = True,
        exclude_index: int = UNASSIGNED_INDEX,
        recolor: bool = False,
        debug: bool = False,
    ) -> IndexGrid:
        """
        Record the nearest palette index for every pixel.

        With recolor=True matched pixels also take the palette colour.
        Pixels with no eligible entry get -1 and keep their colour.
        """
        indices = palette.closest_indices(self._rgb, include_grayscale, exclude_index)
        self._indices = indices.astype(np.int32, copy=False)
        if recolor:
            matched = indices >= 0
            self._rgb[matched] = palette.colors()[indices[matched]]
        unmatched = int(np.count_nonzero(indices < 0))
        if unmatched:
            warn(f"{unmatched:,} pixel(s) had no eligible palette entry")
        if debug:
            print_config_line(
                "palette",
                [
                    ("Palette size", palette.num_colors),
                    ("Greys", include_grayscale),
                    ("Excluded", int(exclude_index)),
                    ("Unmatched", unmatched),
                ],
                debug=True,
            )
        return self.palette_indices

    # Analysis

    def get_avg_color(self) -> Color:
        return Color.from_array(average_color(self._rgb))

    def get_secondary_color(
        self, first_color: Color, use_color_vector: bool = False, debug: bool = False
    ) -> Color:
        """
        Centroid of the half of the pixels least similar to first_color.

        The per-pixel error is always squared raw RGB distance from
        first_color. use_color_vector only selects whether the reference is
        reported as its chromatic residual.
        """
        if debug:
            reference = (
                first_color.get_gray_and_color_components()[1]
                if use_color_vector
                else first_color
            )
            print_config_line(
                "secondary",
                [
                    ("Reference", str(reference.to_u8())),
                    ("Color vector", use_color_vector),
                    ("Pixels", self.size),
                ],
                debug=True,
            )
        return Color.from_array(secondary_color(self._rgb, first_color.as_array()))

    def color_histogram(self) -> List[ColorRank]:
        """Palette indices ranked by descending pixel count (ties: lower index first)."""
        return rank_palette_indices(self._indices)

    def get_error_from_image(self, other: "Image") -> float:
        """Perceptual gray/colour error against an image of identical size."""
        if (self.width, self.height) != (other.width, other.height):
            raise DimensionMismatchError(
                f"image sizes differ: {self.width}x{self.height} vs {other.width}x{other.height}"
            )
        return perceptual_error(self._rgb, other._rgb)

    # Output

    def write_ppm(self, target: PathOrFile) -> None:
        write_ppm(target, self.to_u8())

    def write_raw_mono(self, target: PathOrFile) -> None:
        """Headerless dump of the red channel, one byte per pixel."""
        write_raw_mono(target, np.ascontiguousarray(self.to_u8()[..., 0]))

    def save_png(self, path: Path) -> Path:
        return save_png(path, self.to_u8())

    def __repr__(self) -> str:
        return f"Image(width={self.width}, height={self.height})"


__all__ = ["Image"]
