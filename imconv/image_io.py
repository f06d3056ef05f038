# imconv/image_io.py
from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Tuple, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import PPM_MAGIC, PPM_MAXVAL, PPM_MAXVAL_LIMIT
from .core_types import (
    PPMFormatError,
    RGBArray,
    U8Image,
    U8Plane,
    assert_u8_image_rgb,
    assert_u8_plane,
)
from .utils import warn

"""
Image I/O: binary pixel-map (P6) codec, raw mono dump, and Pillow helpers.

P6 layout:
  "P6" <ws> width <ws> height <ws> maxval <one ws byte> <pixel data>
  '#' comment lines may appear between header tokens.
  maxval <= 255 : one byte per sample
  maxval >  255 : two big-endian bytes per sample, only the high byte is kept
"""

PathOrFile = Union[str, "os.PathLike[str]", BinaryIO]


# ===========
# P6 decoding
# ===========
def _next_header_token(fh: BinaryIO) -> bytes:
    """Read one whitespace-delimited header token, skipping comment lines.
    Consumes exactly one whitespace byte after the token."""
    ch = fh.read(1)
    while True:
        if not ch:
            raise PPMFormatError("unexpected end of header")
        if ch == b"#":
            fh.readline()
            ch = fh.read(1)
            continue
        if ch.isspace():
            ch = fh.read(1)
            continue
        break

    token = bytearray()
    while ch and not ch.isspace():
        token += ch
        ch = fh.read(1)
    if not ch:
        raise PPMFormatError("unexpected end of header")
    return bytes(token)


def _header_int(fh: BinaryIO, name: str) -> int:
    token = _next_header_token(fh)
    try:
        value = int(token)
    except ValueError:
        raise PPMFormatError(f"bad {name} in header: {token!r}") from None
    if value < 0:
        raise PPMFormatError(f"negative {name} in header: {value}")
    return value


def read_ppm_header(fh: BinaryIO) -> Tuple[int, int, int]:
    """Parse the header and leave fh at the first pixel byte. Returns (width, height, maxval)."""
    magic = fh.read(2)
    if magic != PPM_MAGIC:
        raise PPMFormatError(f"not a P6 pixel map (magic {magic!r})")
    width = _header_int(fh, "width")
    height = _header_int(fh, "height")
    maxval = _header_int(fh, "maxval")
    if maxval == 0 or maxval > PPM_MAXVAL_LIMIT:
        raise PPMFormatError(f"maxval out of range: {maxval}")
    return width, height, maxval


def _decode_ppm(fh: BinaryIO) -> U8Image:
    width, height, maxval = read_ppm_header(fh)
    n_samples = width * height * 3
    wide = maxval > 255
    need = n_samples * (2 if wide else 1)
    data = fh.read(need)
    if len(data) < need:
        raise PPMFormatError(f"truncated pixel data: got {len(data)} of {need} bytes")

    if wide:
        warn(f"maxval {maxval}: keeping the high byte of each 16-bit sample")
        samples = (np.frombuffer(data, dtype=">u2") >> 8).astype(np.uint8)
    else:
        samples = np.frombuffer(data, dtype=np.uint8).copy()
    return samples.reshape(height, width, 3)


def read_ppm(source: PathOrFile) -> U8Image:
    """
    Decode a P6 pixel map from a path or an open binary file.

    A path that cannot be opened raises OSError before any parsing.
    Caller-supplied file objects are left open.
    """
    if hasattr(source, "read"):
        return _decode_ppm(source)  # type: ignore[arg-type]
    with open(Path(source), "rb") as fh:
        return _decode_ppm(fh)


# ===========
# P6 encoding
# ===========
def quantize_to_u8(rgb: RGBArray) -> np.ndarray:
    """0..1 floats -> truncated 0..255 bytes (out-of-range values clipped)."""
    return np.clip(np.asarray(rgb, dtype=np.float64) * 255.0, 0.0, 255.0).astype(
        np.uint8
    )


def _write_payload(target: PathOrFile, payload: bytes) -> None:
    if hasattr(target, "write"):
        target.write(payload)  # type: ignore[union-attr]
        return
    with open(Path(target), "wb") as fh:
        fh.write(payload)


def encode_ppm(rgb_u8: U8Image) -> bytes:
    rgb_u8 = assert_u8_image_rgb(rgb_u8)
    height, width, _ = rgb_u8.shape
    header = f"P6 {width} {height} {PPM_MAXVAL}\n".encode("ascii")
    return header + np.ascontiguousarray(rgb_u8).tobytes()


def write_ppm(target: PathOrFile, rgb_u8: U8Image) -> None:
    """Write a P6 pixel map with maxval 255 to a path or an open binary file."""
    _write_payload(target, encode_ppm(rgb_u8))


def write_raw_mono(target: PathOrFile, plane_u8: U8Plane) -> None:
    """Headerless one-byte-per-pixel dump, row-major."""
    plane_u8 = assert_u8_plane(plane_u8)
    _write_payload(target, np.ascontiguousarray(plane_u8).tobytes())


# ==============
# Pillow helpers
# ==============
def load_image_rgb(path: Path) -> U8Image:
    """Load any Pillow-readable image as uint8 (H,W,3), honouring EXIF orientation."""
    with Image.open(path) as im0:
        im = ImageOps.exif_transpose(im0).convert("RGB")
    return np.array(im, dtype=np.uint8)


def save_png(path: Path, rgb_u8: U8Image) -> Path:
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    Image.fromarray(assert_u8_image_rgb(rgb_u8)).save(path)
    return path


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "read_ppm_header",
    "read_ppm",
    "quantize_to_u8",
    "encode_ppm",
    "write_ppm",
    "write_raw_mono",
    "load_image_rgb",
    "save_png",
    "is_image_file",
]
