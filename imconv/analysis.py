# imconv/analysis.py
from __future__ import annotations

"""
Array-level colour algorithms shared by Palette and Image.

All functions take float64 RGB arrays shaped (..., 3) in 0..1 and never
modify their inputs unless the name says so.

Exports:
  normalize_u8(rgb_u8)
  apply_saturation_boost(rgb, boost)
  gray_and_color_components(rgb)
  squared_distance(rgb, ref)
  nearest_palette_indices(rgb, palette_rgb, include_grayscale, exclude_index)
  average_color(rgb)
  secondary_color(rgb, first)
  rank_palette_indices(indices)
  perceptual_error(rgb_a, rgb_b)
"""

from typing import Dict, List, Tuple

import numpy as np

from .constants import (
    BOOST_CLAMP_MAX,
    COLOR_ERROR_WEIGHT,
    GRAY_CHANNELS,
    GRAY_ERROR_WEIGHT,
    UNASSIGNED_INDEX,
)
from .core_types import ColorRank, DimensionMismatchError, RGBArray

# =============
# Normalization
# =============
def normalize_u8(rgb_u8: np.ndarray) -> RGBArray:
    """uint8 0..255 -> float64 0..1."""
    return rgb_u8.astype(np.float64) / 255.0


def apply_saturation_boost(rgb: RGBArray, boost: float) -> RGBArray:
    """
    Push the chromatic residual outward and compress the neutral floor.

      value = (value - min) * boost + min / boost, capped at 1.0

    Only the upper bound is clamped.
    """
    if not boost > 0.0:
        raise ValueError(f"boost must be > 0 (got {boost})")
    floor = rgb.min(axis=-1, keepdims=True)
    out = (rgb - floor) * float(boost) + floor / float(boost)
    return np.minimum(out, BOOST_CLAMP_MAX)


# =======================
# Gray / colour and error
# =======================
def gray_and_color_components(rgb: RGBArray) -> Tuple[RGBArray, RGBArray]:
    """
    Min-decomposition of (..., 3) colours.
    Returns (gray, color): gray shaped (...,) holds the channel minimum,
    color shaped (..., 3) holds the residual above it.
    """
    gray = rgb.min(axis=-1)
    return gray, rgb - gray[..., None]


def squared_distance(rgb: RGBArray, ref: np.ndarray) -> np.ndarray:
    """Squared Euclidean distance of every (..., 3) row from ref (3,)."""
    diff = rgb - np.asarray(ref, dtype=np.float64)
    return np.sum(diff * diff, axis=-1)


def perceptual_error(rgb_a: RGBArray, rgb_b: RGBArray) -> float:
    """
    Weighted gray/colour error between two equally sized grids.

    Chromatic mismatch counts 1.4x, gray mismatch 0.6x; the gray scalar
    stands for three equal channels so its squared difference is tripled.
    """
    if rgb_a.shape != rgb_b.shape:
        raise DimensionMismatchError(
            f"shape mismatch: {rgb_a.shape[:-1]} vs {rgb_b.shape[:-1]}"
        )
    gray_a, col_a = gray_and_color_components(rgb_a)
    gray_b, col_b = gray_and_color_components(rgb_b)
    cdiff = col_a - col_b
    gdiff = gray_a - gray_b
    color_error = float(np.sum(cdiff * cdiff))
    gray_error = GRAY_CHANNELS * float(np.sum(gdiff * gdiff))
    return COLOR_ERROR_WEIGHT * color_error + GRAY_ERROR_WEIGHT * gray_error


# ===================
# Nearest palette row
# ===================
def nearest_palette_indices(
    rgb: RGBArray,
    palette_rgb: RGBArray,
    include_grayscale: bool = True,
    exclude_index: int = UNASSIGNED_INDEX,
) -> np.ndarray:
    """
    For each (..., 3) row pick the nearest palette row by squared distance.

    Exact-gray palette rows are skipped unless include_grayscale; the row at
    exclude_index is always skipped. Ties go to the lowest index. Rows with
    no eligible candidate get -1.
    """
    lead_shape = rgb.shape[:-1]
    n = palette_rgb.shape[0]
    eligible = np.ones(n, dtype=bool)
    if n and not include_grayscale:
        eligible &= ~(
            (palette_rgb[:, 0] == palette_rgb[:, 1])
            & (palette_rgb[:, 0] == palette_rgb[:, 2])
        )
    if 0 <= exclude_index < n:
        eligible[exclude_index] = False
    if not np.any(eligible):
        return np.full(lead_shape, UNASSIGNED_INDEX, dtype=np.int32)

    cand_idx = np.nonzero(eligible)[0]
    cand_rgb = palette_rgb[cand_idx]
    flat = rgb.reshape(-1, 3)
    out = np.empty(flat.shape[0], dtype=np.int32)
    chunk = 200_000

    for start in range(0, flat.shape[0], chunk):
        pts = flat[start : start + chunk]
        diff = cand_rgb[None, :, :] - pts[:, None, :]
        dist2 = np.sum(diff * diff, axis=2)
        out[start : start + chunk] = cand_idx[np.argmin(dist2, axis=1)]

    return out.reshape(lead_shape)


# ===========
# Statistics
# ===========
def average_color(rgb: RGBArray) -> np.ndarray:
    """Arithmetic mean per channel; zeros for an empty grid."""
    flat = rgb.reshape(-1, 3)
    if flat.shape[0] == 0:
        return np.zeros(3, dtype=np.float64)
    return flat.mean(axis=0)


def secondary_color(rgb: RGBArray, first: np.ndarray) -> np.ndarray:
    """
    Centroid of the half of the pixels farthest from `first`.

    Pixels are ordered by descending squared RGB distance with a stable sort,
    so among equal errors the earlier row-major pixel comes first. The first
    (pixel_count // 2) pixels are averaged.
    """
    flat = rgb.reshape(-1, 3)
    half = flat.shape[0] // 2
    if half == 0:
        return np.zeros(3, dtype=np.float64)
    error = squared_distance(flat, first)
    order = np.argsort(-error, kind="stable")
    return flat[order[:half]].mean(axis=0)


def count_palette_indices(indices: np.ndarray) -> Dict[int, int]:
    """Pixel count per palette index (unassigned pixels count under -1)."""
    values, counts = np.unique(indices.reshape(-1), return_counts=True)
    return {int(v): int(c) for v, c in zip(values, counts)}


def rank_palette_indices(indices: np.ndarray) -> List[ColorRank]:
    """
    Palette indices by descending pixel count.
    Equal counts keep ascending index order.
    """
    counts = count_palette_indices(indices)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [ColorRank(palette_index=i, num_pixels=n) for i, n in ranked]


__all__ = [
    "normalize_u8",
    "apply_saturation_boost",
    "gray_and_color_components",
    "squared_distance",
    "perceptual_error",
    "nearest_palette_indices",
    "average_color",
    "secondary_color",
    "count_palette_indices",
    "rank_palette_indices",
]
