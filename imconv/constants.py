# imconv/constants.py
"""
Global tunables used across the project.

- Ingestion (saturation boost)
- Perceptual error weights
- Palette index sentinel
- Channel orders for raw buffers
- Binary pixel-map (PPM) header values
"""
from __future__ import annotations

from typing import Tuple

# =========
# Ingestion
# =========
# Tunable default; callers pass boost= to override, 1.0 leaves pixels unchanged
DEFAULT_BOOST: float = 1.2
BOOST_CLAMP_MAX: float = 1.0

# ================
# Perceptual error
# ================
COLOR_ERROR_WEIGHT: float = 1.4
GRAY_ERROR_WEIGHT: float = 0.6
GRAY_CHANNELS: float = 3.0

# =======
# Palette
# =======
UNASSIGNED_INDEX: int = -1

# ==================
# Raw buffer layouts
# ==================
RGB_ORDER: Tuple[int, int, int] = (0, 1, 2)
BGR_ORDER: Tuple[int, int, int] = (2, 1, 0)

# ============
# Pixel map IO
# ============
PPM_MAGIC: bytes = b"P6"
PPM_MAXVAL: int = 255
PPM_MAXVAL_LIMIT: int = 65535

__all__ = [
    "DEFAULT_BOOST",
    "BOOST_CLAMP_MAX",
    "COLOR_ERROR_WEIGHT",
    "GRAY_ERROR_WEIGHT",
    "GRAY_CHANNELS",
    "UNASSIGNED_INDEX",
    "RGB_ORDER",
    "BGR_ORDER",
    "PPM_MAGIC",
    "PPM_MAXVAL",
    "PPM_MAXVAL_LIMIT",
]
