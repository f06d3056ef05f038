"""
imconv package.

Purpose:
  Colour quantization and perceptual comparison for raster images: normalized
  RGB colours, nearest-match palettes, gray/colour decomposition, and
  dominant-colour statistics.

Public API:
  Color, Pixel  : colour value objects (imconv.color)
  Palette       : fixed-size colour table with nearest-match search
  Image         : pixel grid with construction, resampling and analysis
  ColorRank     : histogram ranking row
  PaletteMatch  : nearest-match result (index -1 means no match)
  analysis      : array-level algorithms
  image_io      : P6 pixel-map codec and Pillow helpers
  palette_data  : preset palettes
  utils         : logging and report formatting

Quick start:
  from imconv import Image, Palette
  im = Image.from_ppm("in.ppm")
  pal = Palette.from_hex(["#000000", "#ff0000", "#ffffff"])
  im.assign_palette(pal)
  ranks = im.color_histogram()
"""

__version__ = "0.1.0"

from . import analysis
from . import constants
from . import core_types
from . import image_io
from . import palette_data
from . import utils

from .color import Color, Pixel
from .core_types import ColorRank, DimensionMismatchError, PaletteMatch, PPMFormatError
from .image import Image
from .palette import Palette

__all__ = [
    "__version__",
    "analysis",
    "constants",
    "core_types",
    "image_io",
    "palette_data",
    "utils",
    "Color",
    "Pixel",
    "ColorRank",
    "PaletteMatch",
    "DimensionMismatchError",
    "PPMFormatError",
    "Image",
    "Palette",
]
