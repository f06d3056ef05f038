# imconv/utils.py
from __future__ import annotations

"""
Shared utilities for imconv.

Includes pretty formatting, histogram rank reports, and tidy logging.
"""

from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple

from .core_types import ColorRank, rgb_to_hex

if TYPE_CHECKING:
    from .palette import Palette


# Pretty formatting


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.4f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def format_percentage(x: float, decimals: int = 1) -> str:
    """Format a 0..1 share as a percentage."""
    return f"{x * 100.0:.{decimals}f}%"


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


# Histogram ranking reports


def color_rank_report(
    ranks: Sequence[ColorRank], palette: Optional["Palette"] = None
) -> List[Tuple[int, str, int, float]]:
    """
    Rows of (palette_index, hex, count, share) in ranking order.
    hex is '-' for unassigned pixels or when no palette is given.
    """
    total = sum(r.num_pixels for r in ranks)
    rows: List[Tuple[int, str, int, float]] = []
    for rank in ranks:
        hex_str = "-"
        if palette is not None and 0 <= rank.palette_index < palette.num_colors:
            hex_str = rgb_to_hex(palette.color_at_index(rank.palette_index).to_u8())
        share = rank.num_pixels / total if total else 0.0
        rows.append((rank.palette_index, hex_str, rank.num_pixels, share))
    return rows


def print_color_ranks(
    ranks: Sequence[ColorRank], palette: Optional["Palette"] = None
) -> None:
    """Print a ranking produced by Image.color_histogram()."""
    if not ranks:
        log("No pixels")
        return
    log("Palette usage:")
    for index, hex_str, count, share in color_rank_report(ranks, palette):
        log(f"  {index:4d}  {hex_str}  count={count:,}  {format_percentage(share)}")


#  Logging


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [ppm] Size: 640x480  Maxval: 255
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


__all__ = [
    "format_bool_on_off",
    "format_number_compact",
    "format_percentage",
    "key_value_pairs_to_string",
    "color_rank_report",
    "print_color_ranks",
    "print_config_line",
    "log",
    "debug_log",
    "warn",
]
