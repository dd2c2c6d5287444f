from __future__ import annotations

import numbers
import re
from typing import Optional, Tuple

import numpy as np

from .errors import InvalidColorFormatError, ValueOutOfRangeError

Rgba = Tuple[int, int, int, int]

_HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")

# Ultralytics-style palette, indexed by class id.
_PALETTE = (
    "#FF3838",
    "#FF9D97",
    "#FF701F",
    "#FFB21D",
    "#CFD231",
    "#48F90A",
    "#92CC17",
    "#3DDB86",
    "#1A9334",
    "#00D4BB",
    "#2C99A8",
    "#00C2FF",
    "#344593",
    "#6473FF",
    "#0018EC",
    "#8438FF",
    "#520085",
    "#CB38FF",
    "#FF95C8",
    "#FF37C7",
)


def _is_byte(value: object) -> bool:
    # bool is an Integral too, but never a meaningful channel value
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        return False
    return 0 <= value <= 255


def hex_to_rgba(hex_color: str, alpha: int = 255) -> Rgba:
    """
    Convert a `#RRGGBB` color (case-insensitive) plus a separate alpha to RGBA.

    Raises:
        InvalidColorFormatError: malformed hex string (length != 7, missing `#`, non-hex digits).
        ValueOutOfRangeError: alpha not an integer in [0, 255].
    """

    if not isinstance(hex_color, str) or _HEX_COLOR.fullmatch(hex_color) is None:
        raise InvalidColorFormatError(hex_color)
    if not _is_byte(alpha):
        raise ValueOutOfRangeError("alpha", alpha, 0, 255)

    r = int(hex_color[1:3], 16)
    g = int(hex_color[3:5], 16)
    b = int(hex_color[5:7], 16)
    return r, g, b, int(alpha)


def validate_rgba(name: str, rgba: Tuple[int, ...]) -> Rgba:
    if len(rgba) != 4:
        raise ValueError(f"{name} must have 4 components (r, g, b, a), got {rgba!r}")
    for value in rgba:
        if not _is_byte(value):
            raise ValueOutOfRangeError(name, rgba, 0, 255)
    return int(rgba[0]), int(rgba[1]), int(rgba[2]), int(rgba[3])


def color_for_class_id(class_id: Optional[int]) -> str:
    """
    Deterministic `#RRGGBB` color for a class id.
    """

    if class_id is None:
        return "#FFFF00"
    if 0 <= class_id < len(_PALETTE):
        return _PALETTE[class_id]

    # Seeded RNG keeps ids beyond the palette stable across runs.
    rng = np.random.default_rng(int(class_id))
    rgb = rng.integers(0, 256, size=3, dtype=np.uint8)
    return "#{:02X}{:02X}{:02X}".format(int(rgb[0]), int(rgb[1]), int(rgb[2]))
