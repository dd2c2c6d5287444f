"""
Translucent drawing primitives on uint8 RGB/RGBA images.

OpenCV has no alpha-aware drawing, so every primitive is first rasterised
into a single-channel coverage mask and then blended into the image with
the color's alpha. Only the color channels of the target are written.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Sequence, Tuple

import cv2
import numpy as np

from .colors import Rgba
from .config import RenderStyle
from .errors import InvalidGeometryError, ValueOutOfRangeError
from .types import Rectangle


FONT_FACE = cv2.FONT_HERSHEY_SIMPLEX
_LINE_REFERENCE = "Hg"


def check_image(image: np.ndarray) -> None:
    if image is None or not hasattr(image, "shape"):
        raise TypeError("image must be a NumPy array (RGB or RGBA).")
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise InvalidGeometryError(f"Expected image shape (H, W, 3) or (H, W, 4), got {image.shape}")
    if image.dtype != np.uint8:
        raise TypeError(f"Expected a uint8 image, got {image.dtype}")


@lru_cache(maxsize=32)
def _font_scale(font_size: int, thickness: int) -> float:
    return cv2.getFontScaleFromHeight(FONT_FACE, font_size, thickness)


def _text_metrics(text: str, style: RenderStyle) -> Tuple[int, int, int]:
    scale = _font_scale(style.font_size, style.font_thickness)
    (tw, _), _ = cv2.getTextSize(text, FONT_FACE, scale, style.font_thickness)
    # Line height is a property of the font, so an empty string still gets a full line.
    (_, th), baseline = cv2.getTextSize(_LINE_REFERENCE, FONT_FACE, scale, style.font_thickness)
    return tw, th, baseline


def measure_text(text: str, style: RenderStyle) -> Tuple[int, int]:
    """
    (width, height) of `text` rendered with `style`; height includes the baseline.
    """

    tw, th, baseline = _text_metrics(text, style)
    return tw, th + baseline


def measure_text_block(lines: Sequence[str], style: RenderStyle) -> Tuple[int, int, int]:
    """
    Size of a multi-line block: (width, height, line_advance).
    """

    if not lines:
        return 0, 0, 0
    sizes = [measure_text(line, style) for line in lines]
    line_height = max(h for _, h in sizes)
    advance = int(round(line_height * style.line_spacing))
    width = max(w for w, _ in sizes)
    return width, line_height + advance * (len(lines) - 1), advance


def _blend_coverage(image: np.ndarray, coverage: np.ndarray, color: Rgba) -> None:
    ys, xs = np.nonzero(coverage)
    if ys.size == 0:
        return
    weight = coverage[ys, xs].astype(np.float32) * (color[3] / (255.0 * 255.0))
    dst = image[ys, xs, :3].astype(np.float32)
    src = np.asarray(color[:3], dtype=np.float32)
    blended = dst + (src - dst) * weight[:, None]
    image[ys, xs, :3] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def _new_coverage(image: np.ndarray) -> np.ndarray:
    return np.zeros(image.shape[:2], dtype=np.uint8)


def draw_rectangle_outline(image: np.ndarray, rectangle: Rectangle, color: Rgba, thickness: int) -> None:
    if rectangle.width <= 0 or rectangle.height <= 0:
        raise InvalidGeometryError(f"Cannot draw rectangle with non-positive size: {rectangle}")
    coverage = _new_coverage(image)
    cv2.rectangle(coverage, (rectangle.x, rectangle.y), (rectangle.right, rectangle.bottom), 255, thickness=thickness)
    _blend_coverage(image, coverage, color)


def fill_rectangle(image: np.ndarray, x: float, y: float, width: float, height: float, color: Rgba) -> None:
    x0, y0 = int(round(x)), int(round(y))
    x1, y1 = int(round(x + width)), int(round(y + height))
    if x1 <= x0 or y1 <= y0:
        raise InvalidGeometryError(f"Cannot fill rectangle with non-positive size: {(x, y, width, height)}")
    coverage = _new_coverage(image)
    # pt2 is inclusive in OpenCV
    cv2.rectangle(coverage, (x0, y0), (x1 - 1, y1 - 1), 255, thickness=cv2.FILLED)
    _blend_coverage(image, coverage, color)


def draw_text(image: np.ndarray, text: str, top_left: Tuple[float, float], color: Rgba, style: RenderStyle) -> None:
    draw_text_block(image, [text], top_left, color, style)


def draw_text_block(
    image: np.ndarray,
    lines: Sequence[str],
    top_left: Tuple[float, float],
    color: Rgba,
    style: RenderStyle,
) -> None:
    """
    Draw `lines` starting at `top_left`, one line per `line_spacing * line height`.
    """

    if not lines:
        return
    _, _, advance = measure_text_block(lines, style)
    scale = _font_scale(style.font_size, style.font_thickness)
    coverage = _new_coverage(image)
    x, y = top_left
    for i, line in enumerate(lines):
        _, th, _ = _text_metrics(line, style)
        # putText anchors at the baseline (bottom-left of the glyphs)
        org = (int(round(x)), int(round(y + i * advance + th)))
        cv2.putText(coverage, line, org, FONT_FACE, scale, 255, style.font_thickness, cv2.LINE_AA)
    _blend_coverage(image, coverage, color)


def composite_overlay(image: np.ndarray, overlay_rgba: np.ndarray, origin: Tuple[int, int], opacity: float) -> None:
    """
    Alpha-blend an RGBA overlay onto `image` with its top-left at `origin`.

    The effective per-pixel weight is `overlay_alpha / 255 * opacity`; parts
    of the overlay outside the image are ignored.
    """

    if not 0.0 <= opacity <= 1.0:
        raise ValueOutOfRangeError("opacity", opacity, 0.0, 1.0)
    if overlay_rgba.ndim != 3 or overlay_rgba.shape[2] != 4:
        raise InvalidGeometryError(f"Expected overlay shape (H, W, 4), got {overlay_rgba.shape}")

    img_h, img_w = image.shape[:2]
    ov_h, ov_w = overlay_rgba.shape[:2]
    x0, y0 = int(origin[0]), int(origin[1])
    ix0, iy0 = max(x0, 0), max(y0, 0)
    ix1, iy1 = min(x0 + ov_w, img_w), min(y0 + ov_h, img_h)
    if ix1 <= ix0 or iy1 <= iy0:
        return

    src = overlay_rgba[iy0 - y0 : iy1 - y0, ix0 - x0 : ix1 - x0].astype(np.float32)
    dst = image[iy0:iy1, ix0:ix1, :3].astype(np.float32)
    weight = src[..., 3:4] * (opacity / 255.0)
    blended = dst + (src[..., :3] - dst) * weight
    image[iy0:iy1, ix0:ix1, :3] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
