"""
Mapping between model (letterboxed) space and original-image space.
"""

from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from .errors import InvalidGeometryError
from .types import Rectangle


Size = Tuple[int, int]


def _check_size(name: str, size: Size) -> Tuple[int, int]:
    w, h = int(size[0]), int(size[1])
    if w <= 0 or h <= 0:
        raise InvalidGeometryError(f"{name} must have positive width/height, got {size}")
    return w, h


def letterbox_geometry(model_size: Size, orig_size: Size) -> Tuple[float, Tuple[float, float]]:
    """
    Gain and (left, top) padding a letterbox from `orig_size` to `model_size` applies.

    Both sizes are (width, height).
    """

    mw, mh = _check_size("model_size", model_size)
    ow, oh = _check_size("orig_size", orig_size)
    gain = min(mw / ow, mh / oh)
    return gain, ((mw - ow * gain) / 2, (mh - oh * gain) / 2)


def crop_segmented_area(
    mask: np.ndarray,
    orig_size: Size,
    rectangle: Rectangle,
    *,
    interpolation: int = cv2.INTER_LINEAR,
) -> np.ndarray:
    """
    Undo a letterbox on a model-sized mask and cut out `rectangle`.

    Steps, in this order: crop away the letterbox padding, resize the crop to
    `orig_size` (width, height), crop to `rectangle` (original-image
    coordinates). Any other order distorts the aspect ratio.

    Returns a new array of shape (rectangle.height, rectangle.width[, C]).
    """

    if mask is None or not hasattr(mask, "shape") or mask.ndim not in (2, 3):
        raise InvalidGeometryError(f"Expected mask shape (H, W) or (H, W, C), got {getattr(mask, 'shape', None)}")
    mh, mw = mask.shape[:2]
    ow, oh = _check_size("orig_size", orig_size)
    if rectangle.width <= 0 or rectangle.height <= 0:
        raise InvalidGeometryError(f"Crop rectangle must have positive size, got {rectangle}")
    if rectangle.x < 0 or rectangle.y < 0 or rectangle.right > ow or rectangle.bottom > oh:
        raise InvalidGeometryError(f"Crop rectangle {rectangle} is outside the original image {ow}x{oh}")

    gain, (pad_w, pad_h) = letterbox_geometry((mw, mh), (ow, oh))
    pad_x = int(round(pad_w))
    pad_y = int(round(pad_h))
    crop_w = mw - 2 * pad_x
    crop_h = mh - 2 * pad_y
    if crop_w <= 0 or crop_h <= 0:
        raise InvalidGeometryError(f"Padding {pad_x, pad_y} leaves nothing of a {mw}x{mh} mask")

    unpadded = mask[pad_y : pad_y + crop_h, pad_x : pad_x + crop_w]
    if (crop_w, crop_h) != (ow, oh):
        restored = cv2.resize(unpadded, (ow, oh), interpolation=interpolation)
    else:
        restored = unpadded

    return restored[rectangle.y : rectangle.bottom, rectangle.x : rectangle.right].copy()


def point_to_original(point: Tuple[float, float], model_size: Size, orig_size: Size) -> Tuple[float, float]:
    gain, (dw, dh) = letterbox_geometry(model_size, orig_size)
    return (point[0] - dw) / gain, (point[1] - dh) / gain


def point_to_model(point: Tuple[float, float], model_size: Size, orig_size: Size) -> Tuple[float, float]:
    gain, (dw, dh) = letterbox_geometry(model_size, orig_size)
    return point[0] * gain + dw, point[1] * gain + dh


def rect_to_original(rectangle: Rectangle, model_size: Size, orig_size: Size) -> Rectangle:
    """
    Map a model-space box back onto the original image, clipped to its bounds.
    """

    x1, y1 = point_to_original((rectangle.x, rectangle.y), model_size, orig_size)
    x2, y2 = point_to_original((rectangle.right, rectangle.bottom), model_size, orig_size)

    orig_w, orig_h = orig_size
    x1, x2 = float(np.clip(x1, 0, orig_w)), float(np.clip(x2, 0, orig_w))
    y1, y2 = float(np.clip(y1, 0, orig_h)), float(np.clip(y2, 0, orig_h))
    return Rectangle.from_xyxy(x1, y1, x2, y2)


def rect_to_model(rectangle: Rectangle, model_size: Size, orig_size: Size) -> Rectangle:
    x1, y1 = point_to_model((rectangle.x, rectangle.y), model_size, orig_size)
    x2, y2 = point_to_model((rectangle.right, rectangle.bottom), model_size, orig_size)
    return Rectangle.from_xyxy(x1, y1, x2, y2)
