from typing import Tuple

import cv2
import numpy as np

from .errors import InvalidGeometryError


def as_rgb(image: np.ndarray) -> np.ndarray:
    """
    Return a 3-channel view/copy of `image`: alpha is dropped, a single channel is replicated.
    """

    if image is None or not hasattr(image, "shape"):
        raise TypeError("image must be a NumPy array.")
    if image.ndim == 2 or (image.ndim == 3 and image.shape[2] == 1):
        return cv2.cvtColor(image.reshape(image.shape[:2]), cv2.COLOR_GRAY2RGB)
    if image.ndim == 3 and image.shape[2] == 4:
        return image[:, :, :3]
    if image.ndim == 3 and image.shape[2] == 3:
        return image
    raise InvalidGeometryError(f"Expected image shape (H, W), (H, W, 3) or (H, W, 4), got {image.shape}")


def letterbox(
    image: np.ndarray,
    new_shape: Tuple[int, int] = (640, 640),
    color: Tuple[int, int, int] = (0, 0, 0),
):
    """
    Resize an image to fit `new_shape` (width, height) keeping its aspect ratio and pad the rest.

    The source is left untouched; the result is always a new 3-channel image
    of exactly `new_shape`.

    Returns:
        padded: resized + padded image
        ratio: (w_ratio, h_ratio)
        pad: (dw, dh) padding applied to width/height (left/top only; right/bottom equal)
    """

    rgb = as_rgb(image)
    h, w = rgb.shape[:2]
    if isinstance(new_shape, int):
        new_shape = (new_shape, new_shape)
    new_w, new_h = new_shape
    if new_w <= 0 or new_h <= 0:
        raise InvalidGeometryError(f"Target size must be positive, got {new_shape}")
    if w == 0 or h == 0:
        raise InvalidGeometryError(f"Cannot letterbox an empty image of shape {image.shape}")

    # Scale ratio (new / old)
    r = min(new_w / w, new_h / h)
    resized_w = min(new_w, max(1, int(round(w * r))))
    resized_h = min(new_h, max(1, int(round(h * r))))
    dw, dh = (new_w - resized_w) / 2, (new_h - resized_h) / 2

    top = int(round(dh - 0.1))
    left = int(round(dw - 0.1))

    padded = np.empty((new_h, new_w, 3), dtype=rgb.dtype)
    padded[...] = np.asarray(color, dtype=rgb.dtype)
    if (w, h) != (resized_w, resized_h):
        padded[top : top + resized_h, left : left + resized_w] = cv2.resize(
            rgb, (resized_w, resized_h), interpolation=cv2.INTER_LINEAR
        )
    else:
        padded[top : top + resized_h, left : left + resized_w] = rgb

    return padded, (r, r), (dw, dh)


def resize_image(image: np.ndarray, width: int, height: int) -> np.ndarray:
    padded, _, _ = letterbox(image, (width, height))
    return padded
