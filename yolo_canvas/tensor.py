from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from ._parallel import row_partitions, worker_count
from .errors import InvalidGeometryError

logger = logging.getLogger(__name__)


def extract_pixels(image_rgb: np.ndarray, *, max_workers: Optional[int] = None) -> np.ndarray:
    """
    Pack an RGB image (H, W, 3) into a normalized NCHW float32 tensor of shape (1, 3, H, W).

    `tensor[0, c, y, x] == image_rgb[y, x, c] / 255.0`. Inputs are not clipped.
    Row blocks are packed concurrently; each worker writes its own tensor slice.
    """

    if image_rgb is None or not hasattr(image_rgb, "shape"):
        raise TypeError("image_rgb must be a NumPy array (RGB).")
    if image_rgb.ndim != 3 or image_rgb.shape[2] != 3:
        raise InvalidGeometryError(f"Expected image shape (H, W, 3), got {getattr(image_rgb, 'shape', None)}")

    h, w = image_rgb.shape[:2]
    tensor = np.empty((1, 3, h, w), dtype=np.float32)
    scale = np.float32(255.0)

    def _pack_rows(rows: range) -> None:
        block = image_rgb[rows.start : rows.stop].astype(np.float32)
        # HWC -> CHW for this block of rows
        tensor[0, :, rows.start : rows.stop, :] = np.transpose(block, (2, 0, 1)) / scale

    partitions = row_partitions(h, worker_count(max_workers))
    logger.debug("packing %dx%d image into tensor using %d row blocks", w, h, len(partitions))
    with ThreadPoolExecutor(max_workers=max(1, len(partitions))) as pool:
        # list() propagates worker exceptions
        list(pool.map(_pack_rows, partitions))

    return tensor
