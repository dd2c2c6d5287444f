from __future__ import annotations

from typing import Optional

import numpy as np

from .config import CONFIDENCE_CUTOFF
from .remap import Size, crop_segmented_area
from .scanner import scan_pixels, sort_pixels
from .types import Label, Rectangle, Segmentation


def segmentation_from_mask(
    mask: np.ndarray,
    orig_size: Size,
    rectangle: Rectangle,
    label: Label,
    confidence: float,
    *,
    max_workers: Optional[int] = None,
) -> Segmentation:
    """
    Turn a model-space mask probability map into a `Segmentation`.

    The mask (H, W) of probabilities in [0, 1] is mapped back onto the
    original image, cut to `rectangle` and reduced to the pixels scoring
    above the cutoff, in (y, x) order and local to the rectangle origin.
    """

    mask = np.asarray(mask, dtype=np.float32)
    if mask.ndim != 2:
        raise ValueError(f"Expected mask probability map of shape (H, W), got {mask.shape}")

    area = crop_segmented_area(mask, orig_size, rectangle)
    pixels = scan_pixels(area, lambda row: row, threshold=CONFIDENCE_CUTOFF, vectorized=True, max_workers=max_workers)
    return Segmentation(
        label=label,
        confidence=float(confidence),
        rectangle=rectangle,
        segmented_pixels=tuple(sort_pixels(pixels)),
    )
