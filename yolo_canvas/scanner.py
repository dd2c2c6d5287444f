from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, List, Optional

import numpy as np

from ._parallel import row_partitions, worker_count
from .config import CONFIDENCE_CUTOFF
from .errors import InvalidGeometryError
from .types import Pixel

logger = logging.getLogger(__name__)


def scan_pixels(
    image: np.ndarray,
    score_fn: Callable[[Any], Any],
    *,
    threshold: float = CONFIDENCE_CUTOFF,
    vectorized: bool = False,
    max_workers: Optional[int] = None,
) -> List[Pixel]:
    """
    Collect every pixel whose score is strictly greater than `threshold`.

    Args:
        image: (H, W) or (H, W, C) array.
        score_fn: maps one pixel value (a scalar or a length-C array) to a confidence.
            With `vectorized=True` it receives a whole row and must return W scores.
        threshold: exclusive cutoff, 0.75 unless overridden.

    The order of the returned pixels is not specified; use `sort_pixels` when
    a deterministic order is needed.
    """

    if image is None or not hasattr(image, "shape"):
        raise TypeError("image must be a NumPy array.")
    if image.ndim not in (2, 3):
        raise InvalidGeometryError(f"Expected image shape (H, W) or (H, W, C), got {image.shape}")

    h, w = image.shape[:2]

    def _scan_rows(rows: range) -> List[Pixel]:
        found: List[Pixel] = []
        for y in rows:
            row = image[y]
            if vectorized:
                scores = np.asarray(score_fn(row), dtype=np.float64).reshape(-1)
                if scores.shape[0] != w:
                    raise ValueError(f"score_fn returned {scores.shape[0]} scores for a row of width {w}")
                for x in np.flatnonzero(scores > threshold):
                    found.append(Pixel(int(x), y, float(scores[x])))
                continue
            for x in range(w):
                confidence = float(score_fn(row[x]))
                if confidence > threshold:
                    found.append(Pixel(x, y, confidence))
        return found

    partitions = row_partitions(h, worker_count(max_workers))
    pixels: List[Pixel] = []
    with ThreadPoolExecutor(max_workers=max(1, len(partitions))) as pool:
        for part in pool.map(_scan_rows, partitions):
            pixels.extend(part)

    logger.debug("scanned %dx%d pixels, %d above %.2f", w, h, len(pixels), threshold)
    return pixels


def sort_pixels(pixels: Iterable[Pixel]) -> List[Pixel]:
    return sorted(pixels, key=lambda p: (p.y, p.x))
