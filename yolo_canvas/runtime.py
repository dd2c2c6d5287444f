from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

import numpy as np

from .config import LetterboxConfig
from .letterbox import as_rgb, letterbox
from .remap import rect_to_original
from .tensor import extract_pixels
from .types import Rectangle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedInput:
    tensor: np.ndarray
    orig_size: Tuple[int, int]
    ratio: Tuple[float, float]
    pad: Tuple[float, float]

    @property
    def model_size(self) -> Tuple[int, int]:
        return self.tensor.shape[3], self.tensor.shape[2]

    def to_original(self, rectangle: Rectangle) -> Rectangle:
        """Map a box predicted on the tensor back onto the source image."""
        return rect_to_original(rectangle, self.model_size, self.orig_size)


@dataclass(frozen=True)
class InferenceResult:
    outputs: Any
    prepared: PreparedInput


class InferencePipeline:
    """
    Preprocess (letterbox -> tensor) and hand the tensor to an inference callable.

    The pipeline expects RGB(A) or grayscale images as `np.ndarray`. The
    inference engine is a black box: `infer_fn` receives the (1, 3, H, W)
    float32 tensor and its raw outputs are returned untouched together with
    the geometry needed to map results back.
    """

    def __init__(
        self,
        infer_fn: Callable[[np.ndarray], Any],
        *,
        letterbox_cfg: LetterboxConfig = LetterboxConfig(),
        max_workers: Optional[int] = None,
    ):
        self._infer_fn = infer_fn
        self.letterbox_cfg = letterbox_cfg
        self.max_workers = max_workers

    def preprocess(self, image: np.ndarray) -> PreparedInput:
        rgb = as_rgb(image)
        orig_h, orig_w = rgb.shape[:2]
        img, ratio, pad = letterbox(rgb, new_shape=self.letterbox_cfg.new_shape, color=self.letterbox_cfg.color)
        tensor = extract_pixels(img, max_workers=self.max_workers)
        logger.debug("prepared %dx%d image as tensor %s (pad=%s)", orig_w, orig_h, tensor.shape, pad)
        return PreparedInput(tensor=tensor, orig_size=(orig_w, orig_h), ratio=ratio, pad=pad)

    def __call__(self, image: np.ndarray) -> InferenceResult:
        prep = self.preprocess(image)
        outputs = self._infer_fn(prep.tensor)
        return InferenceResult(outputs=outputs, prepared=prep)
