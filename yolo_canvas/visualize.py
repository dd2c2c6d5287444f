from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ._parallel import worker_count
from .canvas import (
    check_image,
    composite_overlay,
    draw_rectangle_outline,
    draw_text,
    draw_text_block,
    fill_rectangle,
    measure_text,
    measure_text_block,
)
from .colors import Rgba, hex_to_rgba
from .config import DEFAULT_STYLE, RenderStyle
from .errors import InvalidGeometryError
from .types import Classification, ObjectDetection, Rectangle, Segmentation, to_percent

logger = logging.getLogger(__name__)


def format_label(name: str, confidence: float, draw_confidence: bool) -> str:
    """
    Label text, with the confidence appended as `" (NN%)"` when `draw_confidence` is set.
    """

    if draw_confidence:
        return f"{name} ({to_percent(confidence)}%)"
    return name


@dataclass(frozen=True)
class _LabelLayout:
    text: str
    color: Rgba
    rectangle: Rectangle
    background: Tuple[int, int, int, int]
    text_origin: Tuple[float, float]


def _layout_label(
    detection: Union[ObjectDetection, Segmentation],
    draw_confidence: bool,
    style: RenderStyle,
) -> _LabelLayout:
    rect = detection.rectangle
    if rect.width <= 0 or rect.height <= 0:
        raise InvalidGeometryError(f"Detection rectangle must have positive size, got {rect}")

    color = hex_to_rgba(detection.label.color, style.label_alpha)
    text = format_label(detection.label.name, detection.confidence, draw_confidence)
    text_w, text_h = measure_text(text, style)

    # Label block sits right above the box: it ends where the box starts.
    x, y = rect.x, rect.y - text_h * 2
    background = (x, y, text_w + style.font_size, text_h * 2)
    text_origin = (x + style.font_size / 2, y + text_h / 2)
    return _LabelLayout(text=text, color=color, rectangle=rect, background=background, text_origin=text_origin)


def draw_bounding_boxes(
    image: np.ndarray,
    detections: Iterable[Union[ObjectDetection, Segmentation]],
    draw_confidence: bool = True,
    *,
    style: RenderStyle = DEFAULT_STYLE,
) -> None:
    """
    Draw box outlines and labels on an RGB(A) uint8 image, in place.

    Each label gets a translucent background in the label color above its
    box, a dark 1px shadow and a light foreground text.

    Raises:
        InvalidColorFormatError: a label color is not `#RRGGBB`.
        InvalidGeometryError: a rectangle has non-positive size.

    A failure on one detection leaves the previous ones drawn.
    """

    check_image(image)
    count = 0
    for detection in detections:
        layout = _layout_label(detection, draw_confidence, style)
        draw_rectangle_outline(image, layout.rectangle, layout.color, style.border_width)
        fill_rectangle(image, *layout.background, layout.color)

        tx, ty = layout.text_origin
        offset = style.shadow_offset
        draw_text(image, layout.text, (tx + offset, ty + offset), style.shadow_color, style)
        draw_text(image, layout.text, (tx, ty), style.foreground_color, style)
        count += 1

    logger.debug("drew %d bounding boxes", count)


def _build_mask_overlay(segmentation: Segmentation) -> np.ndarray:
    rect = segmentation.rectangle
    if rect.width <= 0 or rect.height <= 0:
        raise InvalidGeometryError(f"Segmentation rectangle must have positive size, got {rect}")

    color = np.asarray(hex_to_rgba(segmentation.label.color), dtype=np.uint8)
    overlay = np.zeros((rect.height, rect.width, 4), dtype=np.uint8)
    if not segmentation.segmented_pixels:
        return overlay

    xs = np.fromiter((p.x for p in segmentation.segmented_pixels), dtype=np.int64)
    ys = np.fromiter((p.y for p in segmentation.segmented_pixels), dtype=np.int64)
    if xs.min() < 0 or ys.min() < 0 or xs.max() >= rect.width or ys.max() >= rect.height:
        raise InvalidGeometryError(
            f"Segmented pixels must lie within [0, {rect.width}) x [0, {rect.height}) for {segmentation.label.name!r}"
        )
    overlay[ys, xs] = color
    return overlay


def draw_segmentation(
    image: np.ndarray,
    segmentations: Sequence[Segmentation],
    draw_confidence: bool = True,
    *,
    style: RenderStyle = DEFAULT_STYLE,
    max_workers: Optional[int] = None,
) -> None:
    """
    Blend each instance mask onto the image, then draw boxes and labels, in place.

    Overlays are built concurrently; compositing onto `image` happens one
    instance at a time in input order.
    """

    check_image(image)
    segmentations = list(segmentations)

    with ThreadPoolExecutor(max_workers=worker_count(max_workers)) as pool:
        overlays: List[np.ndarray] = list(pool.map(_build_mask_overlay, segmentations))

    for segmentation, overlay in zip(segmentations, overlays):
        composite_overlay(image, overlay, segmentation.rectangle.location, style.mask_opacity)
    logger.debug("composited %d segmentation masks", len(overlays))

    draw_bounding_boxes(image, segmentations, draw_confidence, style=style)


def draw_classification_labels(
    image: np.ndarray,
    classifications: Iterable[Classification],
    draw_confidence: bool = True,
    *,
    style: RenderStyle = DEFAULT_STYLE,
) -> None:
    """
    Draw one stacked text block listing every classification in the top-left corner, in place.
    """

    check_image(image)
    lines = [format_label(c.label, c.confidence, draw_confidence) for c in classifications]
    if not lines:
        return

    x = y = style.font_size
    margin = style.font_size / 2
    block_w, block_h, _ = measure_text_block(lines, style)

    fill_rectangle(image, x, y, block_w + style.font_size, block_h + style.font_size, style.classification_background)
    draw_text_block(image, lines, (x + margin, y + margin), style.classification_foreground, style)
    logger.debug("drew %d classification labels", len(lines))
