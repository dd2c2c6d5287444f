"""
Image-space pre/post-processing around YOLO-style vision models.

Letterboxing and tensor packing on the way in; pixel scanning, coordinate
remapping and rendering of detections, instance masks and classification
labels on the way out. Depends on NumPy and OpenCV only; the inference
engine itself is supplied by the caller.
"""

from .types import Classification, Detection, Label, ObjectDetection, Pixel, Rectangle, Segmentation
from .errors import ImagingError, InvalidColorFormatError, InvalidGeometryError, ValueOutOfRangeError
from .colors import color_for_class_id, hex_to_rgba
from .config import CONFIDENCE_CUTOFF, DEFAULT_STYLE, LetterboxConfig, RenderStyle, load_render_style
from .letterbox import letterbox, resize_image
from .tensor import extract_pixels
from .scanner import scan_pixels, sort_pixels
from .remap import (
    crop_segmented_area,
    letterbox_geometry,
    point_to_model,
    point_to_original,
    rect_to_model,
    rect_to_original,
)
from .segmentation import segmentation_from_mask
from .visualize import draw_bounding_boxes, draw_classification_labels, draw_segmentation, format_label
from .runtime import InferencePipeline, InferenceResult, PreparedInput
from .metadata import load_class_names, load_labels

__all__ = [
    "Classification",
    "Detection",
    "Label",
    "ObjectDetection",
    "Pixel",
    "Rectangle",
    "Segmentation",
    "ImagingError",
    "InvalidColorFormatError",
    "InvalidGeometryError",
    "ValueOutOfRangeError",
    "color_for_class_id",
    "hex_to_rgba",
    "CONFIDENCE_CUTOFF",
    "DEFAULT_STYLE",
    "LetterboxConfig",
    "RenderStyle",
    "load_render_style",
    "letterbox",
    "resize_image",
    "extract_pixels",
    "scan_pixels",
    "sort_pixels",
    "crop_segmented_area",
    "letterbox_geometry",
    "point_to_model",
    "point_to_original",
    "rect_to_model",
    "rect_to_original",
    "segmentation_from_mask",
    "draw_bounding_boxes",
    "draw_classification_labels",
    "draw_segmentation",
    "format_label",
    "InferencePipeline",
    "InferenceResult",
    "PreparedInput",
    "load_class_names",
    "load_labels",
]
