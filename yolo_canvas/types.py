from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union


@dataclass(frozen=True)
class Rectangle:
    """
    Integer box (x, y, width, height).

    The coordinate space (model/letterboxed or original image) is not stored
    here; callers keep track of it.
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def location(self) -> Tuple[int, int]:
        return self.x, self.y

    def as_xyxy(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.right, self.bottom

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "Rectangle":
        left, top = int(round(x1)), int(round(y1))
        return cls(left, top, int(round(x2)) - left, int(round(y2)) - top)


@dataclass(frozen=True)
class Pixel:
    x: int
    y: int
    confidence: float


@dataclass(frozen=True)
class Label:
    """Class name plus its display color as a `#RRGGBB` string."""

    name: str
    color: str


@dataclass(frozen=True)
class ObjectDetection:
    label: Label
    confidence: float
    rectangle: Rectangle


@dataclass(frozen=True)
class Segmentation:
    """
    Instance mask result.

    `rectangle` is in original-image space; every pixel in `segmented_pixels`
    is local to the rectangle origin, i.e. inside [0, width) x [0, height).
    """

    label: Label
    confidence: float
    rectangle: Rectangle
    segmented_pixels: Tuple[Pixel, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Classification:
    label: str
    confidence: float


Detection = Union[ObjectDetection, Segmentation, Classification]


def to_percent(confidence: float) -> int:
    return int(round(confidence * 100))
