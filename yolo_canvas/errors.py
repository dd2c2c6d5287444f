"""Argument-validation errors raised by yolo_canvas."""


class ImagingError(ValueError):
    """Base class for all yolo_canvas validation failures."""


class InvalidColorFormatError(ImagingError):
    """Hex color is not `#` followed by six hex digits."""

    def __init__(self, value: object):
        super().__init__(f"Invalid hexadecimal color format: {value!r} (expected '#RRGGBB').")
        self.value = value


class ValueOutOfRangeError(ImagingError):
    """A bounded numeric argument (alpha, opacity, ...) is outside its range."""

    def __init__(self, name: str, value: object, low: float, high: float):
        super().__init__(f"{name} must be between {low} and {high}, got {value!r}.")
        self.name = name
        self.value = value


class InvalidGeometryError(ImagingError):
    """Non-positive sizes, out-of-bounds crops or badly shaped images."""
