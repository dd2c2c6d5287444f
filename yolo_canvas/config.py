from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from .colors import Rgba, validate_rgba
from .errors import ValueOutOfRangeError


PathLike = Union[str, Path]

CONFIDENCE_CUTOFF = 0.75


@dataclass(frozen=True)
class LetterboxConfig:
    new_shape: Tuple[int, int] = (640, 640)
    color: Tuple[int, int, int] = (0, 0, 0)


@dataclass(frozen=True)
class RenderStyle:
    """
    Fixed visual constants shared by the renderers.

    Defaults must stay as they are for output compatibility with previously
    rendered images; override them only for custom deployments.
    """

    font_size: int = 16
    # Stroke thickness used to render the bold Hershey font.
    font_thickness: int = 2
    border_width: int = 2
    shadow_offset: int = 1
    shadow_color: Rgba = (44, 44, 44, 180)
    foreground_color: Rgba = (248, 240, 227, 224)
    label_alpha: int = 128
    mask_opacity: float = 0.28
    classification_background: Rgba = (0, 0, 0, 60)
    classification_foreground: Rgba = (255, 255, 255, 255)
    line_spacing: float = 1.5

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError("font_size must be > 0")
        if self.font_thickness <= 0:
            raise ValueError("font_thickness must be > 0")
        if self.border_width <= 0:
            raise ValueError("border_width must be > 0")
        if self.shadow_offset < 0:
            raise ValueError("shadow_offset must be >= 0")
        if self.line_spacing <= 0:
            raise ValueError("line_spacing must be > 0")
        if not 0 <= self.label_alpha <= 255:
            raise ValueOutOfRangeError("label_alpha", self.label_alpha, 0, 255)
        if not 0.0 <= self.mask_opacity <= 1.0:
            raise ValueOutOfRangeError("mask_opacity", self.mask_opacity, 0.0, 1.0)
        for name in ("shadow_color", "foreground_color", "classification_background", "classification_foreground"):
            object.__setattr__(self, name, validate_rgba(name, tuple(getattr(self, name))))


DEFAULT_STYLE = RenderStyle()

_COLOR_KEYS = {"shadow_color", "foreground_color", "classification_background", "classification_foreground"}


def _require_color(payload: Dict[str, Any], key: str) -> Rgba:
    value = payload[key]
    if not isinstance(value, list) or len(value) != 4:
        raise ValueError(f"{key} must be a list of 4 integers [r, g, b, a]")
    if any(isinstance(v, bool) or not isinstance(v, int) for v in value):
        raise ValueError(f"{key} must be a list of 4 integers [r, g, b, a]")
    return validate_rgba(key, tuple(value))


def _require_number(payload: Dict[str, Any], key: str) -> float:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return value


def load_render_style(path: PathLike) -> RenderStyle:
    """
    Load a `RenderStyle` from a JSON object. Missing keys keep their defaults.

        {"font_size": 20, "mask_opacity": 0.4, "shadow_color": [0, 0, 0, 200]}
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Render style not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid render style JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Render style must be a JSON object")

    allowed = {f.name for f in fields(RenderStyle)}
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown render style keys: {unknown}")

    kwargs: Dict[str, Any] = {}
    for key in payload:
        if key in _COLOR_KEYS:
            kwargs[key] = _require_color(payload, key)
        elif key in {"mask_opacity", "line_spacing"}:
            kwargs[key] = float(_require_number(payload, key))
        else:
            value = _require_number(payload, key)
            if not isinstance(value, int):
                raise ValueError(f"{key} must be an integer")
            kwargs[key] = value

    return RenderStyle(**kwargs)
