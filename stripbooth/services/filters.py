"""Filter catalog, applied to BGR frames as CSS filter-effects color matrices."""

import math
from dataclasses import dataclass
from typing import Dict, Tuple

import cv2
import numpy as np

from stripbooth.models.booth import FilterType


@dataclass(frozen=True)
class FilterPreset:
    id: FilterType
    name: str
    ops: Tuple[Tuple[str, float], ...]

    @property
    def css(self) -> str:
        if not self.ops:
            return "none"
        parts = []
        for op, amount in self.ops:
            if op == "hue-rotate":
                parts.append(f"{op}({amount:g}deg)")
            else:
                parts.append(f"{op}({amount * 100:g}%)")
        return " ".join(parts)


FILTERS: Dict[FilterType, FilterPreset] = {
    FilterType.none: FilterPreset(FilterType.none, "None", ()),
    FilterType.grayscale: FilterPreset(FilterType.grayscale, "B&W", (("grayscale", 1.0),)),
    FilterType.sepia: FilterPreset(FilterType.sepia, "Sepia", (("sepia", 1.0),)),
    FilterType.invert: FilterPreset(FilterType.invert, "Invert", (("invert", 1.0),)),
    FilterType.warm: FilterPreset(FilterType.warm, "Warm", (("sepia", 0.5), ("saturate", 1.5))),
    FilterType.cool: FilterPreset(FilterType.cool, "Cool", (("hue-rotate", 180.0), ("saturate", 1.2))),
}


def get_filter(filter_type: FilterType) -> FilterPreset:
    return FILTERS[FilterType(filter_type)]


def _grayscale(amount: float) -> np.ndarray:
    a = 1 - min(amount, 1.0)
    return np.array([
        [0.2126 + 0.7874 * a, 0.7152 - 0.7152 * a, 0.0722 - 0.0722 * a],
        [0.2126 - 0.2126 * a, 0.7152 + 0.2848 * a, 0.0722 - 0.0722 * a],
        [0.2126 - 0.2126 * a, 0.7152 - 0.7152 * a, 0.0722 + 0.9278 * a],
    ])


def _sepia(amount: float) -> np.ndarray:
    a = 1 - min(amount, 1.0)
    return np.array([
        [0.393 + 0.607 * a, 0.769 - 0.769 * a, 0.189 - 0.189 * a],
        [0.349 - 0.349 * a, 0.686 + 0.314 * a, 0.168 - 0.168 * a],
        [0.272 - 0.272 * a, 0.534 - 0.534 * a, 0.131 + 0.869 * a],
    ])


def _saturate(amount: float) -> np.ndarray:
    s = amount
    return np.array([
        [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
    ])


def _hue_rotate(degrees: float) -> np.ndarray:
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    return np.array([
        [0.213 + 0.787 * c - 0.213 * s, 0.715 - 0.715 * c - 0.715 * s, 0.072 - 0.072 * c + 0.928 * s],
        [0.213 - 0.213 * c + 0.143 * s, 0.715 + 0.285 * c + 0.140 * s, 0.072 - 0.072 * c - 0.283 * s],
        [0.213 - 0.213 * c - 0.787 * s, 0.715 - 0.715 * c + 0.715 * s, 0.072 + 0.928 * c + 0.072 * s],
    ])


def color_matrix(op: str, amount: float) -> np.ndarray:
    """Return the 3x4 affine RGB matrix (0-255 scale) for one filter operation."""
    if op == "invert":
        a = min(amount, 1.0)
        linear = np.eye(3) * (1 - 2 * a)
        offset = np.full((3, 1), 255.0 * a)
        return np.hstack([linear, offset])

    builders = {
        "grayscale": _grayscale,
        "sepia": _sepia,
        "saturate": _saturate,
        "hue-rotate": _hue_rotate,
    }
    if op not in builders:
        raise ValueError(f"Unknown filter operation: {op}")
    return np.hstack([builders[op](amount), np.zeros((3, 1))])


def apply_filter(frame: np.ndarray, filter_type: FilterType) -> np.ndarray:
    """Apply a catalog filter to a BGR frame and return a new BGR frame."""
    preset = get_filter(filter_type)
    if not preset.ops:
        return frame.copy()

    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB).astype(np.float32)
    for op, amount in preset.ops:
        rgb = cv2.transform(rgb, color_matrix(op, amount).astype(np.float32))
        np.clip(rgb, 0, 255, out=rgb)

    return cv2.cvtColor(np.rint(rgb).astype(np.uint8), cv2.COLOR_RGB2BGR)
