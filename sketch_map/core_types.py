# sketch_map/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import math
from dataclasses import dataclass
from typing import Literal, Optional, Tuple, cast

import numpy as np
from numpy.typing import NDArray

from .constants import DEFAULT_FILTER, DEFAULT_INTENSITY, FILTER_TYPES

# Basic aliases

RGBAImage = NDArray[np.uint8]  # (H, W, 4)
U8Plane = NDArray[np.uint8]  # (H, W), single channel of a gray buffer
FloatPlane = NDArray[np.float64]  # (H, W), unquantised stage output
Size = Tuple[int, int]  # (width, height)

FilterType = Literal["pencil", "charcoal"]


# Small helpers


def clamp_value(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi]."""
    return lo if value < lo else hi if value > hi else value


def clamp_intensity(value: float) -> float:
    """Clamp an intensity to [0, 1]. NaN maps to 0."""
    v = float(value)
    if math.isnan(v):
        return 0.0
    return clamp_value(v, 0.0, 1.0)


def parse_filter_type(label: str) -> FilterType:
    """Normalise a filter label ('Pencil', ' charcoal ') to a FilterType."""
    name = str(label).strip().lower()
    if name not in FILTER_TYPES:
        raise ValueError(
            f"unknown filter type {label!r}; expected one of {', '.join(FILTER_TYPES)}"
        )
    return cast(FilterType, name)


# Value objects


@dataclass(frozen=True)
class FilterConfig:
    """
    What to render and how strongly.

    intensity is clamped to [0, 1] on construction. noise toggles the pencil
    texture step; seed pins its RNG for reproducible output.
    """

    filter_type: FilterType = cast(FilterType, DEFAULT_FILTER)
    intensity: float = DEFAULT_INTENSITY
    noise: bool = True
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "filter_type", parse_filter_type(self.filter_type))
        object.__setattr__(self, "intensity", clamp_intensity(self.intensity))

    def with_changes(self, **changes) -> "FilterConfig":
        """Copy with some fields replaced (re-validated)."""
        fields = {
            "filter_type": self.filter_type,
            "intensity": self.intensity,
            "noise": self.noise,
            "seed": self.seed,
        }
        fields.update(changes)
        return FilterConfig(**fields)


# Array validation


def assert_u8_rgba(image: np.ndarray) -> RGBAImage:
    """Validate a uint8 (H,W,4) image and return it typed as RGBAImage."""
    if not isinstance(image, np.ndarray):
        raise TypeError("expected a numpy array")
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 4:
        raise TypeError(f"expected uint8 (H,W,4) image, got {image.dtype} {image.shape}")
    return image  # type: ignore[return-value]


def assert_u8_plane(plane: np.ndarray) -> U8Plane:
    """Validate a uint8 (H,W) plane and return it typed as U8Plane."""
    if plane.dtype != np.uint8 or plane.ndim != 2:
        raise TypeError(f"expected uint8 (H,W) plane, got {plane.dtype} {plane.shape}")
    return plane  # type: ignore[return-value]


def image_size(image: np.ndarray) -> Size:
    """(width, height) of an (H, W, ...) array."""
    return int(image.shape[1]), int(image.shape[0])


__all__ = [
    # aliases / types
    "RGBAImage",
    "U8Plane",
    "FloatPlane",
    "Size",
    "FilterType",
    # value objects
    "FilterConfig",
    # helpers
    "clamp_value",
    "clamp_intensity",
    "parse_filter_type",
    "assert_u8_rgba",
    "assert_u8_plane",
    "image_size",
]
