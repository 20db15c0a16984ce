# sketch_map/resize.py
from __future__ import annotations

"""
Bound an RGBA image to a maximum side length, preserving aspect ratio.
"""

import math
from typing import Tuple

import numpy as np
from PIL import Image

from .constants import DEFAULT_RESAMPLE, MAX_DIMENSION
from .core_types import RGBAImage, assert_u8_rgba
from .errors import InvalidDimensionError
from .image_io import pillow_resample_from_name


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def fit_within(
    width: int, height: int, max_dimension: int = MAX_DIMENSION
) -> Tuple[int, int]:
    """
    Target (width, height) so that neither side exceeds max_dimension.

    Passthrough when both sides fit. Otherwise the larger side becomes
    max_dimension and the other is rounded half up, never below 1.
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensionError(width, height)
    if max_dimension <= 0:
        raise ValueError(f"max_dimension must be positive, got {max_dimension}")
    if width <= max_dimension and height <= max_dimension:
        return width, height
    if width > height:
        new_h = _round_half_up(height * max_dimension / width)
        return max_dimension, max(1, new_h)
    new_w = _round_half_up(width * max_dimension / height)
    return max(1, new_w), max_dimension


def resize_rgba(
    image: RGBAImage,
    max_dimension: int = MAX_DIMENSION,
    resample: str = DEFAULT_RESAMPLE,
) -> RGBAImage:
    """
    Downscale so the larger side is at most max_dimension.

    RGB and alpha are resampled as separate planes so colour is not
    premultiplied by alpha. Returns the input array when no resize is needed.
    """
    assert_u8_rgba(image)
    height0, width0 = image.shape[0], image.shape[1]
    new_w, new_h = fit_within(width0, height0, max_dimension)
    if (new_w, new_h) == (width0, height0):
        return image

    res_enum = pillow_resample_from_name(resample)
    rgb = np.array(
        Image.fromarray(np.ascontiguousarray(image[..., :3])).resize(
            (new_w, new_h), res_enum
        ),
        dtype=np.uint8,
    )
    alpha = np.array(
        Image.fromarray(np.ascontiguousarray(image[..., 3])).resize(
            (new_w, new_h), res_enum
        ),
        dtype=np.uint8,
    )
    out = np.empty((new_h, new_w, 4), dtype=np.uint8)
    out[..., :3] = rgb
    out[..., 3] = alpha
    return out


__all__ = ["fit_within", "resize_rgba"]
