# sketch_map/charcoal/tone.py
from __future__ import annotations

"""
Charcoal tone shaping.

A single dodge layer whose blur widens with intensity, followed by a contrast
curve and a threshold that pushes darker tones further down.
"""

import time

import numpy as np

from ..blur import blur_plane
from ..colour_ops import colour_dodge, invert_plane, quantise_u8
from ..core_types import U8Plane, assert_u8_plane, clamp_intensity
from ..utils import debug_log, format_seconds_compact, print_config_line

# Tunables

# Blur radius = BLUR_BASE + intensity * BLUR_GAIN. Wider blur reads softer.
BLUR_BASE = 1.0
BLUR_GAIN = 15.0

# Contrast = 1 + intensity * CONTRAST_GAIN.
CONTRAST_GAIN = 0.5

# Tones below (1 - intensity) are multiplied by this.
DARKEN_FACTOR = 0.8


def charcoal_blur_radius(intensity: float) -> float:
    return clamp_intensity(intensity) * BLUR_GAIN + BLUR_BASE


def shape_tone(dodge: U8Plane, intensity: float) -> U8Plane:
    """
    Contrast curve plus threshold darkening on a dodge plane.

      value = ((v/255 - 0.5) * contrast + 0.5) * 255
      value *= DARKEN_FACTOR  where value/255 < 1 - intensity
    """
    assert_u8_plane(dodge)
    intensity = clamp_intensity(intensity)
    contrast = 1.0 + intensity * CONTRAST_GAIN
    threshold = 1.0 - intensity
    value = ((dodge.astype(np.float64) / 255.0 - 0.5) * contrast + 0.5) * 255.0
    value = np.where(value / 255.0 < threshold, value * DARKEN_FACTOR, value)
    return quantise_u8(value)


def run_charcoal(
    gray: U8Plane,
    intensity: float,
    *,
    workers: int = 1,
    debug: bool = False,
) -> U8Plane:
    """Full charcoal path from a gray plane. Deterministic."""
    assert_u8_plane(gray)
    intensity = clamp_intensity(intensity)
    radius = charcoal_blur_radius(intensity)
    if debug:
        print_config_line(
            "charcoal",
            [("Intensity", intensity), ("Blur radius", radius), ("Workers", workers)],
            debug=True,
        )

    t0 = time.perf_counter()
    blurred = blur_plane(invert_plane(gray), radius, workers)
    t1 = time.perf_counter()
    out = shape_tone(colour_dodge(blurred, gray), intensity)
    t2 = time.perf_counter()

    if debug:
        debug_log(
            f"charcoal blur={format_seconds_compact(t1 - t0)}  "
            f"tone={format_seconds_compact(t2 - t1)}"
        )
    return out


__all__ = [
    "BLUR_BASE",
    "BLUR_GAIN",
    "CONTRAST_GAIN",
    "DARKEN_FACTOR",
    "charcoal_blur_radius",
    "shape_tone",
    "run_charcoal",
]
