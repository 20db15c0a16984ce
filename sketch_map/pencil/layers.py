# sketch_map/pencil/layers.py
from __future__ import annotations

"""
Pencil compositor.

Two dodge layers are built from the same gray plane: a fine one that keeps
edge detail and a broad one that carries shading. They are multiplied,
pushed through a contrast curve, and given a little uniform grain.

Hot spots to watch:
  - the broad blur (121 taps at the default radius), threaded via `workers`
"""

import time
from typing import Optional, Tuple

import numpy as np

from ..blur import blur_plane
from ..colour_ops import colour_dodge, invert_plane, quantise_u8
from ..core_types import U8Plane, assert_u8_plane, clamp_intensity
from ..utils import debug_log, format_seconds_compact, print_config_line

# Tunables

# Blur radius of the detail layer. Small keeps pencil lines crisp.
FINE_BLUR_RADIUS = 1.5

# Blur radius of the shading layer. Large spreads tone over broad regions.
BROAD_BLUR_RADIUS = 20.0

# Contrast curve: CONTRAST_BASE at intensity 0, rising by CONTRAST_GAIN at 1.
CONTRAST_BASE = 1.1
CONTRAST_GAIN = 0.4

# Peak-to-peak grain in 8-bit levels at intensity 0. Fades out at intensity 1.
NOISE_AMPLITUDE = 20.0


def dodge_layer(
    gray: U8Plane, inverted: U8Plane, radius: float, workers: int = 1
) -> U8Plane:
    """Blur the inverted plane and dodge the gray plane with it."""
    assert_u8_plane(gray)
    blurred = blur_plane(inverted, radius, workers)
    return colour_dodge(blurred, gray)


def pencil_contrast(intensity: float) -> float:
    return CONTRAST_BASE + clamp_intensity(intensity) * CONTRAST_GAIN


def pencil_noise(
    shape: Tuple[int, int], intensity: float, rng: np.random.Generator
) -> np.ndarray:
    """Zero-centred uniform grain, scaled by (1 - intensity)."""
    scale = NOISE_AMPLITUDE * (1.0 - clamp_intensity(intensity))
    return (rng.random(shape) - 0.5) * scale


def composite_layers(
    fine: U8Plane,
    broad: U8Plane,
    intensity: float,
    noise: Optional[np.ndarray] = None,
) -> U8Plane:
    """
    Multiply the two layers in [0,1], apply the contrast curve, add grain.

      combined = fine/255 * broad/255
      value    = ((combined - 0.5) * contrast + 0.5) * 255 + noise
    """
    assert_u8_plane(fine)
    assert_u8_plane(broad)
    if fine.shape != broad.shape:
        raise ValueError(f"layer shapes differ: {fine.shape} vs {broad.shape}")
    combined = (fine.astype(np.float64) / 255.0) * (broad.astype(np.float64) / 255.0)
    contrast = pencil_contrast(intensity)
    value = ((combined - 0.5) * contrast + 0.5) * 255.0
    if noise is not None:
        value = value + noise
    return quantise_u8(value)


def run_pencil(
    gray: U8Plane,
    intensity: float,
    *,
    rng: Optional[np.random.Generator] = None,
    workers: int = 1,
    debug: bool = False,
) -> U8Plane:
    """
    Full pencil path from a gray plane.

    rng=None renders without grain, which makes the output deterministic.
    """
    assert_u8_plane(gray)
    intensity = clamp_intensity(intensity)
    if debug:
        print_config_line(
            "pencil",
            [
                ("Intensity", intensity),
                ("Fine radius", FINE_BLUR_RADIUS),
                ("Broad radius", BROAD_BLUR_RADIUS),
                ("Contrast", pencil_contrast(intensity)),
                ("Noise", rng is not None),
                ("Workers", workers),
            ],
            debug=True,
        )

    t0 = time.perf_counter()
    inverted = invert_plane(gray)
    fine = dodge_layer(gray, inverted, FINE_BLUR_RADIUS, workers)
    t1 = time.perf_counter()
    broad = dodge_layer(gray, inverted, BROAD_BLUR_RADIUS, workers)
    t2 = time.perf_counter()
    noise = pencil_noise(gray.shape, intensity, rng) if rng is not None else None
    out = composite_layers(fine, broad, intensity, noise)
    t3 = time.perf_counter()

    if debug:
        debug_log(
            f"pencil fine={format_seconds_compact(t1 - t0)}  "
            f"broad={format_seconds_compact(t2 - t1)}  "
            f"composite={format_seconds_compact(t3 - t2)}"
        )
    return out


__all__ = [
    "FINE_BLUR_RADIUS",
    "BROAD_BLUR_RADIUS",
    "CONTRAST_BASE",
    "CONTRAST_GAIN",
    "NOISE_AMPLITUDE",
    "dodge_layer",
    "pencil_contrast",
    "pencil_noise",
    "composite_layers",
    "run_pencil",
]
