# sketch_map/constants.py
"""
Shared tunables used across the project.

- Output size bound (MAX_DIMENSION)
- Blur radius to Gaussian sigma mapping (BLUR_*)
- Filter names and defaults for the CLI
"""
from __future__ import annotations

from typing import Tuple

# =========================
# Output size
# =========================

# The larger side of the working image is capped to this many pixels.
MAX_DIMENSION = 1024

# Default Pillow filter used when downscaling.
DEFAULT_RESAMPLE = "lanczos"

# =========================
# Blur
# =========================

# Gaussian sigma per unit of blur radius. 1.0 matches a CSS blur(r), which
# treats r as the standard deviation.
BLUR_SIGMA_PER_RADIUS = 1.0

# Kernel half-width in sigmas. 3 sigma keeps >99.7% of the weight.
BLUR_TRUNCATE = 3.0

# Below this many rows (or columns) the blur passes stay single-threaded.
BLUR_MIN_SPAN_FOR_THREADS = 256

# =========================
# Filters / CLI defaults
# =========================

FILTER_TYPES: Tuple[str, ...] = ("pencil", "charcoal")
DEFAULT_FILTER = "pencil"
DEFAULT_INTENSITY = 0.5

# Input extensions picked up in folder mode.
IMAGE_EXTS: Tuple[str, ...] = (".png", ".jpg", ".jpeg", ".webp")

# Suffix appended to output stems. Files already carrying it are skipped.
OUTPUT_SUFFIX = "_sketch"

__all__ = [
    "MAX_DIMENSION",
    "DEFAULT_RESAMPLE",
    "BLUR_SIGMA_PER_RADIUS",
    "BLUR_TRUNCATE",
    "BLUR_MIN_SPAN_FOR_THREADS",
    "FILTER_TYPES",
    "DEFAULT_FILTER",
    "DEFAULT_INTENSITY",
    "IMAGE_EXTS",
    "OUTPUT_SUFFIX",
]
