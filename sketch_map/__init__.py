# sketch_map/__init__.py
"""
sketch_map package.

Purpose:
  Turn photographs into pencil or charcoal sketches. See sketch.py for CLI.

Public API:
  render        : RGBA array + FilterConfig -> RGBA sketch (alpha preserved).
  render_pil    : same for Pillow images.
  FilterConfig  : filter type, clamped intensity, grain toggle and seed.
  colour_ops    : luma, inversion, colour dodge.
  blur          : separable Gaussian blur with replicate borders.
  resize        : aspect-preserving bound to MAX_DIMENSION.
  pencil        : two-layer pencil compositor.
  charcoal      : single-layer charcoal tone shaper.
  advisory      : boundary for an external style advisor.
  image_io      : Pillow load/save helpers.

Quick start:
  from sketch_map import render, FilterConfig
  from sketch_map.image_io import load_image_rgba, save_png_rgba
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import advisory
from . import blur
from . import colour_ops
from . import core_types
from . import errors
from . import image_io
from . import resize
from . import utils
from . import pencil
from . import charcoal

from .constants import MAX_DIMENSION
from .core_types import FilterConfig, FilterType
from .errors import InvalidDimensionError, ResourceExhaustionError, SketchError
from .pipeline import render, render_pil  # noqa: E402

__all__ = [
    "__version__",
    "advisory",
    "blur",
    "colour_ops",
    "core_types",
    "errors",
    "image_io",
    "resize",
    "utils",
    "pencil",
    "charcoal",
    "MAX_DIMENSION",
    "FilterConfig",
    "FilterType",
    "SketchError",
    "InvalidDimensionError",
    "ResourceExhaustionError",
    "render",
    "render_pil",
]
