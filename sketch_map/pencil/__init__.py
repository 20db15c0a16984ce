# sketch_map/pencil/__init__.py
"""
Pencil-mode API.

Provides:
  run_pencil(gray, intensity, *, rng=None, workers=1, debug=False)
    Render a pencil sketch plane from a uint8 (H,W) luma plane.

    Args:
      gray      : uint8 [H,W]
      intensity : float in [0,1], clamped
      rng       : numpy Generator for grain, or None for a grain-free render
      workers   : threads for the blur passes

    Returns:
      uint8 [H,W] sketch plane. Alpha is stamped by callers.

Notes:
  - Fine layer (radius 1.5) x broad layer (radius 20), both colour-dodged.
  - Contrast 1.1..1.5 and grain 20..0 levels across the intensity range.
"""

from .layers import composite_layers, dodge_layer, pencil_noise, run_pencil

__all__ = ["dodge_layer", "composite_layers", "pencil_noise", "run_pencil"]
