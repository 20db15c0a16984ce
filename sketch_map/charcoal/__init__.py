# sketch_map/charcoal/__init__.py
"""
Charcoal (single dodge layer + tone shaping) utilities.
"""

from .tone import charcoal_blur_radius, run_charcoal, shape_tone

__all__ = ["charcoal_blur_radius", "shape_tone", "run_charcoal"]
