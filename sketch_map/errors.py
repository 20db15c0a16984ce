# sketch_map/errors.py
"""
Errors raised by the sketch pipeline.

Out-of-range intensity is not an error: FilterConfig clamps it.
"""
from __future__ import annotations


class SketchError(Exception):
    """Base class for pipeline failures."""


class InvalidDimensionError(SketchError, ValueError):
    """Source width or height is not positive. Raised before any stage runs."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(f"invalid image size {width}x{height}")
        self.width = width
        self.height = height


class ResourceExhaustionError(SketchError, MemoryError):
    """A buffer could not be allocated. No partial output is returned."""


__all__ = ["SketchError", "InvalidDimensionError", "ResourceExhaustionError"]
