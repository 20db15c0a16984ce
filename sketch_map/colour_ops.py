# sketch_map/colour_ops.py
from __future__ import annotations

"""
Per-pixel tone operations: BT.601 luma, inversion, colour dodge.

Each op comes in two forms:
  - plane form  : uint8 (H,W) single-channel buffers, used inside the pipeline
  - image form  : uint8 (H,W,4) RGBA buffers with R=G=B, the public layout

All outputs are quantised to 8 bits (round half to even, then clip).
"""

from typing import Optional

import numpy as np

from .core_types import RGBAImage, U8Plane, assert_u8_plane, assert_u8_rgba

# ITU-R BT.601 luma weights.
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def quantise_u8(values: np.ndarray) -> np.ndarray:
    """Round to nearest and clip to [0, 255] as uint8."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def plane_to_rgba(plane: U8Plane, alpha: Optional[np.ndarray] = None) -> RGBAImage:
    """Broadcast a gray plane to R=G=B and stamp alpha (255 when not given)."""
    assert_u8_plane(plane)
    height, width = plane.shape
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[..., 0] = plane
    out[..., 1] = plane
    out[..., 2] = plane
    if alpha is None:
        out[..., 3] = 255
    else:
        if alpha.shape != plane.shape:
            raise ValueError(f"alpha shape {alpha.shape} != plane shape {plane.shape}")
        out[..., 3] = alpha
    return out


# Grayscale


def luma_plane(rgb: np.ndarray) -> U8Plane:
    """BT.601 luma of an (H,W,3+) uint8 array."""
    src = rgb[..., :3].astype(np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    gray = wr * src[..., 0] + wg * src[..., 1] + wb * src[..., 2]
    return quantise_u8(gray)


def to_grayscale(image: RGBAImage) -> RGBAImage:
    """Luma written to R, G and B. Alpha passes through."""
    assert_u8_rgba(image)
    return plane_to_rgba(luma_plane(image), image[..., 3])


# Inversion


def invert_plane(plane: U8Plane) -> U8Plane:
    """255 - v."""
    assert_u8_plane(plane)
    return (255 - plane).astype(np.uint8)


def invert(image: RGBAImage) -> RGBAImage:
    """255 - v on R, G, B. Alpha passes through."""
    assert_u8_rgba(image)
    out = image.copy()
    out[..., :3] = 255 - image[..., :3]
    return out


# Colour dodge


def colour_dodge(front: np.ndarray, back: np.ndarray) -> U8Plane:
    """
    Colour dodge of back by front, element-wise.

      front == 255 -> 255
      otherwise    -> min(255, back * 256 / (255 - front))
    """
    f = np.asarray(front, dtype=np.float64)
    b = np.asarray(back, dtype=np.float64)
    if f.shape != b.shape:
        raise ValueError(f"front shape {f.shape} != back shape {b.shape}")
    saturated = f >= 255.0
    denom = np.where(saturated, 1.0, 255.0 - f)
    result = np.minimum(255.0, (b * 256.0) / denom)
    result = np.where(saturated, 255.0, result)
    return quantise_u8(result)


def colour_dodge_image(front: RGBAImage, back: RGBAImage) -> RGBAImage:
    """
    Dodge two gray RGBA buffers. The R channel of each is used, the result is
    written to R=G=B with alpha 255 (callers restamp the real alpha).
    """
    assert_u8_rgba(front)
    assert_u8_rgba(back)
    return plane_to_rgba(colour_dodge(front[..., 0], back[..., 0]))


__all__ = [
    "LUMA_WEIGHTS",
    "quantise_u8",
    "plane_to_rgba",
    "luma_plane",
    "to_grayscale",
    "invert_plane",
    "invert",
    "colour_dodge",
    "colour_dodge_image",
]
