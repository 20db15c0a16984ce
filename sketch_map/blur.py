# sketch_map/blur.py
from __future__ import annotations

"""
Separable Gaussian blur with replicate borders.

Radius maps to sigma via BLUR_SIGMA_PER_RADIUS; the kernel spans
ceil(BLUR_TRUNCATE * sigma) taps each side and is normalised to sum 1.

Horizontal pass then vertical pass. Each output sample is accumulated tap by
tap in a fixed order, so splitting the horizontal pass by rows and the
vertical pass by columns across threads gives bit-identical output.
"""

import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .colour_ops import quantise_u8
from .constants import BLUR_MIN_SPAN_FOR_THREADS, BLUR_SIGMA_PER_RADIUS, BLUR_TRUNCATE
from .core_types import FloatPlane, RGBAImage, U8Plane, assert_u8_plane, assert_u8_rgba
from .utils import split_span_into_parts


def sigma_for_radius(radius: float) -> float:
    """Gaussian standard deviation for a blur radius."""
    r = float(radius)
    if not math.isfinite(r) or r <= 0.0:
        raise ValueError(f"blur radius must be a positive number, got {radius!r}")
    return r * BLUR_SIGMA_PER_RADIUS


def gaussian_kernel_1d(radius: float) -> np.ndarray:
    """Normalised 1D Gaussian taps, length 2*half+1."""
    sigma = sigma_for_radius(radius)
    half = max(1, int(math.ceil(BLUR_TRUNCATE * sigma)))
    x = np.arange(-half, half + 1, dtype=np.float64)
    kernel = np.exp(-0.5 * (x / sigma) ** 2)
    return kernel / kernel.sum()


def _convolve_axis(src: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    """1D convolution of a 2D float64 array along axis, edge-replicated."""
    half = kernel.shape[0] // 2
    pad = [(0, 0), (0, 0)]
    pad[axis] = (half, half)
    padded = np.pad(src, pad, mode="edge")
    n = src.shape[axis]
    out = np.zeros(src.shape, dtype=np.float64)
    for i, w in enumerate(kernel):
        if axis == 1:
            out += w * padded[:, i : i + n]
        else:
            out += w * padded[i : i + n, :]
    return out


def _convolve_axis_threaded(
    src: np.ndarray, kernel: np.ndarray, axis: int, workers: int
) -> np.ndarray:
    """
    Row-split horizontal pass or column-split vertical pass.
    Each chunk carries the full extent along the convolution axis, so no halo.
    """
    split_axis = 1 - axis
    span = src.shape[split_axis]
    if workers <= 1 or span < BLUR_MIN_SPAN_FOR_THREADS:
        return _convolve_axis(src, kernel, axis)

    out = np.empty(src.shape, dtype=np.float64)

    def run_one(chunk):
        start, end = chunk
        if split_axis == 0:
            return start, end, _convolve_axis(src[start:end, :], kernel, axis)
        return start, end, _convolve_axis(src[:, start:end], kernel, axis)

    with ThreadPoolExecutor(max_workers=workers) as ex:
        for start, end, part in ex.map(run_one, split_span_into_parts(span, workers)):
            if split_axis == 0:
                out[start:end, :] = part
            else:
                out[:, start:end] = part
    return out


def gaussian_blur_plane(
    plane: np.ndarray, radius: float, workers: int = 1
) -> FloatPlane:
    """Unquantised separable Gaussian blur of a 2D array. Returns float64."""
    if plane.ndim != 2:
        raise TypeError(f"expected (H,W) plane, got shape {plane.shape}")
    kernel = gaussian_kernel_1d(radius)
    src = plane.astype(np.float64)
    horiz = _convolve_axis_threaded(src, kernel, axis=1, workers=workers)
    return _convolve_axis_threaded(horiz, kernel, axis=0, workers=workers)


def blur_plane(plane: U8Plane, radius: float, workers: int = 1) -> U8Plane:
    """Gaussian blur of a uint8 plane, quantised back to uint8."""
    assert_u8_plane(plane)
    return quantise_u8(gaussian_blur_plane(plane, radius, workers))


def blur_image(image: RGBAImage, radius: float, workers: int = 1) -> RGBAImage:
    """Blur R, G and B independently. Alpha passes through."""
    assert_u8_rgba(image)
    out = image.copy()
    for c in range(3):
        out[..., c] = blur_plane(np.ascontiguousarray(image[..., c]), radius, workers)
    return out


__all__ = [
    "sigma_for_radius",
    "gaussian_kernel_1d",
    "gaussian_blur_plane",
    "blur_plane",
    "blur_image",
]
