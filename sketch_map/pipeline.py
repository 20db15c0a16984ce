# sketch_map/pipeline.py
from __future__ import annotations

"""
Pipeline entry point.

  render(source, config) -> RGBAImage

Stages:
  resize -> luma -> pencil | charcoal -> stamp source alpha

Each call owns its buffers; nothing is cached between calls. The pencil
grain is the only random step and follows config.noise / config.seed.
"""

import time
from typing import Optional

import numpy as np
from PIL import Image

from .charcoal.tone import run_charcoal
from .colour_ops import luma_plane, plane_to_rgba
from .constants import DEFAULT_RESAMPLE, MAX_DIMENSION
from .core_types import FilterConfig, RGBAImage, assert_u8_rgba, image_size
from .errors import InvalidDimensionError, ResourceExhaustionError
from .image_io import pil_to_rgba, rgba_to_pil
from .pencil.layers import run_pencil
from .resize import resize_rgba
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string


def _noise_rng(config: FilterConfig) -> Optional[np.random.Generator]:
    if not config.noise:
        return None
    return np.random.default_rng(config.seed)


def render(
    source: RGBAImage,
    config: FilterConfig,
    *,
    max_dimension: int = MAX_DIMENSION,
    resample: str = DEFAULT_RESAMPLE,
    workers: int = 1,
    debug: bool = False,
) -> RGBAImage:
    """
    Render a pencil or charcoal sketch of an RGBA image.

    Args:
      source        : uint8 [H,W,4]
      config        : FilterConfig (intensity already clamped)
      max_dimension : larger output side is capped to this
      resample      : Pillow filter name used when downscaling
      workers       : threads for the blur passes
      debug         : per-stage timings on the debug log

    Returns:
      uint8 [h,w,4] with R=G=B and alpha equal to the resized source alpha.

    Raises:
      TypeError               : source is not a uint8 RGBA array
      InvalidDimensionError   : source has an empty side
      ResourceExhaustionError : a buffer could not be allocated
    """
    assert_u8_rgba(source)
    width0, height0 = image_size(source)
    if width0 <= 0 or height0 <= 0:
        raise InvalidDimensionError(width0, height0)

    try:
        t0 = time.perf_counter()
        work = resize_rgba(source, max_dimension, resample)
        alpha = work[..., 3]
        t1 = time.perf_counter()
        gray = luma_plane(work)
        t2 = time.perf_counter()

        if config.filter_type == "pencil":
            plane = run_pencil(
                gray,
                config.intensity,
                rng=_noise_rng(config),
                workers=workers,
                debug=debug,
            )
        else:
            plane = run_charcoal(gray, config.intensity, workers=workers, debug=debug)
        t3 = time.perf_counter()

        out = plane_to_rgba(plane, alpha)
    except MemoryError as e:
        raise ResourceExhaustionError(
            f"out of memory rendering {width0}x{height0} image"
        ) from e

    if debug:
        width, height = image_size(out)
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Filter", config.filter_type),
                    ("Size", f"{width0}x{height0} -> {width}x{height}"),
                    ("Resize", format_seconds_compact(t1 - t0)),
                    ("Luma", format_seconds_compact(t2 - t1)),
                    ("Filter time", format_seconds_compact(t3 - t2)),
                ]
            )
        )
    return out


def render_pil(image: Image.Image, config: FilterConfig, **kwargs) -> Image.Image:
    """render() for Pillow callers. Any mode is converted to RGBA first."""
    return rgba_to_pil(render(pil_to_rgba(image), config, **kwargs))


__all__ = ["render", "render_pil"]
