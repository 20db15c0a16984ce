# sketch_map/image_io.py
from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from PIL import Image, ImageCms, ImageOps, UnidentifiedImageError

from .core_types import RGBAImage, assert_u8_rgba

"""
Image I/O helpers (RGBA in sRGB) and Pillow resample lookup.

Alpha is kept as loaded; sketches restamp it onto the output.
"""


def pillow_resample_from_name(name: str) -> Image.Resampling:
    """Map a string to a Pillow resampling filter enum."""
    if name == "nearest":
        return Image.Resampling.NEAREST
    if name == "bilinear":
        return Image.Resampling.BILINEAR
    if name == "bicubic":
        return Image.Resampling.BICUBIC
    if name == "lanczos":
        return Image.Resampling.LANCZOS
    raise ValueError(f"unknown resample filter {name!r}")


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im.convert("RGBA"),
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is None:
                return im.convert("RGBA")
            return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            # unreadable profile: fall back to the raw pixels
            return im.convert("RGBA")

    return im.convert("RGBA")


def pil_to_rgba(im: Image.Image) -> RGBAImage:
    """Any Pillow image as a uint8 (H,W,4) array."""
    return np.array(im.convert("RGBA"), dtype=np.uint8)


def rgba_to_pil(image: RGBAImage) -> Image.Image:
    """uint8 (H,W,4) array as an RGBA Pillow image."""
    assert_u8_rgba(image)
    return Image.fromarray(np.ascontiguousarray(image))


def load_image_rgba(path: Path) -> RGBAImage:
    """Load an image with Pillow, normalise orientation and colour, return RGBA."""
    with Image.open(path) as im0:
        im = _convert_to_srgb_rgba(im0)
    return np.array(im, dtype=np.uint8)


def save_png_rgba(path: Path, image: RGBAImage) -> Path:
    """Save an RGBA array as PNG. The suffix is forced to .png."""
    path = Path(path)
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    rgba_to_pil(image).save(path, format="PNG")
    return path


def encode_png(image: RGBAImage) -> bytes:
    """PNG bytes for an RGBA array."""
    buf = io.BytesIO()
    rgba_to_pil(image).save(buf, format="PNG")
    return buf.getvalue()


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "pillow_resample_from_name",
    "pil_to_rgba",
    "rgba_to_pil",
    "load_image_rgba",
    "save_png_rgba",
    "encode_png",
    "is_image_file",
]
