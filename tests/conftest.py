import numpy as np
import pytest


def _make_rgba(width, height, rgb=(128, 128, 128), alpha=255):
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[..., :3] = rgb
    img[..., 3] = alpha
    return img


@pytest.fixture
def make_rgba():
    """Factory for solid-colour RGBA arrays: make_rgba(w, h, rgb, alpha)."""
    return _make_rgba


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def photo(rng):
    """A 48x32 noisy colour image with a soft gradient and random alpha."""
    h, w = 32, 48
    img = np.empty((h, w, 4), dtype=np.uint8)
    xs = np.linspace(0, 255, w)[None, :]
    ys = np.linspace(0, 255, h)[:, None]
    img[..., 0] = np.clip(xs + rng.integers(-20, 21, (h, w)), 0, 255)
    img[..., 1] = np.clip(ys + rng.integers(-20, 21, (h, w)), 0, 255)
    img[..., 2] = rng.integers(0, 256, (h, w))
    img[..., 3] = rng.integers(0, 256, (h, w))
    return img


@pytest.fixture
def dot_image():
    """10x10 white image with a single black pixel at (5, 5)."""
    img = _make_rgba(10, 10, rgb=(255, 255, 255))
    img[5, 5, :3] = 0
    return img
