import numpy as np
import pytest

from sketch_map.constants import MAX_DIMENSION
from sketch_map.errors import InvalidDimensionError
from sketch_map.resize import fit_within, resize_rgba


class TestFitWithin:
    def test_passthrough_when_small(self):
        assert fit_within(800, 600) == (800, 600)
        assert fit_within(1024, 1024) == (1024, 1024)

    def test_landscape(self):
        assert fit_within(2000, 1000) == (1024, 512)

    def test_portrait(self):
        assert fit_within(1000, 3000) == (341, 1024)

    def test_square(self):
        assert fit_within(4096, 4096) == (1024, 1024)

    def test_rounds_half_up(self):
        # 3 * 1024 / 2048 = 1.5 -> 2
        assert fit_within(2048, 3) == (1024, 2)

    def test_never_below_one(self):
        assert fit_within(100000, 1) == (1024, 1)

    @pytest.mark.parametrize(
        "w,h", [(1025, 7), (3000, 2001), (1234, 5678), (99999, 4321), (1500, 1500)]
    )
    def test_bounds_and_aspect(self, w, h):
        nw, nh = fit_within(w, h)
        assert max(nw, nh) == MAX_DIMENSION
        assert nw <= MAX_DIMENSION and nh <= MAX_DIMENSION
        if w >= h:
            assert abs(nh - (h / w) * MAX_DIMENSION) <= 1
        else:
            assert abs(nw - (w / h) * MAX_DIMENSION) <= 1

    def test_custom_max(self):
        assert fit_within(300, 150, max_dimension=100) == (100, 50)

    @pytest.mark.parametrize("w,h", [(0, 10), (10, 0), (-5, 3)])
    def test_invalid_dimension(self, w, h):
        with pytest.raises(InvalidDimensionError):
            fit_within(w, h)


class TestResizeRgba:
    def test_no_resize_returns_input(self, photo):
        assert resize_rgba(photo) is photo

    def test_downscale_shape_and_uniform_colour(self, make_rgba):
        img = make_rgba(300, 120, rgb=(10, 200, 30), alpha=77)
        out = resize_rgba(img, max_dimension=100)
        assert out.shape == (40, 100, 4)
        assert np.all(out[..., :3] == (10, 200, 30))
        assert np.all(out[..., 3] == 77)

    def test_transparent_pixels_keep_colour(self, make_rgba):
        # RGB is resampled apart from alpha, so fully transparent regions do
        # not bleed black into the colour channels.
        img = make_rgba(200, 200, rgb=(250, 250, 250), alpha=0)
        out = resize_rgba(img, max_dimension=50, resample="bilinear")
        assert np.all(out[..., :3] == 250)
        assert np.all(out[..., 3] == 0)

    def test_unknown_resample(self, make_rgba):
        with pytest.raises(ValueError):
            resize_rgba(make_rgba(300, 300), max_dimension=100, resample="sinc")
