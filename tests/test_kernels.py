"""Tests for kernel-matrix generators."""

import math

import pytest
import torch

from imgproc.core import (
    ConfigurationError,
    Convolution,
    LucriConfig,
    convolution,
    eyes,
    gray,
    identity,
    lucri,
    lucri_view,
    lucri_window_size,
    smooth,
)


def _context(tx, ty, sx, sy, ww=3, wh=3, width=7, height=7):
    t = lambda v: torch.tensor([[float(v)]], dtype=torch.float64)
    return Convolution(
        target_x=t(tx), target_y=t(ty), source_x=t(sx), source_y=t(sy),
        ww=ww, wh=wh, width=width, height=height,
    )


class TestConstantGenerators:
    def test_identity(self):
        m = identity()(_context(1, 1, 0, 0))
        assert torch.equal(m, torch.eye(3, dtype=torch.float64))

    def test_gray(self):
        m = gray()(_context(1, 1, 0, 0))
        assert torch.allclose(m, torch.full((3, 3), 1 / 3, dtype=torch.float64))

    def test_smooth_divides_by_area(self):
        m = smooth(0.6)(_context(1, 1, 0, 0, ww=3, wh=2))
        assert torch.allclose(m, torch.eye(3, dtype=torch.float64) * 0.1)

    def test_eyes_batch(self):
        m = eyes(torch.tensor([[1.0, 2.0]], dtype=torch.float64))
        assert m.shape == (1, 2, 3, 3)
        assert torch.equal(m[0, 1], torch.eye(3, dtype=torch.float64) * 2)

    def test_gray_pixel(self):
        img = torch.tensor([30.0, 60.0, 120.0], dtype=torch.float64).view(3, 1, 1)
        out = convolution(1, 1, gray())(img)
        assert out.flatten().tolist() == pytest.approx([70.0, 70.0, 70.0])

    def test_smooth_constant_image(self):
        img = torch.empty(3, 6, 6, dtype=torch.float64)
        img[0], img[1], img[2] = 10.0, 200.0, 37.5
        out = convolution(3, 3, smooth(1.0))(img)
        assert out.shape == (3, 4, 4)
        assert torch.allclose(out, img[:, :4, :4])

    def test_smooth_mean(self):
        img = torch.arange(27, dtype=torch.float64).view(3, 3, 3)
        out = convolution(3, 3, smooth(2.0))(img)
        assert out.flatten().tolist() == pytest.approx([8.0, 26.0, 44.0])


class TestLucri:
    @pytest.fixture
    def img(self):
        return torch.full((3, 7, 7), 100.0, dtype=torch.float64)

    def test_focus_passes_through(self, img):
        gen = lucri(img, 1.0, 0.5, 4.0, 0.2, 0.8)
        m = gen(_context(3, 3, 3, 3))
        assert torch.allclose(m[0, 0], torch.eye(3, dtype=torch.float64) * 0.8)

    def test_focus_neighbours_zero(self, img):
        gen = lucri(img, 1.0, 0.5, 4.0, 0.2, 0.8)
        for sx, sy in [(2, 2), (3, 2), (4, 3), (4, 4)]:
            m = gen(_context(3, 3, sx, sy))
            assert torch.count_nonzero(m) == 0

    def test_center_output(self):
        img = torch.empty(3, 7, 7, dtype=torch.float64)
        img[0], img[1], img[2] = 10.0, 20.0, 30.0
        out = lucri_view(img, 1.0, 0.5, 4.0, 0.2, 0.8)(img)
        assert out.shape == (3, 5, 5)
        assert out[:, 2, 2].tolist() == pytest.approx([8.0, 16.0, 24.0])

    def test_periphery_gaussian(self):
        img = torch.zeros(3, 21, 21, dtype=torch.float64)
        gen = lucri(img, 1.0, 0.2, 0.5, 0.4, 1.0)
        # source far from the focus: acuity and sensitivity near their minimum
        cx = cy = 10
        radius2 = (21 // 2 * 1.0 / 2) ** 2 * 2
        rad = math.exp(-((0 - cx) ** 2 + (0 - cy) ** 2) / radius2)
        acuity = 0.5 * rad + 0.2 * (1 - rad)
        sensitivity = 1.0 * rad + 0.4 * (1 - rad)
        sigma2 = (1 / acuity / 2) ** 2
        expected = math.exp(-2 / sigma2 / 2) / (2 * math.pi) / sigma2 * sensitivity

        m = gen(_context(1, 1, 0, 0, ww=7, wh=7, width=21, height=21))
        assert m[0, 0, 0, 0].item() == pytest.approx(expected)
        assert m[0, 0, 0, 1].item() == 0
        assert m[0, 0, 1, 1].item() == pytest.approx(expected)

    def test_weight_decays_with_distance(self):
        img = torch.zeros(3, 21, 21, dtype=torch.float64)
        gen = lucri(img, 1.0, 0.2, 0.5, 1.0, 1.0)
        near = gen(_context(1, 1, 1, 1, ww=7, wh=7, width=21, height=21))[0, 0, 0, 0]
        far = gen(_context(1, 1, 4, 1, ww=7, wh=7, width=21, height=21))[0, 0, 0, 0]
        assert near > far > 0

    def test_batch_shape(self):
        img = torch.rand(3, 12, 15, dtype=torch.float64) * 255
        cfg = LucriConfig(min_acuity=0.25, max_acuity=0.6)
        out = cfg.build()(img)
        size = lucri_window_size(0.25)
        assert out.shape == (3, 12 - size + 1, 15 - size + 1)
        assert torch.isfinite(out).all()

    def test_single_pixel_image_empty(self):
        img = torch.full((3, 1, 1), 10.0, dtype=torch.float64)
        out = LucriConfig().build()(img)
        assert out.shape == (3, 0, 0)
        assert out.numel() == 0

    def test_single_pixel_image_fitting_window(self):
        img = torch.full((3, 1, 1), 10.0, dtype=torch.float64)
        out = lucri_view(img, 1.0, 4.0, 4.0, 0.2, 0.8)(img)
        assert out.shape == (3, 1, 1)
        assert out.flatten().tolist() == pytest.approx([8.0, 8.0, 8.0])

    @pytest.mark.parametrize("min_acuity, size", [(0.05, 21), (0.2, 7), (0.25, 5), (0.5, 3), (4.0, 1)])
    def test_window_size(self, min_acuity, size):
        assert lucri_window_size(min_acuity) == size

    @pytest.mark.parametrize("args", [
        (0.0, 0.1, 0.5, 0.2, 1.0),
        (1.0, 0.0, 0.5, 0.2, 1.0),
        (1.0, 0.6, 0.5, 0.2, 1.0),
        (1.0, 0.1, 0.5, -0.1, 1.0),
        (1.0, 0.1, 0.5, 0.9, 0.3),
    ])
    def test_invalid_parameters(self, img, args):
        with pytest.raises(ConfigurationError):
            lucri(img, *args)
