"""Tests for filter configuration."""

import pytest
import torch

from imgproc.core import (
    ConfigurationError,
    HueFilterConfig,
    LucriConfig,
    SmoothConfig,
    build_pipeline,
    build_stage,
)


class TestHueFilterConfig:
    def test_defaults(self):
        cfg = HueFilterConfig()
        assert (cfg.h0, cfg.dh1, cfg.dh0, cfg.b0) == (0.5, 0.2, 0.4, 0.5)

    @pytest.mark.parametrize("kwargs", [
        {"h0": 1.0},
        {"h0": -0.1},
        {"dh1": 0.4, "dh0": 0.4},
        {"dh1": -0.1},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            HueFilterConfig(**kwargs)

    def test_round_trip_dict(self):
        cfg = HueFilterConfig(h0=0.1, dh1=0.05, dh0=0.15, b0=0.3)
        assert HueFilterConfig.from_dict(cfg.to_dict()) == cfg

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError):
            HueFilterConfig.from_dict({"hue": 0.2})


class TestLucriConfig:
    def test_defaults(self):
        cfg = LucriConfig()
        assert cfg.min_acuity == 0.05
        assert cfg.max_sensitivity == 1.0
        assert cfg.window_size == 21

    @pytest.mark.parametrize("kwargs", [
        {"alpha_radius": 0.0},
        {"min_acuity": 0.0},
        {"min_acuity": 0.3, "max_acuity": 0.2},
        {"min_sensitivity": -0.5},
        {"min_sensitivity": 1.5},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            LucriConfig(**kwargs)

    def test_build(self):
        img = torch.rand(3, 9, 9, dtype=torch.float64) * 255
        out = LucriConfig(min_acuity=0.5, max_acuity=1.0).build()(img)
        assert out.shape == (3, 7, 7)


class TestSmoothConfig:
    def test_build(self):
        img = torch.full((3, 5, 5), 12.0, dtype=torch.float64)
        out = SmoothConfig(size=3, alpha=0.5).build()(img)
        assert out.shape == (3, 3, 3)
        assert torch.allclose(out, torch.full((3, 3, 3), 6.0, dtype=torch.float64))

    @pytest.mark.parametrize("size", [0, -1, 2.5])
    def test_invalid(self, size):
        with pytest.raises(ConfigurationError):
            SmoothConfig(size=size)


class TestPipeline:
    def test_stages(self):
        img = torch.rand(3, 8, 8, dtype=torch.float64) * 255
        op = build_pipeline([
            {"type": "hue_filter", "h0": 0.2},
            {"type": "smooth", "size": 3},
            {"type": "gray"},
            {"type": "identity"},
        ])
        out = op(img)
        assert out.shape == (3, 6, 6)
        assert torch.allclose(out[0], out[2])

    def test_empty(self):
        img = torch.rand(3, 2, 2, dtype=torch.float64)
        assert torch.equal(build_pipeline([])(img), img)

    def test_unknown_stage(self):
        with pytest.raises(ConfigurationError):
            build_stage({"type": "sharpen"})

    @pytest.mark.parametrize("stage", [
        {"type": "gray", "size": 5},
        {"type": "identity", "alpha": 2.0},
    ])
    def test_parameterless_stage_extra_keys(self, stage):
        with pytest.raises(ConfigurationError):
            build_stage(stage)

    def test_invalid_stage_params(self):
        with pytest.raises(ConfigurationError):
            build_pipeline([{"type": "lucri", "min_acuity": -1}])
