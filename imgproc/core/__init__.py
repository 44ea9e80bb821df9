"""imgproc core: windowed transform engine and pixel-space pipeline."""

from .errors import ConfigurationError
from .primitives import linear_map, diff, hysteresis
from .pixels import rgb_to_hsb, hsb_to_rgb, hsb_transform, hue_filter, hue_saturation_chart
from .kernels import Convolution, eyes, identity, gray, smooth, lucri, lucri_window_size
from .engine import convolution, smooth_image, lucri_view, compose
from .config import HueFilterConfig, LucriConfig, SmoothConfig, build_stage, build_pipeline

__all__ = [
    "ConfigurationError",
    "linear_map",
    "diff",
    "hysteresis",
    "rgb_to_hsb",
    "hsb_to_rgb",
    "hsb_transform",
    "hue_filter",
    "hue_saturation_chart",
    "Convolution",
    "eyes",
    "identity",
    "gray",
    "smooth",
    "lucri",
    "lucri_window_size",
    "convolution",
    "smooth_image",
    "lucri_view",
    "compose",
    "HueFilterConfig",
    "LucriConfig",
    "SmoothConfig",
    "build_stage",
    "build_pipeline",
]
