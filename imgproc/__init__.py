"""imgproc: spatially-variant pixel transforms.

Main components:
- core: windowed transform engine, kernel generators, HSB pipeline
- codecs: image boundary and raster storage
- batch: YAML driven directory processing
"""

from .core import (
    ConfigurationError,
    linear_map,
    diff,
    hysteresis,
    rgb_to_hsb,
    hsb_to_rgb,
    hsb_transform,
    hue_filter,
    hue_saturation_chart,
    Convolution,
    identity,
    gray,
    smooth,
    lucri,
    convolution,
    smooth_image,
    lucri_view,
    compose,
    HueFilterConfig,
    LucriConfig,
    SmoothConfig,
    build_pipeline,
)
from .codecs import RasterCodec, load_image, save_image
from .batch import BatchProcessor

__version__ = "0.1.0"
__all__ = [
    # Core
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
    "identity",
    "gray",
    "smooth",
    "lucri",
    "convolution",
    "smooth_image",
    "lucri_view",
    "compose",
    "HueFilterConfig",
    "LucriConfig",
    "SmoothConfig",
    "build_pipeline",
    # Codecs
    "RasterCodec",
    "load_image",
    "save_image",
    # Batch
    "BatchProcessor",
]
