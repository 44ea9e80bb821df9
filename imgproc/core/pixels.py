"""Pixel-space pipeline: RGB <-> HSB conversion and HSB transforms."""

from typing import Callable, Tuple

import torch

from .errors import ConfigurationError
from .primitives import diff, hysteresis, linear_map

HSB = Tuple[torch.Tensor, torch.Tensor, torch.Tensor]
HSBFn = Callable[[torch.Tensor, torch.Tensor, torch.Tensor], HSB]

# Channel order (value, t, p, q) per hue sector, see hsb_to_rgb
_SECTORS = torch.tensor([
    [0, 1, 2],
    [3, 0, 2],
    [2, 0, 1],
    [2, 3, 0],
    [1, 2, 0],
    [0, 2, 3],
])


def _check_raster(img: torch.Tensor) -> None:
    if img.dim() != 3 or img.shape[0] != 3:
        raise ValueError(f"Expected raster of shape [3, H, W], got {tuple(img.shape)}")


def rgb_to_hsb(rgb: torch.Tensor) -> torch.Tensor:
    """Convert RGB [3, H, W] in 0..255 to HSB [3, H, W] in [0, 1]."""
    _check_raster(rgb)
    r, g, b = rgb[0], rgb[1], rgb[2]
    cmax = rgb.max(dim=0).values
    cmin = rgb.min(dim=0).values
    delta = cmax - cmin

    brightness = cmax / 255.0
    saturation = torch.where(cmax > 0, delta / cmax.clamp(min=1e-12), torch.zeros_like(cmax))

    safe = delta.clamp(min=1e-12)
    redc = (cmax - r) / safe
    greenc = (cmax - g) / safe
    bluec = (cmax - b) / safe
    hue = torch.where(
        r == cmax,
        bluec - greenc,
        torch.where(g == cmax, 2.0 + redc - bluec, 4.0 + greenc - redc),
    ) / 6.0
    hue = torch.where(hue < 0, hue + 1.0, hue)
    hue = torch.where(saturation > 0, hue, torch.zeros_like(hue))
    return torch.stack([hue, saturation, brightness])


def hsb_to_rgb(hsb: torch.Tensor) -> torch.Tensor:
    """Convert HSB [3, H, W] to RGB [3, H, W] in 0..255 (not rounded)."""
    _check_raster(hsb)
    h, s, v = hsb[0], hsb[1], hsb[2]
    h6 = (h - torch.floor(h)) * 6.0
    sector = torch.floor(h6)
    f = h6 - sector
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))

    candidates = torch.stack([v, t, p, q], dim=-1)
    idx = _SECTORS.to(h.device)[sector.long().remainder(6)]
    rgb = torch.gather(candidates, -1, idx)
    return rgb.permute(2, 0, 1) * 255.0


def hsb_transform(fn: HSBFn) -> Callable[[torch.Tensor], torch.Tensor]:
    """Wrap a pure (h, s, b) -> (h, s, b) function into an RGB image operator.

    No windowing: the output has the same size as the input.
    """

    def apply(img: torch.Tensor) -> torch.Tensor:
        hsb = rgb_to_hsb(img)
        h, s, b = fn(hsb[0], hsb[1], hsb[2])
        return hsb_to_rgb(torch.stack([h, s, b]))

    return apply


def hue_filter(h0: float, dh1: float, dh0: float, b0: float) -> HSBFn:
    """Keep hues around h0, desaturate and dim the others.

    Args:
        h0: target hue in [0, 1)
        dh1: half width of the fully selected band
        dh0: half width beyond which hues are fully rejected (dh1 < dh0)
        b0: brightness factor applied to fully rejected pixels

    Pixels with hue within dh1 of h0 pass through unchanged; pixels at
    circular distance >= dh0 lose saturation and brightness falls towards
    b * b0. Low saturation pixels are treated as selected whatever their hue.
    """
    if not 0 <= h0 < 1:
        raise ConfigurationError(f"Hue h0 must be in [0, 1), got {h0}")
    delta = diff(h0)
    band = hysteresis(dh1, dh0)
    bright = linear_map(0, 1, b0, 1)

    def apply(h: torch.Tensor, s: torch.Tensor, b: torch.Tensor) -> HSB:
        dh = delta(h)
        # dh == 0 is the band center, fully selected
        h_sens = torch.where(dh == 0, torch.ones_like(dh), band(dh).abs())
        abs_sens = 1 - (1 - h_sens) * s
        h_shift = dh * (1 - abs_sens)
        return h - h_shift, s * abs_sens, b * bright(abs_sens)

    return apply


def hue_saturation_chart(
    width: int,
    height: int,
    dtype: torch.dtype = torch.float64,
) -> torch.Tensor:
    """Synthetic RGB chart: hue across columns, saturation decreasing down rows."""
    if width < 2 or height < 2:
        raise ConfigurationError(f"Chart needs at least 2x2 pixels, got {width}x{height}")
    ys, xs = torch.meshgrid(
        torch.arange(height, dtype=dtype),
        torch.arange(width, dtype=dtype),
        indexing="ij",
    )
    hue = xs / (width - 1)
    sat = (height - 1 - ys) / (height - 1)
    return hsb_to_rgb(torch.stack([hue, sat, torch.ones_like(hue)]))
