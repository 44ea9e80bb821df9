"""Kernel-matrix generators for the windowed transform engine.

A generator maps a Convolution context to the 3x3 matrices applied to the
source pixels, either one matrix shared by every pair or one per pair.
"""

import math
from dataclasses import dataclass
from typing import Callable

import torch

from .errors import ConfigurationError
from .primitives import linear_map

EYES = torch.eye(3, dtype=torch.float64)
GRAY = torch.full((3, 3), 1.0 / 3, dtype=torch.float64)

_GAUSS_K = 1.0 / (2.0 * math.pi)


@dataclass(frozen=True)
class Convolution:
    """Context of one window offset, for every output position at once.

    Coordinate tensors are [oh, ow]; entry (i, j) describes the pair
    (target, source) visited for output pixel (i, j).
    """
    target_x: torch.Tensor
    target_y: torch.Tensor
    source_x: torch.Tensor
    source_y: torch.Tensor
    ww: int
    wh: int
    width: int
    height: int

    def distance_sq(self) -> torch.Tensor:
        """Squared distance between target and source."""
        return (self.target_x - self.source_x) ** 2 + (self.target_y - self.source_y) ** 2


MatrixGenerator = Callable[[Convolution], torch.Tensor]


def eyes(value) -> torch.Tensor:
    """Scaled identity; a tensor `value` of shape [...] yields [..., 3, 3]."""
    if isinstance(value, torch.Tensor):
        return value[..., None, None] * EYES.to(value.dtype)
    return EYES * value


def identity() -> MatrixGenerator:
    return lambda conv: EYES


def gray() -> MatrixGenerator:
    """Every output channel is the average of the source channels."""
    return lambda conv: GRAY


def smooth(alpha: float = 1.0) -> MatrixGenerator:
    """Box blur: identity scaled by alpha / window area."""

    def generate(conv: Convolution) -> torch.Tensor:
        return eyes(alpha / (conv.ww * conv.wh))

    return generate


def lucri(
    img: torch.Tensor,
    alpha_radius: float,
    min_acuity: float,
    max_acuity: float,
    min_sensitivity: float,
    max_sensitivity: float,
) -> MatrixGenerator:
    """Foveated vision model focused on the image center.

    Acuity and sensitivity fall from their max values at the focus to their
    min values in the periphery following a gaussian of the source distance
    from the center. Where acuity >= 1 the source pixel passes through scaled
    by the sensitivity; elsewhere it is spread with a gaussian kernel of
    sigma 1 / (2 * acuity) around the target.

    Args:
        img: raster [3, H, W] the generator will scan, only its size is used
        alpha_radius: foveal radius relative to half the larger image side
        min_acuity, max_acuity: peripheral and foveal acuity, 0 < min <= max
        min_sensitivity, max_sensitivity: peripheral and foveal gain, 0 <= min <= max
    """
    if alpha_radius <= 0:
        raise ConfigurationError(f"alpha_radius must be positive, got {alpha_radius}")
    if not 0 < min_acuity <= max_acuity:
        raise ConfigurationError(
            f"Acuity requires 0 < min <= max, got min={min_acuity}, max={max_acuity}"
        )
    if not 0 <= min_sensitivity <= max_sensitivity:
        raise ConfigurationError(
            f"Sensitivity requires 0 <= min <= max, got min={min_sensitivity}, max={max_sensitivity}"
        )

    height, width = img.shape[-2], img.shape[-1]
    cx, cy = width // 2, height // 2
    radius = (max(width, height) // 2) * alpha_radius / 2
    radius2 = radius * radius * 2
    acuity_of = linear_map(1, 0, max_acuity, min_acuity)
    sensitivity_of = linear_map(1, 0, max_sensitivity, min_sensitivity)

    def generate(conv: Convolution) -> torch.Tensor:
        radial2 = (conv.source_x - cx) ** 2 + (conv.source_y - cy) ** 2
        if radius2 == 0:
            # single pixel images: only the focus itself is foveal
            rad = (radial2 == 0).to(radial2.dtype)
        else:
            rad = torch.exp(-radial2 / radius2)
        acuity = acuity_of(rad)
        sensitivity = sensitivity_of(rad)
        dist2 = conv.distance_sq()

        # integer coordinates: <= 0.5 only for the aligned pixel
        foveal = torch.where(dist2 <= 0.5, sensitivity, torch.zeros_like(sensitivity))

        radius_sens2 = (1.0 / acuity / 2.0) ** 2
        alpha = torch.exp(-dist2 / radius_sens2 / 2.0) * _GAUSS_K / radius_sens2
        return eyes(torch.where(acuity >= 1, foveal, alpha * sensitivity))

    return generate


def lucri_window_size(min_acuity: float) -> int:
    """Odd window wide enough for the blur of the minimum acuity."""
    if min_acuity <= 0:
        raise ConfigurationError(f"min_acuity must be positive, got {min_acuity}")
    return int(math.floor(1.0 / min_acuity / 2.0 + 0.5)) * 2 + 1
