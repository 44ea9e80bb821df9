"""Windowed transform engine."""

from typing import Callable

import torch
from loguru import logger
from tqdm import tqdm

from .errors import ConfigurationError
from .kernels import Convolution, MatrixGenerator, lucri, lucri_window_size, smooth

ImageOperator = Callable[[torch.Tensor], torch.Tensor]


def convolution(
    ww: int,
    wh: int,
    generator: MatrixGenerator,
    progress: bool = False,
) -> ImageOperator:
    """Build the operator scanning every ww x wh window of an image.

    For each output position the accumulator receives M(target, source) @ v
    for every source pixel v of its window, in row-major window order. The
    target is the window top-left plus (ww // 2, wh // 2). Nothing is
    normalized or clamped.

    Args:
        ww, wh: window width and height, positive
        generator: kernel-matrix generator
        progress: show a progress bar over the window offsets

    Returns:
        operator mapping a [3, H, W] raster to [3, H - wh + 1, W - ww + 1];
        the output is empty when the window does not fit the image.
    """
    if int(ww) != ww or int(wh) != wh or ww < 1 or wh < 1:
        raise ConfigurationError(f"Window size must be positive integers, got {ww}x{wh}")
    ww, wh = int(ww), int(wh)

    @torch.no_grad()
    def apply(img: torch.Tensor) -> torch.Tensor:
        if img.dim() != 3 or img.shape[0] != 3:
            raise ValueError(f"Expected raster of shape [3, H, W], got {tuple(img.shape)}")
        _, h, w = img.shape
        ow, oh = w - ww + 1, h - wh + 1
        if ow <= 0 or oh <= 0:
            logger.debug(f"Window {ww}x{wh} does not fit image {w}x{h}, empty output")
            return img.new_zeros((3, max(oh, 0), max(ow, 0)))
        logger.debug(f"Convolving {w}x{h} with window {ww}x{wh} -> {ow}x{oh}")

        device, dtype = img.device, img.dtype
        oy, ox = torch.meshgrid(
            torch.arange(oh, device=device, dtype=dtype),
            torch.arange(ow, device=device, dtype=dtype),
            indexing="ij",
        )
        target_x = ox + ww // 2
        target_y = oy + wh // 2
        pixels = img.permute(1, 2, 0)  # [H, W, 3]
        acc = torch.zeros(oh, ow, 3, device=device, dtype=dtype)

        offsets = [(dy, dx) for dy in range(wh) for dx in range(ww)]
        iterator = tqdm(offsets, desc="Convolving") if progress else offsets
        for dy, dx in iterator:
            conv = Convolution(
                target_x=target_x,
                target_y=target_y,
                source_x=ox + dx,
                source_y=oy + dy,
                ww=ww,
                wh=wh,
                width=w,
                height=h,
            )
            m = generator(conv).to(device=device, dtype=dtype)
            src = pixels[dy:dy + oh, dx:dx + ow].unsqueeze(-1)  # [oh, ow, 3, 1]
            acc = acc + torch.matmul(m, src).squeeze(-1)

        return acc.permute(2, 0, 1).contiguous()

    return apply


def smooth_image(size: int, alpha: float = 1.0, progress: bool = False) -> ImageOperator:
    """Square box blur scaled by alpha."""
    return convolution(size, size, smooth(alpha), progress=progress)


def lucri_view(
    img: torch.Tensor,
    alpha_radius: float,
    min_acuity: float,
    max_acuity: float,
    min_sensitivity: float,
    max_sensitivity: float,
    progress: bool = False,
) -> ImageOperator:
    """Foveation operator sized for the widest blur of min_acuity."""
    generator = lucri(img, alpha_radius, min_acuity, max_acuity, min_sensitivity, max_sensitivity)
    size = lucri_window_size(min_acuity)
    return convolution(size, size, generator, progress=progress)


def compose(*operators: ImageOperator) -> ImageOperator:
    """Apply operators left to right."""

    def apply(img: torch.Tensor) -> torch.Tensor:
        for op in operators:
            img = op(img)
        return img

    return apply
