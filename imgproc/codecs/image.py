"""Image boundary: decode to rasters, saturate and encode back."""

from pathlib import Path
from typing import Union

import numpy as np
import torch
from PIL import Image


def to_raster(arr: np.ndarray, dtype: torch.dtype = torch.float64) -> torch.Tensor:
    """[H, W, 3] array (any numeric type, 0..255) -> [3, H, W] raster."""
    if arr.ndim != 3 or arr.shape[-1] != 3:
        raise ValueError(f"Expected array of shape [H, W, 3], got {arr.shape}")
    return torch.from_numpy(np.ascontiguousarray(arr)).to(dtype).permute(2, 0, 1).contiguous()


def from_raster(raster: torch.Tensor) -> np.ndarray:
    """[3, H, W] raster -> [H, W, 3] uint8, clamped to 0..255 and rounded."""
    if raster.dim() != 3 or raster.shape[0] != 3:
        raise ValueError(f"Expected raster of shape [3, H, W], got {tuple(raster.shape)}")
    out = raster.detach().cpu().clamp(0, 255).round()
    return out.permute(1, 2, 0).numpy().astype(np.uint8)


def load_image(path: Union[str, Path], dtype: torch.dtype = torch.float64) -> torch.Tensor:
    """Load image as [3, H, W] RGB raster in 0..255."""
    img = Image.open(path).convert("RGB")
    return to_raster(np.array(img), dtype)


def save_image(path: Union[str, Path], raster: torch.Tensor) -> None:
    """Save raster, saturating values to the 8-bit range."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(from_raster(raster)).save(path)
