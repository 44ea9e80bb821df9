"""Raster storage with parameters and metadata."""

import numpy as np
import torch
from pathlib import Path
from typing import Dict, Any, Union, Optional


class RasterCodec:
    """Encode/decode unclamped rasters and metadata to/from .npy files.

    Format: Single .npy file containing a dict with:
        - version: format version
        - raster: [3, H, W] float64 channel values, not clamped
        - params: dict of filter parameters
        - meta: additional metadata
    """

    VERSION = 1

    @classmethod
    def encode(
        cls,
        raster: torch.Tensor,
        params: Optional[Dict[str, Any]] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Encode a raster to a dict for saving.

        Args:
            raster: [3, H, W] tensor
            params: filter parameters
            meta: additional metadata

        Returns:
            dict ready for np.save
        """
        if raster.dim() != 3 or raster.shape[0] != 3:
            raise ValueError(f"Expected raster of shape [3, H, W], got {tuple(raster.shape)}")
        data = {
            "version": cls.VERSION,
            "raster": raster.detach().cpu().numpy().astype(np.float64),
        }
        if params is not None:
            data["params"] = cls._serialize_params(params)
        if meta is not None:
            data["meta"] = meta
        return data

    @classmethod
    def decode(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Decode a loaded dict; the raster comes back as a float64 tensor."""
        result = {
            "raster": torch.from_numpy(np.asarray(data["raster"], dtype=np.float64)),
            "version": data.get("version", 0),
        }
        if "params" in data:
            result["params"] = data["params"]
        if "meta" in data:
            result["meta"] = data["meta"]
        return result

    @classmethod
    def save(cls, path: Union[str, Path], **kwargs) -> None:
        """Save raster to .npy file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        np.save(path, cls.encode(**kwargs), allow_pickle=True)

    @classmethod
    def load(cls, path: Union[str, Path]) -> Dict[str, Any]:
        """Load raster from .npy file."""
        data = np.load(path, allow_pickle=True).item()
        return cls.decode(data)

    @staticmethod
    def _serialize_params(params: Dict[str, Any]) -> Dict[str, Any]:
        """Serialize params to JSON-safe types."""
        serialized = {}
        for k, v in params.items():
            if isinstance(v, np.ndarray):
                serialized[k] = v.tolist()
            elif isinstance(v, (np.floating, np.integer)):
                serialized[k] = float(v) if isinstance(v, np.floating) else int(v)
            elif isinstance(v, (list, tuple)):
                serialized[k] = [RasterCodec._serialize_params(i) if isinstance(i, dict) else i for i in v]
            elif isinstance(v, dict):
                serialized[k] = RasterCodec._serialize_params(v)
            elif hasattr(v, "item"):
                serialized[k] = v.item()
            else:
                serialized[k] = v
        return serialized
