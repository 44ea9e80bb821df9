"""imgproc Codecs: image boundary and raster storage."""

from .image import load_image, save_image, to_raster, from_raster
from .raster import RasterCodec

__all__ = ["load_image", "save_image", "to_raster", "from_raster", "RasterCodec"]
