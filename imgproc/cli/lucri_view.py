"""CLI for the foveated vision filter."""

import argparse
import sys
from pathlib import Path

from loguru import logger

from imgproc.codecs import RasterCodec, load_image, save_image
from imgproc.core import ConfigurationError, LucriConfig


def main():
    defaults = LucriConfig()
    parser = argparse.ArgumentParser(description="Simulate foveated vision centered on the image")
    parser.add_argument("-f", "--file", type=Path, required=True, help="Input image file")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output image file")
    parser.add_argument("--alpha-radius", type=float, default=defaults.alpha_radius, help="Foveal radius factor")
    parser.add_argument("--min-acuity", type=float, default=defaults.min_acuity, help="Peripheral acuity")
    parser.add_argument("--max-acuity", type=float, default=defaults.max_acuity, help="Foveal acuity")
    parser.add_argument("--min-sensitivity", type=float, default=defaults.min_sensitivity, help="Peripheral gain")
    parser.add_argument("--max-sensitivity", type=float, default=defaults.max_sensitivity, help="Foveal gain")
    parser.add_argument("--raw", action="store_true", help="Also store the unclamped raster as .npy")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bar")

    args = parser.parse_args()

    try:
        cfg = LucriConfig(
            alpha_radius=args.alpha_radius,
            min_acuity=args.min_acuity,
            max_acuity=args.max_acuity,
            min_sensitivity=args.min_sensitivity,
            max_sensitivity=args.max_sensitivity,
        )
        source = load_image(args.file)
        logger.info(f"Loaded {args.file} ({source.shape[2]}x{source.shape[1]}), window {cfg.window_size}")
        image = cfg.build(progress=not args.no_progress)(source)
        save_image(args.output, image)
        if args.raw:
            RasterCodec.save(args.output.with_suffix(".npy"), raster=image, params=cfg.to_dict(),
                             meta={"source": str(args.file)})
    except (ConfigurationError, OSError) as e:
        logger.error(f"Foveation failed: {e}")
        sys.exit(1)

    logger.info(f"Saved {args.output} ({image.shape[2]}x{image.shape[1]})")


if __name__ == "__main__":
    main()
