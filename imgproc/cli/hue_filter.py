"""CLI for the hue-selective filter."""

import argparse
import sys
from pathlib import Path

from loguru import logger

from imgproc.codecs import load_image, save_image
from imgproc.core import ConfigurationError, HueFilterConfig, hue_saturation_chart


def main():
    defaults = HueFilterConfig()
    parser = argparse.ArgumentParser(description="Keep one hue band, desaturate and dim the rest")
    parser.add_argument("-f", "--file", type=Path, help="Input image file (hue/saturation chart if omitted)")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output image file")
    parser.add_argument("--h0", type=float, default=defaults.h0, help="Target hue in [0, 1)")
    parser.add_argument("--dh1", type=float, default=defaults.dh1, help="Fully selected half band")
    parser.add_argument("--dh0", type=float, default=defaults.dh0, help="Fully rejected beyond this distance")
    parser.add_argument("--b0", type=float, default=defaults.b0, help="Brightness of rejected pixels")
    parser.add_argument("--chart-size", type=int, default=256, help="Chart size when no file is given")

    args = parser.parse_args()

    try:
        cfg = HueFilterConfig(h0=args.h0, dh1=args.dh1, dh0=args.dh0, b0=args.b0)
        source = load_image(args.file) if args.file else hue_saturation_chart(args.chart_size, args.chart_size)
        image = cfg.build()(source)
        save_image(args.output, image)
    except (ConfigurationError, OSError) as e:
        logger.error(f"Hue filter failed: {e}")
        sys.exit(1)

    logger.info(f"Saved {args.output}")


if __name__ == "__main__":
    main()
