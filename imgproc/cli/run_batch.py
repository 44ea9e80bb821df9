"""CLI for processing image directories from a YAML job file."""

import argparse
import sys
from pathlib import Path

from loguru import logger

from imgproc.batch import BatchProcessor
from imgproc.core import ConfigurationError


def main():
    parser = argparse.ArgumentParser(description="Apply a filter pipeline to a directory of images")
    parser.add_argument("config", type=Path, help="Path to YAML job file")
    parser.add_argument("--no-skip", action="store_true", help="Don't skip existing outputs")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bar")

    args = parser.parse_args()

    try:
        proc = BatchProcessor(args.config)
    except (ConfigurationError, OSError) as e:
        logger.error(f"Invalid job file {args.config}: {e}")
        sys.exit(1)

    results = proc.run(skip_existing=not args.no_skip, progress=not args.no_progress)

    logger.info(
        f"Processing complete: {results['total']} images, {results['processed']} processed, "
        f"{results['skipped']} skipped, {len(results['errors'])} errors"
    )

    if results["errors"]:
        for err in results["errors"][:10]:
            logger.error(f"{err['file']}: {err['error']}")
        if len(results["errors"]) > 10:
            logger.error(f"... and {len(results['errors']) - 10} more")
        sys.exit(1)


if __name__ == "__main__":
    main()
