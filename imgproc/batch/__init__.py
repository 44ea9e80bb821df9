"""imgproc Batch: YAML driven processing of image directories."""

from .processor import BatchProcessor, BatchSpec

__all__ = ["BatchProcessor", "BatchSpec"]
