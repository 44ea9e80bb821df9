"""Batch Processor: apply a filter pipeline to a directory of images."""

import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from loguru import logger
from tqdm import tqdm

from ..core import ConfigurationError, build_pipeline
from ..codecs import RasterCodec, load_image, save_image


@dataclass
class BatchSpec:
    """Parsed job file.

    YAML format:
    ```yaml
    input:
      root: /path/to/images
      pattern: "*.png"
    output:
      root: /path/to/output
      suffix: .png
      raw: false        # also store unclamped rasters as .npy
    stages:
      - type: hue_filter
        h0: 0.5
      - type: lucri
        min_acuity: 0.1
    ```
    """
    input_root: Path
    output_root: Path
    pattern: str = "*.png"
    suffix: str = ".png"
    raw: bool = False
    stages: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BatchSpec":
        try:
            inp = d["input"]
            out = d["output"]
            input_root = Path(inp["root"])
            output_root = Path(out["root"])
        except (KeyError, TypeError) as e:
            raise ConfigurationError(f"Job file needs input.root and output.root: {e}") from e
        stages = d.get("stages") or []
        if not isinstance(stages, list):
            raise ConfigurationError("stages must be a list")
        return cls(
            input_root=input_root,
            output_root=output_root,
            pattern=inp.get("pattern", "*.png"),
            suffix=out.get("suffix", ".png"),
            raw=bool(out.get("raw", False)),
            stages=stages,
        )


def _process_file(path: Path, out_path: Path, spec: BatchSpec, pipeline) -> Dict[str, Any]:
    """Process a single image."""
    try:
        raster = load_image(path)
        result = pipeline(raster)
        rel = path.relative_to(spec.input_root)
        save_image(out_path, result)
        if spec.raw:
            RasterCodec.save(
                out_path.with_suffix(".npy"),
                raster=result,
                params={"stages": spec.stages},
                meta={"source": str(rel)},
            )
        return {"file": str(path), "status": "success"}
    except Exception as e:
        logger.error(f"Failed processing {path}: {e}")
        return {
            "file": str(path),
            "status": "error",
            "error": str(e),
            "traceback": traceback.format_exc(),
        }


class BatchProcessor:
    """Apply the stages of a YAML job file to every matching image."""

    def __init__(self, config: Union[str, Path, Dict[str, Any]]):
        """Initialize processor.

        Args:
            config: path to YAML job file or an already loaded dict
        """
        if isinstance(config, dict):
            cfg = config
        else:
            with open(config) as f:
                cfg = yaml.safe_load(f)
        self.spec = BatchSpec.from_dict(cfg or {})
        # fail on bad stages before touching any file
        self.pipeline = build_pipeline(self.spec.stages)

    def files(self) -> List[Path]:
        return sorted(p for p in self.spec.input_root.rglob(self.spec.pattern) if p.is_file())

    def output_path(self, path: Path) -> Path:
        return (self.spec.output_root / path.relative_to(self.spec.input_root)).with_suffix(self.spec.suffix)

    def run(self, skip_existing: bool = True, progress: bool = True) -> Dict[str, Any]:
        """Process all files.

        Args:
            skip_existing: skip files whose output already exists
            progress: show progress bar

        Returns:
            dict with processing statistics
        """
        files = self.files()
        todo = [p for p in files if not (skip_existing and self.output_path(p).exists())]
        results = {"total": len(files), "processed": 0, "skipped": len(files) - len(todo), "errors": []}
        logger.info(f"Processing {len(todo)} of {len(files)} images from {self.spec.input_root}")

        iterator = tqdm(todo, desc="Processing") if progress else todo
        for path in iterator:
            result = _process_file(path, self.output_path(path), self.spec, self.pipeline)
            if result["status"] == "success":
                results["processed"] += 1
            else:
                results["errors"].append(result)
        return results

    def run_single(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Process one file of the input tree."""
        path = Path(path)
        if not path.is_absolute():
            path = self.spec.input_root / path
        if not path.exists():
            return {"file": str(path), "status": "error", "error": f"File {path} not found"}
        try:
            out_path = self.output_path(path)
        except ValueError:
            return {"file": str(path), "status": "error", "error": f"File {path} is outside {self.spec.input_root}"}
        return _process_file(path, out_path, self.spec, self.pipeline)
