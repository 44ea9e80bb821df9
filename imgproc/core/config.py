"""Filter configuration."""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, List

from .engine import ImageOperator, compose, convolution, lucri_view, smooth_image
from .errors import ConfigurationError
from .kernels import gray, identity, lucri_window_size
from .pixels import hsb_transform, hue_filter


class _Config:
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]):
        valid_keys = {f.name for f in fields(cls)}
        unknown = set(d) - valid_keys
        if unknown:
            raise ConfigurationError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
        return cls(**d)


@dataclass
class HueFilterConfig(_Config):
    """Hue-selective filter parameters."""
    h0: float = 0.5   # target hue
    dh1: float = 0.2  # fully selected half band
    dh0: float = 0.4  # fully rejected beyond
    b0: float = 0.5   # brightness of rejected pixels

    def __post_init__(self):
        if not 0 <= self.h0 < 1:
            raise ConfigurationError(f"h0 must be in [0, 1), got {self.h0}")
        if not 0 <= self.dh1 < self.dh0:
            raise ConfigurationError(f"Hue band requires 0 <= dh1 < dh0, got {self.dh1}, {self.dh0}")

    def build(self, progress: bool = False) -> ImageOperator:
        return hsb_transform(hue_filter(self.h0, self.dh1, self.dh0, self.b0))


@dataclass
class LucriConfig(_Config):
    """Foveation parameters.

    The focus is the image center; the generator is built per image since
    the foveal radius depends on the image size.
    """
    alpha_radius: float = 1.0
    min_acuity: float = 0.05
    max_acuity: float = 0.2
    min_sensitivity: float = 0.4
    max_sensitivity: float = 1.0

    def __post_init__(self):
        if self.alpha_radius <= 0:
            raise ConfigurationError(f"alpha_radius must be positive, got {self.alpha_radius}")
        if not 0 < self.min_acuity <= self.max_acuity:
            raise ConfigurationError(
                f"Acuity requires 0 < min <= max, got {self.min_acuity}, {self.max_acuity}"
            )
        if not 0 <= self.min_sensitivity <= self.max_sensitivity:
            raise ConfigurationError(
                f"Sensitivity requires 0 <= min <= max, got {self.min_sensitivity}, {self.max_sensitivity}"
            )

    @property
    def window_size(self) -> int:
        return lucri_window_size(self.min_acuity)

    def build(self, progress: bool = False) -> ImageOperator:
        def apply(img):
            op = lucri_view(
                img,
                self.alpha_radius,
                self.min_acuity,
                self.max_acuity,
                self.min_sensitivity,
                self.max_sensitivity,
                progress=progress,
            )
            return op(img)

        return apply


@dataclass
class SmoothConfig(_Config):
    """Box blur over a size x size window."""
    size: int = 3
    alpha: float = 1.0

    def __post_init__(self):
        if int(self.size) != self.size or self.size < 1:
            raise ConfigurationError(f"size must be a positive integer, got {self.size}")

    def build(self, progress: bool = False) -> ImageOperator:
        return smooth_image(self.size, self.alpha, progress=progress)


def build_stage(stage: Dict[str, Any], progress: bool = False) -> ImageOperator:
    """Build one pipeline stage from {"type": ..., **params}."""
    params = dict(stage)
    kind = params.pop("type", None)
    if kind in ("identity", "gray") and params:
        raise ConfigurationError(f"Stage {kind} takes no parameters, got {sorted(params)}")
    if kind == "identity":
        return convolution(1, 1, identity())
    if kind == "gray":
        return convolution(1, 1, gray())
    if kind == "smooth":
        return SmoothConfig.from_dict(params).build(progress)
    if kind == "hue_filter":
        return HueFilterConfig.from_dict(params).build(progress)
    if kind == "lucri":
        return LucriConfig.from_dict(params).build(progress)
    raise ConfigurationError(f"Unknown stage type: {kind}")


def build_pipeline(stages: List[Dict[str, Any]], progress: bool = False) -> ImageOperator:
    """Compose stages in order; an empty list is the identity."""
    return compose(*[build_stage(s, progress) for s in stages])
