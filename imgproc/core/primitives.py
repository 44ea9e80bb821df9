"""Scalar primitives: linear mapping, circular difference, hysteresis.

Every builder validates its constants and returns a closure. The closures
accept either a python float or a torch tensor (element-wise).
"""

from typing import Callable, Union

import torch

from .errors import ConfigurationError

Scalar = Union[float, torch.Tensor]
ScalarFn = Callable[[Scalar], Scalar]


def linear_map(x0: float, x1: float, y0: float, y1: float) -> ScalarFn:
    """Return f with f(x0) == y0 and f(x1) == y1, linear in between.

    Evaluated as (1 - t) * y0 + t * y1 so both endpoints are hit exactly.
    """
    if x0 == x1:
        raise ConfigurationError(f"Degenerate linear map: x0 == x1 == {x0}")
    dx = x1 - x0

    def f(x: Scalar) -> Scalar:
        t = (x - x0) / dx
        return (1 - t) * y0 + t * y1

    return f


def diff(x0: float) -> ScalarFn:
    """Circular difference x - x0 on a domain of period 1, in (-0.5, 0.5]."""

    def f(x: Scalar) -> Scalar:
        d = x - x0
        if isinstance(d, torch.Tensor):
            return torch.where(d > 0.5, d - 1, torch.where(d < -0.5, d + 1, d))
        if d > 0.5:
            return d - 1
        if d < -0.5:
            return d + 1
        return d

    return f


def hysteresis(x1: float, x0: float) -> ScalarFn:
    """Odd soft threshold.

    ::

              y ^
                |
              1 +------
                |      \\
                |       \\
        --+--+--0--+--+-->
          -x0 -x1  x1 x0  x
           \\    |
            \\   |
             ---+ -1

    Returns sign(x) for |x| <= x1 (0 at x == 0), 0 for |x| >= x0 and a linear
    ramp from 1 to 0 in between.
    """
    if not 0 <= x1 < x0:
        raise ConfigurationError(f"Hysteresis requires 0 <= x1 < x0, got x1={x1}, x0={x0}")
    ramp = linear_map(x1, x0, 1, 0)

    def f(x: Scalar) -> Scalar:
        if isinstance(x, torch.Tensor):
            ax = x.abs()
            mag = torch.where(
                ax >= x0,
                torch.zeros_like(ax),
                torch.where(ax <= x1, torch.ones_like(ax), ramp(ax)),
            )
            return torch.sign(x) * mag
        ax = abs(x)
        if ax >= x0:
            return 0.0
        sign = (x > 0) - (x < 0)
        return float(sign) if ax <= x1 else sign * ramp(ax)

    return f
