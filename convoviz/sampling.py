"""Uniform time grids and sampled signals."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from convoviz.expressions import CompiledExpression, Environment, compile_expression

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SampleSequence:
    """Paired time and value arrays on a uniform grid."""

    times: np.ndarray
    values: np.ndarray

    def __post_init__(self) -> None:
        times = np.asarray(self.times, dtype=float)
        values = np.asarray(self.values, dtype=float)
        if times.ndim != 1 or values.ndim != 1:
            raise ValueError("times and values must be one-dimensional")
        if len(times) != len(values):
            raise ValueError("times and values must have the same length")
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return len(self.times)

    @property
    def t_min(self) -> float:
        return float(self.times[0])

    @property
    def dt(self) -> float:
        """Grid step; zero for a single-point sequence."""
        if len(self.times) < 2:
            return 0.0
        return float(self.times[1] - self.times[0])


def grid_length(t_min: float, t_max: float, dt: float) -> int:
    return math.ceil((t_max - t_min) / dt) + 1


def time_grid(t_min: float, t_max: float, dt: float) -> np.ndarray:
    """``t_i = t_min + i*dt`` for ``i = 0 .. ceil((t_max - t_min)/dt)``.

    The last point may overshoot ``t_max`` when the window is not a whole
    number of steps.
    """
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if t_max < t_min:
        raise ValueError(f"empty window [{t_min}, {t_max}]")
    return t_min + np.arange(grid_length(t_min, t_max, dt)) * dt


def sample(
    expr: Union[str, CompiledExpression],
    t_min: float,
    t_max: float,
    dt: float,
    env: Optional[Environment] = None,
) -> SampleSequence:
    """Evaluate ``expr`` on the grid over ``[t_min, t_max]``.

    Raises :class:`~convoviz.expressions.EvaluationError` if the expression
    is malformed or fails anywhere on the grid.
    """
    compiled = expr if isinstance(expr, CompiledExpression) else compile_expression(expr, env)
    times = time_grid(t_min, t_max, dt)
    values = compiled.evaluate({"t": times})
    logger.debug("sampled %r on %d points (dt=%g)", compiled.source, len(times), dt)
    return SampleSequence(times, values)
