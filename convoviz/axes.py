"""Axis bounds and tick positions for the signal and result charts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class AxisLayout:
    x_min: int
    x_max: int
    y_min: int
    y_max: int
    x_ticks: List[int]
    y_ticks: List[int]


def tick_step(span: float) -> int:
    """Coarser ticks for wider ranges."""
    if span <= 10:
        return 1
    if span <= 25:
        return 2
    if span <= 50:
        return 5
    return 10


def ticks(lo: int, hi: int) -> List[int]:
    step = tick_step(hi - lo)
    return [lo + i * step for i in range((hi - lo) // step + 1)]


def shared_range(*series: Sequence[float]) -> Tuple[float, float]:
    """Min and max over several signals, so their charts share a y-scale."""
    values = np.concatenate([np.asarray(s, dtype=float) for s in series])
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return 0.0, 0.0
    return float(finite.min()), float(finite.max())


def layout(x: Sequence[float], y: Sequence[float], y_range: Optional[Tuple[float, float]] = None) -> AxisLayout:
    """Integer axis bounds around the data and the ticks to label.

    The top of the y-axis leaves one unit of headroom and is rounded up to an
    even number once the data exceeds 10.
    """
    x_lo, x_hi = shared_range(x)
    y_lo, y_hi = y_range if y_range is not None else shared_range(y)

    x_min, x_max = math.floor(x_lo), math.ceil(x_hi)
    y_min = math.floor(y_lo)
    y_max = math.ceil(y_hi) + 1
    if y_hi > 10 and y_max % 2 != 0:
        y_max += 1

    return AxisLayout(
        x_min=x_min,
        x_max=x_max,
        y_min=y_min,
        y_max=y_max,
        x_ticks=ticks(x_min, x_max),
        y_ticks=ticks(y_min, y_max),
    )
