"""Discrete convolution of sampled signals.

One routine serves both consumers: the display path scales by the grid step
so the sum approximates the continuous integral, and the symbolic path on
the unit grid passes ``scale=1``.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from convoviz.sampling import SampleSequence

logger = logging.getLogger(__name__)


def _shared_dt(a: SampleSequence, b: SampleSequence) -> float:
    if a.dt and b.dt and not math.isclose(a.dt, b.dt, rel_tol=1e-9, abs_tol=1e-12):
        raise ValueError(f"sequences use different steps ({a.dt} vs {b.dt})")
    return a.dt or b.dt


def convolve(a: SampleSequence, b: SampleSequence, scale: Optional[float] = None) -> SampleSequence:
    """Full linear convolution of ``a`` and ``b``.

    ``y[k] = scale * sum(a[i] * b[k - i])`` with ``scale`` defaulting to the
    shared step (Riemann sum). Samples outside either window count as zero.
    The output has ``len(a) + len(b) - 1`` points starting at
    ``a.t_min + b.t_min``.
    """
    if len(a) == 0 or len(b) == 0:
        raise ValueError("cannot convolve an empty sequence")
    dt = _shared_dt(a, b)
    if scale is None:
        if not dt:
            raise ValueError("step is undefined for single-point sequences; pass scale")
        scale = dt

    # np.convolve sums directly, no FFT
    values = np.convolve(a.values, b.values, mode="full") * scale
    times = (a.t_min + b.t_min) + np.arange(values.size) * dt
    logger.debug("convolved %d x %d samples -> %d (scale=%g)", len(a), len(b), values.size, scale)
    return SampleSequence(times, values)
