"""The two page actions, as pure functions from inputs to view state.

Every array is computed before a new :class:`ViewState` is built, so an
:class:`~convoviz.expressions.EvaluationError` leaves the caller holding its
previous state untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

import numpy as np

from convoviz.config import DEFAULT_SETTINGS, Settings
from convoviz.engine import convolve as convolve_sequences
from convoviz.expressions import compile_expression, default_environment
from convoviz.sampling import SampleSequence, sample
from convoviz.symbolic import synthesize

logger = logging.getLogger(__name__)


def _empty() -> np.ndarray:
    return np.zeros(0)


@dataclass(frozen=True, eq=False)
class ViewState:
    """Everything the page displays."""

    x1: np.ndarray = field(default_factory=_empty)
    y1: np.ndarray = field(default_factory=_empty)
    x2: np.ndarray = field(default_factory=_empty)
    y2: np.ndarray = field(default_factory=_empty)
    x_conv: np.ndarray = field(default_factory=_empty)
    y_conv: np.ndarray = field(default_factory=_empty)
    expression: str = ""

    @property
    def has_signals(self) -> bool:
        return all(len(a) > 0 for a in (self.x1, self.y1, self.x2, self.y2))

    @property
    def has_convolution(self) -> bool:
        return len(self.x_conv) > 0 and len(self.y_conv) > 0


def _sample_pair(expr1: str, expr2: str, settings: Settings):
    env = default_environment(settings.impulse_half_width)
    # compile both first so a typo in either aborts before any evaluation
    compiled1 = compile_expression(expr1, env)
    compiled2 = compile_expression(expr2, env)
    a = sample(compiled1, settings.t_min, settings.t_max, settings.dt)
    b = sample(compiled2, settings.t_min, settings.t_max, settings.dt)
    return a, b


def plot(expr1: str, expr2: str, settings: Optional[Settings] = None) -> ViewState:
    """Sample both signals; any previous convolution is cleared."""
    settings = settings or DEFAULT_SETTINGS
    a, b = _sample_pair(expr1, expr2, settings)
    logger.info("plotted %r and %r on %d points", expr1, expr2, len(a))
    return ViewState(x1=a.times, y1=a.values, x2=b.times, y2=b.values)


def convolve(
    expr1: str,
    expr2: str,
    state: Optional[ViewState] = None,
    settings: Optional[Settings] = None,
) -> ViewState:
    """Convolve both signals and synthesize the symbolic approximation.

    The signal arrays of ``state`` are kept as they are; only the result
    and the expression are replaced.
    """
    settings = settings or DEFAULT_SETTINGS
    state = state or ViewState()
    a, b = _sample_pair(expr1, expr2, settings)
    result: SampleSequence = convolve_sequences(a, b, scale=settings.dt)
    expression = synthesize(
        expr1, expr2, settings.t_min, settings.t_max,
        settings=settings, env=default_environment(settings.impulse_half_width),
    )
    logger.info("convolved %r with %r -> %d points", expr1, expr2, len(result))
    return replace(state, x_conv=result.times, y_conv=result.values, expression=expression)
