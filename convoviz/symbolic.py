"""Approximate closed form of a convolution as shifted step/ramp terms.

This is a display heuristic, not algebra: both signals are re-sampled on a
unit grid, convolved without scaling, and every sample whose rounded value
is not negligible becomes one term. Terms at a non-negative time are shown
as ramps ``r``, earlier ones as steps ``u``. Nothing is simplified or merged.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from convoviz.config import DEFAULT_SETTINGS, NEGLIGIBLE_THRESHOLD, ROUND_DECIMALS, Settings
from convoviz.engine import convolve
from convoviz.expressions import Environment, compile_expression, default_environment
from convoviz.sampling import SampleSequence, sample

logger = logging.getLogger(__name__)

STEP = "u"
RAMP = "r"


def round_half_up(value: float, decimals: int = ROUND_DECIMALS) -> float:
    """Round on the exact decimal expansion, ties away from zero."""
    if not math.isfinite(value):
        return float(value)
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Shortest form: ``3`` rather than ``3.0``.

    Non-finite and huge values use the browser spelling (``NaN``,
    ``Infinity``, ``1e+21``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if abs(value) >= 1e21:
        return repr(float(value))
    if value == 0:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class SymbolicTerm:
    coefficient: float
    shift: float
    symbol: str

    @property
    def label(self) -> str:
        # negative shifts print literally, e.g. "t - -2"
        if self.shift == 0:
            return "t"
        return f"t - {format_number(self.shift)}"

    def render(self) -> str:
        return f"{format_number(self.coefficient)}{self.symbol}({self.label})"


def synthesize_terms(
    result: SampleSequence,
    threshold: float = NEGLIGIBLE_THRESHOLD,
    decimals: int = ROUND_DECIMALS,
) -> List[SymbolicTerm]:
    """One term per sample of ``result`` whose rounded value is not negligible."""
    terms = []
    for t, y in zip(result.times, result.values):
        coefficient = round_half_up(y, decimals)
        shift = round_half_up(t, decimals)
        # nan/inf leaking from the signals carries no displayable weight
        if not math.isfinite(coefficient) or abs(coefficient) < threshold:
            continue
        symbol = RAMP if shift >= 0 else STEP
        terms.append(SymbolicTerm(coefficient, shift, symbol))
    return terms


def format_expression(terms: List[SymbolicTerm]) -> str:
    return " + ".join(term.render() for term in terms)


def synthesize(
    expr_a: str,
    expr_b: str,
    t_min: Optional[float] = None,
    t_max: Optional[float] = None,
    settings: Optional[Settings] = None,
    env: Optional[Environment] = None,
) -> str:
    """Symbolic approximation of ``expr_a * expr_b`` over ``[t_min, t_max]``.

    Returns an empty string when every term is negligible.
    """
    settings = settings or DEFAULT_SETTINGS
    t_min = settings.t_min if t_min is None else t_min
    t_max = settings.t_max if t_max is None else t_max
    if env is None:
        env = default_environment(settings.impulse_half_width)

    a = sample(compile_expression(expr_a, env), t_min, t_max, settings.coarse_dt)
    b = sample(compile_expression(expr_b, env), t_min, t_max, settings.coarse_dt)
    coarse = convolve(a, b, scale=1.0)

    terms = synthesize_terms(coarse, settings.threshold, settings.decimals)
    logger.debug("kept %d of %d coarse terms", len(terms), len(coarse))
    return format_expression(terms)
