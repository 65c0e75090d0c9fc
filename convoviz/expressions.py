"""Expression evaluator for signal definitions.

Signals are typed as small Python-like expressions of ``t``, e.g.
``3*u(t) - u(t-2)`` or ``r(t-1)*exp(-t)``. A few calculator habits are
normalized first (``^`` for powers, ``3t`` or ``3u(t)`` for a product,
``e^(...)``), then the text is compiled once and evaluated against an
explicit, read-only :class:`Environment` holding the primitives ``u``, ``r``
and ``delta``.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

import numpy as np

from convoviz.config import IMPULSE_HALF_WIDTH

logger = logging.getLogger(__name__)


class EvaluationError(ValueError):
    """Raised when an expression cannot be parsed or evaluated."""


# ==============================
# Primitives
# ==============================

def u(t):
    """Unit step: 1 for t >= 0, else 0."""
    return (np.asarray(t, dtype=float) >= 0).astype(float)


def r(t):
    """Ramp: t for t >= 0, else 0."""
    t = np.asarray(t, dtype=float)
    return np.where(t >= 0, t, 0.0)


def make_delta(half_width: float = IMPULSE_HALF_WIDTH):
    """Build the impulse approximation: 1 where |t| < half_width, else 0."""
    if half_width <= 0:
        raise ValueError("impulse half-width must be positive")

    def delta(t):
        return (np.abs(np.asarray(t, dtype=float)) < half_width).astype(float)

    return delta


class Environment(Mapping[str, Any]):
    """Read-only set of names an expression may reference."""

    def __init__(self, names: Mapping[str, Any]):
        self._names = MappingProxyType(dict(names))

    def __getitem__(self, key: str) -> Any:
        return self._names[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def with_names(self, **extra: Any) -> "Environment":
        """Return a new environment with ``extra`` added; this one is untouched."""
        merged = dict(self._names)
        merged.update(extra)
        return Environment(merged)

    def __repr__(self) -> str:
        return f"Environment({sorted(self._names)})"


@lru_cache(maxsize=None)
def default_environment(impulse_half_width: float = IMPULSE_HALF_WIDTH) -> Environment:
    return Environment({
        "u": u,
        "r": r,
        "delta": make_delta(impulse_half_width),
        "np": np,
        "pi": np.pi,
        "e": np.e,
        "exp": np.exp,
        # complex for negative arguments, so u/r masking yields exact zeros
        "log": np.emath.log,
        "sqrt": np.emath.sqrt,
        "abs": np.abs,
        "sin": np.sin,
        "cos": np.cos,
        "tan": np.tan,
    })


DEFAULT_ENVIRONMENT = default_environment()


# ==============================
# Parsing
# ==============================

_EXP_POWER = re.compile(r"(?<![\w.])e\s*\^\s*\(")
_NUMBER_THEN_OPERAND = re.compile(
    r"(?<![\w.])(\d+(?:\.\d*)?(?:[eE][+-]?\d+)?)(?![\d.])(?![eE][+-]?\d)\s*(?![jJ]\b)(?=[A-Za-z_(])"
)
_CLOSE_THEN_OPERAND = re.compile(r"\)\s*(?!(?:and|or|if|else|for|in|is|not)\b)(?=[A-Za-z_(\d])")


def preprocess(expr: str) -> str:
    """Normalize a few common syntaxes to valid Python."""
    s = expr.strip()
    # e^(...) -> exp(...)
    s = _EXP_POWER.sub("exp(", s)
    # implicit multiplication: '3t', '3u(t)', '2(t-1)', '(t+1)(t-1)'
    s = _NUMBER_THEN_OPERAND.sub(r"\1*", s)
    s = _CLOSE_THEN_OPERAND.sub(")*", s)
    return s.replace("^", "**")


class CompiledExpression:
    """A parsed expression bound to its evaluation environment."""

    def __init__(self, source: str, code, env: Environment):
        self.source = source
        self.env = env
        self._code = code

    def evaluate(self, scope: Mapping[str, Any]):
        """Evaluate with ``scope["t"]`` as a scalar or a numpy array.

        Returns a float for scalar ``t`` and a float array shaped like ``t``
        otherwise; constant expressions are broadcast.
        """
        if "t" not in scope:
            raise EvaluationError("No value given for 't'")
        t = scope["t"]
        namespace = dict(self.env)
        namespace.update(scope)
        namespace["__builtins__"] = {}
        try:
            with np.errstate(all="ignore"):
                result = eval(self._code, namespace)
        except Exception as exc:
            logger.warning("evaluation of %r failed: %s", self.source, exc)
            raise EvaluationError(f"Error in expression '{self.source}': {exc}") from exc
        return _coerce(result, t, self.source)

    def __call__(self, t):
        return self.evaluate({"t": t})

    def __repr__(self) -> str:
        return f"CompiledExpression({self.source!r})"


def _coerce(result, t, source: str):
    raw = np.asarray(result)
    if np.iscomplexobj(raw):
        # sqrt/log of a negative time masked by u(t) leaves an exact 0j
        imag = raw.imag
        if np.any((imag != 0) & np.isfinite(imag)):
            raise EvaluationError(f"Expression '{source}' produced complex values")
        raw = raw.real
    try:
        values = raw.astype(float)
    except (TypeError, ValueError) as exc:
        raise EvaluationError(f"Expression '{source}' did not produce a number") from exc

    shape = np.shape(t)
    if shape == ():
        if values.size != 1:
            raise EvaluationError(f"Expression '{source}' produced shape {values.shape}, expected a scalar")
        return float(values.reshape(()))
    if values.ndim == 0:
        return np.full(shape, float(values))
    if values.shape != shape:
        raise EvaluationError(f"Expression '{source}' produced shape {values.shape}, expected {shape}")
    return values


def compile_expression(expr: str, env: Optional[Environment] = None) -> CompiledExpression:
    """Parse ``expr`` once; raise :class:`EvaluationError` on malformed input."""
    if env is None:
        env = DEFAULT_ENVIRONMENT
    if expr is None or not expr.strip():
        raise EvaluationError("Empty expression")

    source = preprocess(expr)
    try:
        code = compile(source, "<signal>", "eval")
    except SyntaxError as exc:
        logger.warning("could not parse %r: %s", expr, exc.msg)
        raise EvaluationError(f"Invalid syntax in '{expr}': {exc.msg}") from exc

    hidden = [name for name in code.co_names if name.startswith("_")]
    if hidden:
        raise EvaluationError(f"Name '{hidden[0]}' is not allowed in '{expr}'")
    return CompiledExpression(expr, code, env)
