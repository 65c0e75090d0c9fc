"""Signal sampling, discrete convolution and symbolic term synthesis."""

from convoviz.actions import ViewState, convolve, plot
from convoviz.config import Settings
from convoviz.expressions import EvaluationError, compile_expression
from convoviz.sampling import SampleSequence, sample
from convoviz.symbolic import synthesize

__all__ = [
    "EvaluationError",
    "SampleSequence",
    "Settings",
    "ViewState",
    "compile_expression",
    "convolve",
    "plot",
    "sample",
    "synthesize",
]
