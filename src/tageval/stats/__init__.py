"""Evaluation statistics: additive counters and threshold/rank curves."""

from .curve import DocumentCurve, RankCurve, ThresholdCurve, ThresholdsToUse, quantize
from .evalstats import EvalStats, MacroStats, f_measure

__all__ = [
    "DocumentCurve",
    "EvalStats",
    "MacroStats",
    "RankCurve",
    "ThresholdCurve",
    "ThresholdsToUse",
    "f_measure",
    "quantize",
]
