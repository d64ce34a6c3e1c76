"""Tagging evaluation: match annotations against a gold standard and score them.

The public entry point for a single comparison is :func:`tageval.compare`;
corpus-level evaluation lives in :mod:`tageval.pipeline`.
"""

from .annotations import AnnotatedItem, Annotation
from .match import FeatureComparison, FeatureSelector, compare
from .stats import EvalStats, RankCurve, ThresholdCurve

__all__ = [
    "AnnotatedItem",
    "Annotation",
    "EvalStats",
    "FeatureComparison",
    "FeatureSelector",
    "RankCurve",
    "ThresholdCurve",
    "compare",
]

__version__ = "0.1.0"
