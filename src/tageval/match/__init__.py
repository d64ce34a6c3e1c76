"""Matching engine: comparator, pairing graph, resolver and classification."""

from .compare import FeatureComparison, FeatureSelector, SpanRelation, span_relation
from .differ import DiffResult, compare
from .lists import CandidateList, build_candidate_lists
from .pairing import Pairing, PairingType, PairingValue
from .thresholds import CurveAccumulator, threshold_curve_for_document

__all__ = [
    "CandidateList",
    "CurveAccumulator",
    "DiffResult",
    "FeatureComparison",
    "FeatureSelector",
    "Pairing",
    "PairingType",
    "PairingValue",
    "SpanRelation",
    "build_candidate_lists",
    "compare",
    "span_relation",
    "threshold_curve_for_document",
]
