"""Evaluation of candidate lists by rank and by score.

A list annotation names, through an *edge feature*, the ids of the element
annotations that are its candidates.  Candidates are ranked by descending
score (rank 0 is the best).  Evaluating "at rank ``k``" picks from every
list the first candidate among ranks ``0..k`` that matches some target,
falling back to the best candidate, and then compares the picks with the
targets like any other response set.  Evaluating "at score ``t``" does the
same among the candidates scoring at least ``t``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from tageval.annotations.base import AnnotatedItem, Annotation
from tageval.stats.curve import DocumentCurve, ThresholdsToUse, quantize
from tageval.stats.evalstats import EvalStats
from tageval.utils.errors import InvalidFeatureValue
from tageval.utils.logging import get_logger

from .compare import (
    FeatureComparison,
    FeatureSelector,
    SpanRelation,
    ValueEquivalence,
    features_compatible,
    span_relation,
)
from .differ import compare
from .scores import feature_score

__all__ = [
    "CandidateList",
    "build_candidate_lists",
    "select_for_rank",
    "select_for_score",
    "rank_curve_for_lists",
    "score_curve_for_lists",
]

logger = get_logger(__name__)


@dataclass(slots=True)
class CandidateList:
    """A list annotation and its candidates, best first."""

    item: AnnotatedItem
    candidates: list[AnnotatedItem] = field(default_factory=list)
    scores: list[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.candidates)


def build_candidate_lists(
    list_items: Sequence[AnnotatedItem],
    elements: Sequence[Annotation],
    edge_feature: str,
    score_feature: str | None = None,
) -> list[CandidateList]:
    """Resolve the candidates of every list annotation.

    The edge feature must hold a list (or tuple) of element ids.  When a
    score feature is given the candidates are sorted by descending score,
    otherwise they keep the order of the edge feature.
    """

    by_id = {e.id: e for e in elements if e.id is not None}
    lists: list[CandidateList] = []
    for item in list_items:
        ids = item.features.get(edge_feature, [])
        if not isinstance(ids, (list, tuple)):
            raise InvalidFeatureValue(
                f"edge feature '{edge_feature}' must be a list of ids, got {ids!r}"
            )
        members: list[AnnotatedItem] = []
        for ident in ids:
            element = by_id.get(str(ident))
            if element is None:
                raise InvalidFeatureValue(f"list refers to unknown element id {ident!r}")
            members.append(element)
        if score_feature:
            scored = [(feature_score(m, score_feature), m) for m in members]
            scored.sort(key=lambda pair: pair[0], reverse=True)
            lists.append(CandidateList(item, [m for _, m in scored], [s for s, _ in scored]))
        else:
            lists.append(CandidateList(item, members))
    return lists


def _matches_any(
    candidate: AnnotatedItem,
    targets: Sequence[AnnotatedItem],
    selector: FeatureSelector,
    comparison: FeatureComparison,
    equivalence: ValueEquivalence | None,
) -> bool:
    for t in targets:
        if span_relation(t, candidate) is SpanRelation.DISJOINT:
            continue
        if features_compatible(
            t, candidate, selector, comparison=comparison, equivalence=equivalence
        ):
            return True
    return False


def _pick(
    pool: list[AnnotatedItem],
    targets: Sequence[AnnotatedItem],
    selector: FeatureSelector,
    comparison: FeatureComparison,
    equivalence: ValueEquivalence | None,
) -> AnnotatedItem | None:
    if not pool:
        return None
    for candidate in pool:
        if _matches_any(candidate, targets, selector, comparison, equivalence):
            return candidate
    return pool[0]


def select_for_rank(
    lists: Iterable[CandidateList],
    targets: Sequence[AnnotatedItem],
    rank: int,
    features: FeatureSelector | Iterable[str] | None = None,
    *,
    comparison: FeatureComparison = FeatureComparison.EQUALITY,
    equivalence: ValueEquivalence | None = None,
) -> list[AnnotatedItem]:
    """Pick one response per non-empty list looking at ranks ``0..rank``."""

    selector = features if isinstance(features, FeatureSelector) else FeatureSelector.of(features)
    picked: list[AnnotatedItem] = []
    for cl in lists:
        choice = _pick(cl.candidates[: rank + 1], targets, selector, comparison, equivalence)
        if choice is not None:
            picked.append(choice)
    return picked


def select_for_score(
    lists: Iterable[CandidateList],
    targets: Sequence[AnnotatedItem],
    threshold: float,
    features: FeatureSelector | Iterable[str] | None = None,
    *,
    comparison: FeatureComparison = FeatureComparison.EQUALITY,
    equivalence: ValueEquivalence | None = None,
) -> list[AnnotatedItem]:
    """Pick one response per list among the candidates scoring ``>= threshold``.

    The lists must have been built with a score feature.
    """

    selector = features if isinstance(features, FeatureSelector) else FeatureSelector.of(features)
    picked: list[AnnotatedItem] = []
    for cl in lists:
        if len(cl.scores) != len(cl.candidates):
            raise ValueError("candidate list was built without scores")
        pool = [c for c, s in zip(cl.candidates, cl.scores) if s >= threshold]
        choice = _pick(pool, targets, selector, comparison, equivalence)
        if choice is not None:
            picked.append(choice)
    return picked


def rank_curve_for_lists(
    lists: Sequence[CandidateList],
    targets: Sequence[AnnotatedItem],
    features: FeatureSelector | Iterable[str] | None = None,
    *,
    comparison: FeatureComparison = FeatureComparison.EQUALITY,
    equivalence: ValueEquivalence | None = None,
) -> DocumentCurve:
    """Evaluate a document at every rank up to its longest list."""

    max_len = max((len(cl) for cl in lists), default=0)
    points: dict[float, EvalStats] = {}
    for rank in range(max_len):
        picked = select_for_rank(
            lists, targets, rank, features, comparison=comparison, equivalence=equivalence
        )
        points[rank] = compare(
            targets, picked, features, comparison=comparison, equivalence=equivalence
        ).stats
    logger.debug("rank curve for %d lists: %d ranks", len(lists), max_len)
    return DocumentCurve(points, EvalStats(targets=len(targets)), higher_is_stricter=False)


def score_curve_for_lists(
    lists: Sequence[CandidateList],
    targets: Sequence[AnnotatedItem],
    features: FeatureSelector | Iterable[str] | None = None,
    *,
    which: ThresholdsToUse = ThresholdsToUse.ALL,
    comparison: FeatureComparison = FeatureComparison.EQUALITY,
    equivalence: ValueEquivalence | None = None,
) -> DocumentCurve:
    """Evaluate a document at every distinct (quantised) candidate score."""

    keys = sorted({quantize(s, which) for cl in lists for s in cl.scores})
    points: dict[float, EvalStats] = {}
    for key in keys:
        picked = select_for_score(
            lists, targets, key, features, comparison=comparison, equivalence=equivalence
        )
        points[key] = compare(
            targets, picked, features, comparison=comparison, equivalence=equivalence
        ).stats
    return DocumentCurve(points, EvalStats(targets=len(targets)), higher_is_stricter=True)
