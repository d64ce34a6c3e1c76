"""Per-document threshold curves and the accumulator that folds them."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from tageval.annotations.base import AnnotatedItem
from tageval.stats.curve import DocumentCurve, ThresholdCurve, ThresholdsToUse, quantize
from tageval.stats.evalstats import EvalStats
from tageval.utils.logging import get_logger

from .compare import FeatureComparison, FeatureSelector, ValueEquivalence
from .differ import compare
from .scores import response_scores

__all__ = ["threshold_curve_for_document", "CurveAccumulator"]

logger = get_logger(__name__)


def threshold_curve_for_document(
    targets: Sequence[AnnotatedItem],
    responses: Sequence[AnnotatedItem],
    score_feature: str,
    features: FeatureSelector | Iterable[str] | None = None,
    *,
    which: ThresholdsToUse = ThresholdsToUse.ALL,
    comparison: FeatureComparison = FeatureComparison.EQUALITY,
    equivalence: ValueEquivalence | None = None,
) -> DocumentCurve:
    """Evaluate one document at each of its distinct (quantised) scores.

    Every response must carry ``score_feature``; otherwise
    :class:`~tageval.utils.errors.MissingScoreFeature` is raised before any
    comparison runs.
    """

    if isinstance(features, FeatureSelector):
        selector = features
    else:
        selector = FeatureSelector.of(features)
    keys = sorted({quantize(s, which) for s in response_scores(responses, score_feature)})
    points: dict[float, EvalStats] = {}
    for key in keys:
        result = compare(
            targets,
            responses,
            selector,
            comparison=comparison,
            equivalence=equivalence,
            score_feature=score_feature,
            threshold=key,
        )
        points[key] = result.stats
    baseline = EvalStats(targets=len(targets))
    return DocumentCurve(points, baseline, higher_is_stricter=True)


class CurveAccumulator:
    """Fold per-document threshold curves into one running curve.

    The accumulator owns its :class:`ThresholdCurve` unless one is passed
    in; nothing is folded until :meth:`fold` is called.
    """

    def __init__(
        self,
        score_feature: str,
        features: FeatureSelector | Iterable[str] | None = None,
        *,
        which: ThresholdsToUse = ThresholdsToUse.ALL,
        comparison: FeatureComparison = FeatureComparison.EQUALITY,
        equivalence: ValueEquivalence | None = None,
        curve: ThresholdCurve | None = None,
    ) -> None:
        if not score_feature:
            raise ValueError("a threshold curve requires a score feature name")
        self.score_feature = score_feature
        self.features = features
        self.which = which
        self.comparison = comparison
        self.equivalence = equivalence
        self.curve = curve if curve is not None else ThresholdCurve()
        self.documents = 0

    def fold(
        self, targets: Sequence[AnnotatedItem], responses: Sequence[AnnotatedItem]
    ) -> DocumentCurve:
        """Evaluate one document and add it to the running curve."""

        doc = threshold_curve_for_document(
            targets,
            responses,
            self.score_feature,
            self.features,
            which=self.which,
            comparison=self.comparison,
            equivalence=self.equivalence,
        )
        self.curve.fold(doc)
        self.documents += 1
        logger.debug(
            "folded document %d: %d keys, curve has %d keys",
            self.documents,
            len(doc),
            len(self.curve),
        )
        return doc
