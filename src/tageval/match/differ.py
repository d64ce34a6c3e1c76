"""Compare a target set with a response set and count the outcome.

:func:`compare` is the single entry point used by the evaluation driver.  It
builds the pairing graph, resolves it, checks the result and turns the
surviving pairings into an :class:`~tageval.stats.evalstats.EvalStats`
together with the six classification buckets.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import cast

from tageval.annotations.base import AnnotatedItem
from tageval.stats.evalstats import EvalStats
from tageval.utils.logging import get_logger
from tageval.utils.textspan import spans_overlap

from .compare import FeatureComparison, FeatureSelector, ValueEquivalence
from .pairing import Pairing, PairingType, PairingValue, build_pairing_graph
from .resolver import check_reciprocity, resolve

__all__ = ["DiffResult", "compare"]

logger = get_logger(__name__)


@dataclass(slots=True)
class DiffResult:
    """Statistics plus the classification of every item of one comparison.

    The ``correct_*``, ``incorrect_*`` and ``spurious`` buckets hold indices
    into the response sequence, ``missing`` holds indices into the target
    sequence.  ``pairings`` lists the chosen pairings followed by one
    one-sided record per missing target and per spurious response.
    """

    stats: EvalStats
    pairings: list[Pairing] = field(default_factory=list)
    correct_strict: tuple[int, ...] = ()
    correct_partial: tuple[int, ...] = ()
    incorrect_strict: tuple[int, ...] = ()
    incorrect_partial: tuple[int, ...] = ()
    missing: tuple[int, ...] = ()
    spurious: tuple[int, ...] = ()

    def matched(self) -> list[tuple[int, int]]:
        """Return ``(target, response)`` for every two-sided pairing."""

        return [
            (p.target, p.response)
            for p in self.pairings
            if p.target is not None and p.response is not None
        ]


def _as_selector(features: FeatureSelector | Iterable[str] | None) -> FeatureSelector:
    if isinstance(features, FeatureSelector):
        return features
    return FeatureSelector.of(features)


def compare(
    targets: Sequence[AnnotatedItem],
    responses: Sequence[AnnotatedItem],
    features: FeatureSelector | Iterable[str] | None = None,
    *,
    comparison: FeatureComparison = FeatureComparison.EQUALITY,
    equivalence: ValueEquivalence | None = None,
    score_feature: str | None = None,
    threshold: float | None = None,
    check: bool = True,
) -> DiffResult:
    """Match ``responses`` against ``targets`` and classify every item.

    ``features`` names the significant features (``None`` means all of
    them, an empty collection means none).  When ``threshold`` is given only
    responses whose ``score_feature`` is at least ``threshold`` take part and
    count as responses; single-correct counts are then not computed.
    """

    selector = _as_selector(features)
    graph = build_pairing_graph(
        targets,
        responses,
        selector,
        comparison=comparison,
        equivalence=equivalence,
        score_feature=score_feature,
        threshold=threshold,
    )
    matching = resolve(graph)
    if check:
        check_reciprocity(matching)

    stats = EvalStats(targets=len(targets), responses=graph.n_included_responses)
    buckets: dict[str, list[int]] = {
        "correct_strict": [],
        "correct_partial": [],
        "incorrect_strict": [],
        "incorrect_partial": [],
    }
    final: list[Pairing] = []
    for idx in sorted(matching.chosen):
        p = graph.pairings[idx]
        response = cast(int, p.response)
        if p.value is PairingValue.CORRECT:
            p.type = PairingType.CORRECT
            stats.correct_strict += 1
            buckets["correct_strict"].append(response)
        elif p.value is PairingValue.PARTIALLY_CORRECT:
            p.type = PairingType.PARTIALLY_CORRECT
            stats.correct_partial += 1
            buckets["correct_partial"].append(response)
        elif p.value is PairingValue.MISMATCH:
            p.type = PairingType.MISMATCH
            stats.incorrect_strict += 1
            buckets["incorrect_strict"].append(response)
        else:
            p.type = PairingType.MISMATCH
            stats.incorrect_partial += 1
            buckets["incorrect_partial"].append(response)
        final.append(p)

    missing = matching.unmatched_targets
    spurious = matching.unmatched_responses
    next_index = len(graph.pairings)
    for t in missing:
        final.append(
            Pairing(next_index, t, None, PairingValue.WRONG, type=PairingType.MISSING)
        )
        next_index += 1
    for r in spurious:
        final.append(
            Pairing(next_index, None, r, PairingValue.WRONG, type=PairingType.SPURIOUS)
        )
        next_index += 1

    if threshold is None:
        spurious_spans = [(responses[r].start, responses[r].end) for r in spurious]
        for p in final:
            if p.type not in (PairingType.CORRECT, PairingType.PARTIALLY_CORRECT):
                continue
            target = targets[cast(int, p.target)]
            span = (target.start, target.end)
            if any(spans_overlap(span, s) for s in spurious_spans):
                continue
            if p.type is PairingType.CORRECT:
                stats.single_correct_strict += 1
            else:
                stats.single_correct_partial += 1

    logger.debug("compare: %s", stats.short_counts())
    return DiffResult(
        stats=stats,
        pairings=final,
        correct_strict=tuple(buckets["correct_strict"]),
        correct_partial=tuple(buckets["correct_partial"]),
        incorrect_strict=tuple(buckets["incorrect_strict"]),
        incorrect_partial=tuple(buckets["incorrect_partial"]),
        missing=tuple(missing),
        spurious=tuple(spurious),
    )
