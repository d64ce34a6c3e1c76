"""Enumerate every structurally possible target/response pairing.

The graph is an *arena*: all candidate :class:`Pairing` records live in one
list and are addressed by their stable integer position.  Adjacency is kept
as one set of arena indices per target and one per response, so later
stages never have to remove objects from shared lists; they mark indices as
resolved instead.

Each overlapping ``(target, response)`` pair is valued by the fixed lattice
of :class:`PairingValue`:

==============  ==============  =====================
relation        compatible      value
==============  ==============  =====================
coextensive     yes             ``CORRECT``
coextensive     no              ``MISMATCH``
overlapping     yes             ``PARTIALLY_CORRECT``
overlapping     no              ``WRONG``
disjoint        -               no pairing
==============  ==============  =====================
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from tageval.annotations.base import AnnotatedItem
from tageval.utils.logging import get_logger

from .compare import (
    FeatureComparison,
    FeatureSelector,
    SpanRelation,
    ValueEquivalence,
    features_compatible,
    span_relation,
)
from .scores import response_scores

__all__ = [
    "PairingValue",
    "PairingType",
    "Pairing",
    "PairingGraph",
    "classify_pair",
    "build_pairing_graph",
]

logger = get_logger(__name__)


class PairingValue(IntEnum):
    """Value of a candidate pairing; higher is better."""

    WRONG = 0
    MISMATCH = 1
    PARTIALLY_CORRECT = 2
    CORRECT = 3


class PairingType(Enum):
    """Final classification of a pairing after resolution."""

    CORRECT = "correct"
    PARTIALLY_CORRECT = "partially_correct"
    MISSING = "missing"
    SPURIOUS = "spurious"
    MISMATCH = "mismatch"


@dataclass(slots=True)
class Pairing:
    """Association between an optional target and an optional response.

    ``target`` and ``response`` are indices into the compared sequences;
    ``None`` marks an absent side.  Candidate pairings always have both
    sides, only the missing/spurious records created after resolution have
    one side absent.
    """

    index: int
    target: int | None
    response: int | None
    value: PairingValue
    coextensive: bool = False
    score: int = 0
    type: PairingType | None = None

    def __post_init__(self) -> None:
        if self.target is None and self.response is None:
            raise ValueError("a pairing needs at least a target or a response")

    @property
    def complete(self) -> bool:
        """``True`` when both the target and the response are present."""

        return self.target is not None and self.response is not None


@dataclass(slots=True)
class PairingGraph:
    """All candidate pairings plus per-target and per-response adjacency."""

    n_targets: int
    n_responses: int
    pairings: list[Pairing] = field(default_factory=list)
    by_target: list[set[int]] = field(default_factory=list)
    by_response: list[set[int]] = field(default_factory=list)
    included: list[bool] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.by_target:
            self.by_target = [set() for _ in range(self.n_targets)]
        if not self.by_response:
            self.by_response = [set() for _ in range(self.n_responses)]
        if not self.included:
            self.included = [True] * self.n_responses

    def add(self, target: int, response: int, value: PairingValue, coextensive: bool) -> Pairing:
        """Register a new candidate pairing in the arena and both indexes."""

        pairing = Pairing(len(self.pairings), target, response, value, coextensive)
        self.pairings.append(pairing)
        self.by_target[target].add(pairing.index)
        self.by_response[response].add(pairing.index)
        return pairing

    def conflicts(self, index: int) -> set[int]:
        """Return every other pairing sharing the target or the response."""

        p = self.pairings[index]
        if p.target is None or p.response is None:
            raise ValueError(f"pairing {index} has no target or no response")
        found = self.by_target[p.target] | self.by_response[p.response]
        found.discard(index)
        return found

    @property
    def n_included_responses(self) -> int:
        return sum(self.included)


def classify_pair(
    target: AnnotatedItem,
    response: AnnotatedItem,
    selector: FeatureSelector,
    *,
    comparison: FeatureComparison = FeatureComparison.EQUALITY,
    equivalence: ValueEquivalence | None = None,
) -> tuple[PairingValue, bool] | None:
    """Return ``(value, coextensive)`` for one pair or ``None`` if disjoint."""

    relation = span_relation(target, response)
    if relation is SpanRelation.DISJOINT:
        return None
    ok = features_compatible(
        target, response, selector, comparison=comparison, equivalence=equivalence
    )
    if relation is SpanRelation.COEXTENSIVE:
        return (PairingValue.CORRECT if ok else PairingValue.MISMATCH), True
    return (PairingValue.PARTIALLY_CORRECT if ok else PairingValue.WRONG), False


def build_pairing_graph(
    targets: Sequence[AnnotatedItem],
    responses: Sequence[AnnotatedItem],
    selector: FeatureSelector,
    *,
    comparison: FeatureComparison = FeatureComparison.EQUALITY,
    equivalence: ValueEquivalence | None = None,
    score_feature: str | None = None,
    threshold: float | None = None,
) -> PairingGraph:
    """Build the pairing graph for one target/response comparison.

    When ``threshold`` is given, responses whose ``score_feature`` is below
    it are excluded from pairing (and flagged in ``graph.included``).  Every
    response must then carry a numeric score.
    """

    graph = PairingGraph(len(targets), len(responses))
    if threshold is not None:
        if not score_feature:
            raise ValueError("a threshold requires a score feature name")
        scores = response_scores(responses, score_feature)
        graph.included = [s >= threshold for s in scores]

    for i, t in enumerate(targets):
        for j, r in enumerate(responses):
            if not graph.included[j]:
                continue
            found = classify_pair(
                t, r, selector, comparison=comparison, equivalence=equivalence
            )
            if found is None:
                continue
            value, coextensive = found
            graph.add(i, j, value, coextensive)

    logger.debug(
        "pairing graph: %d targets, %d/%d responses, %d candidates",
        graph.n_targets,
        graph.n_included_responses,
        graph.n_responses,
        len(graph.pairings),
    )
    return graph
