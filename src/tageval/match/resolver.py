"""Select a mutually exclusive set of pairings with a greedy best-first sweep.

The resolver is a heuristic for maximum-weight bipartite matching, not an
exact optimum, and its behaviour is kept stable because reported numbers
depend on it:

1. Every candidate gets a score once, on the initial graph:
   ``value - sum(value of every other pairing on the same target or the
   same response)``.
2. Candidates are ordered by descending ``(score, value, complete,
   index)``.  A higher value puts exact matches before partial ones, complete
   pairings beat one-sided ones, and a later-created pairing wins the
   remaining ties so the order is fully deterministic.
3. The sweep selects each candidate that has not been discarded yet and
   discards every other live candidate on its target or its response
   (*consumption*).  Discards are recorded in a resolved mask instead of
   being removed from the adjacency sets.

Afterwards each target and each response has at most one surviving
pairing; :func:`check_reciprocity` verifies that contract.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tageval.utils.errors import ReciprocityViolation
from tageval.utils.logging import get_logger

from .pairing import PairingGraph

__all__ = ["ResolvedMatching", "score_pairings", "resolve", "check_reciprocity"]

logger = get_logger(__name__)


@dataclass(slots=True)
class ResolvedMatching:
    """Outcome of one resolution over a :class:`PairingGraph`."""

    graph: PairingGraph
    chosen: list[int] = field(default_factory=list)
    discarded: list[int] = field(default_factory=list)
    alive: list[bool] = field(default_factory=list)

    def surviving(self, indices: set[int]) -> list[int]:
        """Return the chosen pairings among ``indices`` in ascending order."""

        return sorted(i for i in indices if self.alive[i])

    def target_match(self, target: int) -> int | None:
        found = self.surviving(self.graph.by_target[target])
        return found[0] if found else None

    def response_match(self, response: int) -> int | None:
        found = self.surviving(self.graph.by_response[response])
        return found[0] if found else None

    @property
    def unmatched_targets(self) -> list[int]:
        return [i for i in range(self.graph.n_targets) if self.target_match(i) is None]

    @property
    def unmatched_responses(self) -> list[int]:
        """Included responses without a surviving pairing."""

        return [
            j
            for j in range(self.graph.n_responses)
            if self.graph.included[j] and self.response_match(j) is None
        ]


def score_pairings(graph: PairingGraph) -> None:
    """Assign the conflict-adjusted score to every candidate pairing."""

    for p in graph.pairings:
        penalty = sum(graph.pairings[c].value for c in graph.conflicts(p.index))
        p.score = int(p.value) - penalty


def _priority_key(graph: PairingGraph, index: int) -> tuple[int, int, int, int]:
    p = graph.pairings[index]
    return (p.score, int(p.value), 1 if p.complete else 0, p.index)


def resolve(graph: PairingGraph) -> ResolvedMatching:
    """Run the greedy sweep over ``graph`` and return the selection."""

    score_pairings(graph)
    n = len(graph.pairings)
    resolved = bytearray(n)
    result = ResolvedMatching(graph, alive=[False] * n)

    order = sorted(range(n), key=lambda i: _priority_key(graph, i), reverse=True)
    for idx in order:
        if resolved[idx]:
            continue
        resolved[idx] = 1
        result.alive[idx] = True
        result.chosen.append(idx)
        for other in sorted(graph.conflicts(idx)):
            if resolved[other]:
                continue
            resolved[other] = 1
            result.discarded.append(other)

    logger.debug("resolved %d of %d candidate pairings", len(result.chosen), n)
    return result


def check_reciprocity(matching: ResolvedMatching) -> None:
    """Raise :class:`ReciprocityViolation` unless every endpoint is paired at most once.

    For each surviving pairing the target's bucket must contain exactly that
    pairing and so must the response's bucket.
    """

    graph = matching.graph
    for t, bucket in enumerate(graph.by_target):
        alive = matching.surviving(bucket)
        if len(alive) > 1:
            raise ReciprocityViolation(f"target {t} keeps {len(alive)} pairings")
        if alive:
            p = graph.pairings[alive[0]]
            if p.response is None:
                raise ReciprocityViolation(f"target {t} is paired with no response")
            back = matching.surviving(graph.by_response[p.response])
            if back != alive:
                raise ReciprocityViolation(
                    f"target {t} and response {p.response} disagree on their pairing"
                )
    for r, bucket in enumerate(graph.by_response):
        alive = matching.surviving(bucket)
        if len(alive) > 1:
            raise ReciprocityViolation(f"response {r} keeps {len(alive)} pairings")
        if alive:
            p = graph.pairings[alive[0]]
            if p.target is None:
                raise ReciprocityViolation(f"response {r} is paired with no target")
            back = matching.surviving(graph.by_target[p.target])
            if back != alive:
                raise ReciprocityViolation(
                    f"response {r} and target {p.target} disagree on their pairing"
                )
