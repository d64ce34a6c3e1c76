"""Span and feature predicates used to pair targets with responses.

Two questions are answered here and nowhere else:

* how do the spans of two items relate (:func:`span_relation`), and
* do their *significant* features agree (:func:`features_compatible`).

Both functions are pure.  Which features are significant is described by a
:class:`FeatureSelector`: every feature, no feature, or an explicit set of
names.  The comparison policy is either strict equality in both directions
(``EQUALITY``) or the looser ``SUBSUMPTION`` where only the target's
significant features need to be reproduced by the response.  A caller may
additionally plug in a value-equivalence function (e.g. case-insensitive
string comparison) which then replaces ``==``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from tageval.annotations.base import AnnotatedItem
from tageval.utils.textspan import spans_coextensive, spans_overlap

__all__ = [
    "SpanRelation",
    "FeatureComparison",
    "FeatureSelector",
    "ValueEquivalence",
    "span_relation",
    "features_compatible",
]

ValueEquivalence = Callable[[object, object], bool]

_MISSING = object()


class SpanRelation(Enum):
    """Relation between two spans; ``COEXTENSIVE`` implies overlapping."""

    DISJOINT = "disjoint"
    OVERLAPPING = "overlapping"
    COEXTENSIVE = "coextensive"

    @property
    def overlaps(self) -> bool:
        return self is not SpanRelation.DISJOINT


class FeatureComparison(Enum):
    """Policy used to decide whether significant features agree."""

    EQUALITY = "equality"
    SUBSUMPTION = "subsumption"


@dataclass(slots=True, frozen=True)
class FeatureSelector:
    """Which feature names are significant for matching.

    ``names is None`` selects all features, an empty frozenset selects none.
    """

    names: frozenset[str] | None = None

    @classmethod
    def all(cls) -> "FeatureSelector":
        return cls(None)

    @classmethod
    def none(cls) -> "FeatureSelector":
        return cls(frozenset())

    @classmethod
    def of(cls, names: Iterable[str] | None) -> "FeatureSelector":
        """Build a selector from ``names``; ``None`` means all features."""

        if names is None:
            return cls.all()
        return cls(frozenset(names))

    @property
    def selects_all(self) -> bool:
        return self.names is None

    @property
    def selects_none(self) -> bool:
        return self.names is not None and not self.names

    def significant(
        self, target: Mapping[str, object], response: Mapping[str, object]
    ) -> set[str]:
        """Return the significant names present on either side."""

        present = set(target) | set(response)
        if self.names is None:
            return present
        return present & self.names


def span_relation(a: AnnotatedItem, b: AnnotatedItem) -> SpanRelation:
    """Return how the spans of ``a`` and ``b`` relate."""

    sa = (a.start, a.end)
    sb = (b.start, b.end)
    if spans_coextensive(sa, sb):
        return SpanRelation.COEXTENSIVE
    if spans_overlap(sa, sb):
        return SpanRelation.OVERLAPPING
    return SpanRelation.DISJOINT


def features_compatible(
    target: AnnotatedItem,
    response: AnnotatedItem,
    selector: FeatureSelector,
    *,
    comparison: FeatureComparison = FeatureComparison.EQUALITY,
    equivalence: ValueEquivalence | None = None,
) -> bool:
    """Return ``True`` if the significant features of both items agree."""

    if selector.selects_none:
        return True
    t_feats = target.features
    r_feats = response.features
    names = selector.significant(t_feats, r_feats)
    if comparison is FeatureComparison.SUBSUMPTION:
        names = {n for n in names if n in t_feats}
    same = equivalence if equivalence is not None else _equal
    for name in names:
        t_val = t_feats.get(name, _MISSING)
        r_val = r_feats.get(name, _MISSING)
        if t_val is _MISSING or r_val is _MISSING:
            return False
        if not same(t_val, r_val):
            return False
    return True


def _equal(a: object, b: object) -> bool:
    return a == b
