"""Step-function indexes from a threshold (or a rank) to evaluation stats.

A :class:`ThresholdCurve` maps a confidence threshold ``t`` to the stats
obtained when only responses scoring at least ``t`` take part; a
:class:`RankCurve` maps a rank ``k`` to the stats obtained when only the
candidates at rank ``0..k`` are considered.  Both share the same ordered
index and fold algorithm and differ only in which direction is *stricter*
(higher thresholds, lower ranks).

A document contributes a :class:`DocumentCurve`: the stats at each of its
own keys plus a baseline that applies to keys stricter than all of them
(the targets still count, no response does).  Folding it into a curve
adds, for every curve key, the document's stats at that key; keys the
curve has never seen are first inserted with the curve's current value at
that position, so earlier documents are accounted for as well.
"""

from __future__ import annotations

import bisect
import math
from collections.abc import Iterator, Mapping
from enum import Enum

from .evalstats import EvalStats

__all__ = [
    "DocumentCurve",
    "ThresholdCurve",
    "RankCurve",
    "ThresholdsToUse",
    "quantize",
]


class ThresholdsToUse(Enum):
    """Which threshold keys a document contributes to a threshold curve."""

    ALL = "all"
    TENTHS = "tenths"
    HUNDREDTHS = "hundredths"
    THOUSANDTHS = "thousandths"

    @property
    def steps(self) -> int | None:
        return _STEPS[self]


_STEPS = {
    ThresholdsToUse.ALL: None,
    ThresholdsToUse.TENTHS: 10,
    ThresholdsToUse.HUNDREDTHS: 100,
    ThresholdsToUse.THOUSANDTHS: 1000,
}


def quantize(score: float, which: ThresholdsToUse) -> float:
    """Round ``score`` down to the grid of ``which``.

    With ``ALL`` the score is returned unchanged.  Otherwise the result is
    the largest grid value ``key`` with ``key <= score`` as compared in
    floating point, so ``score >= key`` holds exactly when the rounded score
    does and evaluating at grid keys needs no extra pass.
    """

    steps = which.steps
    if steps is None or math.isinf(score):
        return score
    digits = len(str(steps)) - 1
    k = math.floor(score * steps)
    key = round(k / steps, digits)
    upper = round((k + 1) / steps, digits)
    # the product may land one step off either way
    if upper <= score:
        return upper
    if key > score:
        return round((k - 1) / steps, digits)
    return key


class _StepIndex:
    """Sorted keys with step-function lookup towards the stricter side."""

    higher_is_stricter: bool = True

    def __init__(self) -> None:
        self._keys: list[float] = []
        self._stats: dict[float, EvalStats] = {}

    def keys(self) -> list[float]:
        """Return all stored keys in ascending order."""

        return list(self._keys)

    def items(self) -> Iterator[tuple[float, EvalStats]]:
        for key in self._keys:
            yield key, self._stats[key]

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._stats

    def _put(self, key: float, stats: EvalStats) -> None:
        if key not in self._stats:
            bisect.insort(self._keys, key)
        self._stats[key] = stats

    def _nearest_stricter(self, key: float) -> EvalStats | None:
        """Stats at ``key`` or at the closest stricter key, ``None`` past the end."""

        found = self._stats.get(key)
        if found is not None:
            return found
        if self.higher_is_stricter:
            pos = bisect.bisect_right(self._keys, key)
            if pos == len(self._keys):
                return None
            return self._stats[self._keys[pos]]
        pos = bisect.bisect_left(self._keys, key)
        if pos == 0:
            return None
        return self._stats[self._keys[pos - 1]]


class DocumentCurve(_StepIndex):
    """The contribution of one document to a threshold or rank curve."""

    def __init__(
        self,
        points: Mapping[float, EvalStats],
        baseline: EvalStats,
        *,
        higher_is_stricter: bool = True,
    ) -> None:
        super().__init__()
        self.higher_is_stricter = higher_is_stricter
        self.baseline = baseline
        for key, stats in points.items():
            self._put(key, stats)

    def at(self, key: float) -> EvalStats:
        """Return the document's stats when evaluated at ``key``."""

        found = self._nearest_stricter(key)
        return found if found is not None else self.baseline


class _Curve(_StepIndex):
    """Running curve over many documents."""

    def __init__(self) -> None:
        super().__init__()
        # stats for keys stricter than every stored key
        self.top = EvalStats()

    def document(self, points: Mapping[float, EvalStats], baseline: EvalStats) -> DocumentCurve:
        """Wrap one document's stats so they can be folded into this curve."""

        return DocumentCurve(points, baseline, higher_is_stricter=self.higher_is_stricter)

    def get(self, key: float) -> EvalStats:
        """Return a copy of the stats at ``key`` (step function between keys)."""

        found = self._nearest_stricter(key)
        return (found if found is not None else self.top).copy()

    def fold(self, document: DocumentCurve) -> "_Curve":
        """Add one document's contribution to every key of the curve."""

        if document.higher_is_stricter != self.higher_is_stricter:
            raise ValueError("document curve runs in the opposite direction")
        for key in document.keys():
            if key not in self._stats:
                self._put(key, self.get(key))
        for key in self._keys:
            self._stats[key].add(document.at(key))
        self.top.add(document.baseline)
        return self

    def merge(self, other: "_Curve") -> "_Curve":
        """Add ``other`` key-wise into this curve and return ``self``."""

        if type(other) is not type(self):
            raise TypeError(f"cannot merge {type(other).__name__} into {type(self).__name__}")
        merged = {k: self.get(k).add(other.get(k)) for k in set(self._keys) | set(other._keys)}
        self._keys = []
        self._stats = {}
        for key, stats in merged.items():
            self._put(key, stats)
        self.top.add(other.top)
        return self


class ThresholdCurve(_Curve):
    """Stats by confidence threshold; a higher threshold admits fewer responses."""

    higher_is_stricter = True


class RankCurve(_Curve):
    """Stats by candidate rank; rank ``k`` admits the candidates ``0..k``."""

    higher_is_stricter = False
