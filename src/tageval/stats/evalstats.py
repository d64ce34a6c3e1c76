"""Counters and derived precision/recall/F measures for tagging evaluation.

:class:`EvalStats` only stores integer counts.  Every measure is derived on
demand, so two accumulators can be merged by summing their counters in any
order (``add`` is associative and commutative).  Strict measures credit only
coextensive matches; lenient measures also credit partially overlapping
ones; average measures are the mean of the two.

Derived counts follow these identities:

* ``missing_lenient  = targets - correct_strict - correct_partial``
* ``spurious_lenient = responses - correct_strict - correct_partial``
* ``true_missing_lenient = targets - correct - incorrect`` (never paired)
* ``true_missing_strict  = targets - correct_strict - incorrect_strict``
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields

__all__ = ["EvalStats", "MacroStats", "f_measure", "COUNTER_FIELDS"]


def _ratio(num: int, den: int) -> float:
    return num / den if den else 0.0


def f_measure(beta: float, precision: float, recall: float) -> float:
    """Return the weighted harmonic mean of ``precision`` and ``recall``.

    ``beta`` weighs recall ``beta`` times as much as precision.  The result
    is ``0.0`` when both inputs are zero.
    """

    if precision + recall == 0:
        return 0.0
    b2 = beta * beta
    den = b2 * precision + recall
    if den == 0:
        return 0.0
    return (1.0 + b2) * precision * recall / den


@dataclass(slots=True)
class EvalStats:
    """Mutable, additive evaluation counters."""

    targets: int = 0
    responses: int = 0
    correct_strict: int = 0
    correct_partial: int = 0
    incorrect_strict: int = 0
    incorrect_partial: int = 0
    single_correct_strict: int = 0
    single_correct_partial: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"{f.name} must be non-negative")

    # -- merging -----------------------------------------------------------

    def add(self, other: "EvalStats") -> "EvalStats":
        """Add all counters of ``other`` into ``self`` and return ``self``."""

        for name in COUNTER_FIELDS:
            setattr(self, name, getattr(self, name) + getattr(other, name))
        return self

    def __add__(self, other: "EvalStats") -> "EvalStats":
        return self.copy().add(other)

    def copy(self) -> "EvalStats":
        return EvalStats(**asdict(self))

    def counts(self) -> dict[str, int]:
        return asdict(self)

    # -- derived counts ----------------------------------------------------

    @property
    def correct_lenient(self) -> int:
        return self.correct_strict + self.correct_partial

    @property
    def incorrect_lenient(self) -> int:
        return self.incorrect_strict + self.incorrect_partial

    @property
    def missing_strict(self) -> int:
        return self.targets - self.correct_strict

    @property
    def missing_lenient(self) -> int:
        return self.targets - self.correct_lenient

    @property
    def spurious_strict(self) -> int:
        return self.responses - self.correct_strict

    @property
    def spurious_lenient(self) -> int:
        return self.responses - self.correct_lenient

    @property
    def true_missing_strict(self) -> int:
        return self.targets - self.correct_strict - self.incorrect_strict

    @property
    def true_missing_lenient(self) -> int:
        return self.targets - self.correct_lenient - self.incorrect_lenient

    @property
    def true_spurious_strict(self) -> int:
        return self.responses - self.correct_strict - self.incorrect_strict

    @property
    def true_spurious_lenient(self) -> int:
        return self.responses - self.correct_lenient - self.incorrect_lenient

    # -- measures ----------------------------------------------------------

    @property
    def precision_strict(self) -> float:
        return _ratio(self.correct_strict, self.responses)

    @property
    def recall_strict(self) -> float:
        return _ratio(self.correct_strict, self.targets)

    @property
    def precision_lenient(self) -> float:
        return _ratio(self.correct_lenient, self.responses)

    @property
    def recall_lenient(self) -> float:
        return _ratio(self.correct_lenient, self.targets)

    @property
    def precision_average(self) -> float:
        return (self.precision_strict + self.precision_lenient) / 2.0

    @property
    def recall_average(self) -> float:
        return (self.recall_strict + self.recall_lenient) / 2.0

    def f_measure_strict(self, beta: float = 1.0) -> float:
        return f_measure(beta, self.precision_strict, self.recall_strict)

    def f_measure_lenient(self, beta: float = 1.0) -> float:
        return f_measure(beta, self.precision_lenient, self.recall_lenient)

    def f_measure_average(self, beta: float = 1.0) -> float:
        return (self.f_measure_strict(beta) + self.f_measure_lenient(beta)) / 2.0

    @property
    def single_correct_accuracy_strict(self) -> float:
        return _ratio(self.single_correct_strict, self.targets)

    @property
    def single_correct_accuracy_lenient(self) -> float:
        return _ratio(self.single_correct_strict + self.single_correct_partial, self.targets)

    def short_counts(self) -> str:
        """Compact one-line summary used in log messages."""

        return (
            f"t={self.targets} r={self.responses} cs={self.correct_strict} "
            f"cp={self.correct_partial} is={self.incorrect_strict} "
            f"ip={self.incorrect_partial} ml={self.true_missing_lenient} "
            f"sl={self.true_spurious_lenient}"
        )


COUNTER_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(EvalStats))


class MacroStats:
    """Macro average of the measures of several accumulators (one per type).

    Counters are still summed so totals stay available, but precision,
    recall and F are the unweighted mean over the added accumulators.
    """

    def __init__(self) -> None:
        self.members: list[EvalStats] = []
        self.totals = EvalStats()

    def add(self, stats: EvalStats) -> "MacroStats":
        self.members.append(stats)
        self.totals.add(stats)
        return self

    def _mean(self, values: list[float]) -> float:
        return sum(values) / len(values) if values else 0.0

    @property
    def precision_strict(self) -> float:
        return self._mean([m.precision_strict for m in self.members])

    @property
    def recall_strict(self) -> float:
        return self._mean([m.recall_strict for m in self.members])

    @property
    def precision_lenient(self) -> float:
        return self._mean([m.precision_lenient for m in self.members])

    @property
    def recall_lenient(self) -> float:
        return self._mean([m.recall_lenient for m in self.members])

    def f_measure_strict(self, beta: float = 1.0) -> float:
        return self._mean([m.f_measure_strict(beta) for m in self.members])

    def f_measure_lenient(self, beta: float = 1.0) -> float:
        return self._mean([m.f_measure_lenient(beta) for m in self.members])
