from __future__ import annotations

import pytest

from tageval.stats.evalstats import EvalStats, MacroStats, f_measure


def _stats(**counts: int) -> EvalStats:
    return EvalStats(**counts)


def test_derived_counts() -> None:
    es = _stats(
        targets=10,
        responses=8,
        correct_strict=4,
        correct_partial=2,
        incorrect_strict=1,
        incorrect_partial=1,
    )
    assert es.correct_lenient == 6
    assert es.incorrect_lenient == 2
    assert es.missing_lenient == 4
    assert es.spurious_lenient == 2
    assert es.missing_strict == 6
    assert es.spurious_strict == 4
    assert es.true_missing_lenient == 2
    assert es.true_missing_strict == 5
    assert es.true_spurious_lenient == 0
    assert es.true_spurious_strict == 3


def test_measures() -> None:
    es = _stats(targets=4, responses=2, correct_strict=1, correct_partial=1)
    assert es.precision_strict == 0.5
    assert es.recall_strict == 0.25
    assert es.precision_lenient == 1.0
    assert es.recall_lenient == 0.5
    assert es.precision_average == 0.75
    assert es.recall_average == pytest.approx(0.375)
    assert es.f_measure_strict(1.0) == pytest.approx(1 / 3)
    assert es.f_measure_lenient(1.0) == pytest.approx(2 / 3)
    assert es.f_measure_average(1.0) == pytest.approx(0.5)


def test_f_measure_beta_and_zero() -> None:
    assert f_measure(1.0, 0.0, 0.0) == 0.0
    assert f_measure(2.0, 0.5, 1.0) == pytest.approx(5 * 0.5 / (4 * 0.5 + 1.0))
    assert f_measure(0.5, 1.0, 0.5) == pytest.approx(1.25 * 0.5 / (0.25 + 0.5))


def test_empty_denominators_are_zero() -> None:
    es = EvalStats()
    assert es.precision_strict == 0.0
    assert es.recall_lenient == 0.0
    assert es.single_correct_accuracy_strict == 0.0


def test_negative_counts_rejected() -> None:
    with pytest.raises(ValueError):
        EvalStats(targets=-1)


def test_add_is_in_place_and_returns_self() -> None:
    a = _stats(targets=1, responses=2, correct_strict=1)
    b = _stats(targets=3, responses=1, incorrect_partial=1, single_correct_partial=1)
    assert a.add(b) is a
    assert a.counts() == {
        "targets": 4,
        "responses": 3,
        "correct_strict": 1,
        "correct_partial": 0,
        "incorrect_strict": 0,
        "incorrect_partial": 1,
        "single_correct_strict": 0,
        "single_correct_partial": 1,
    }
    assert b.targets == 3


def test_add_associative_and_commutative() -> None:
    a = _stats(targets=2, responses=1, correct_strict=1)
    b = _stats(targets=1, responses=3, correct_partial=1, incorrect_strict=1)
    c = _stats(targets=5, responses=5, correct_strict=4, single_correct_strict=2)
    left = (a + b) + c
    right = a + (b + c)
    assert left == right
    assert a + b == b + a
    assert a.targets == 2


def test_single_correct_accuracy() -> None:
    es = _stats(targets=4, single_correct_strict=1, single_correct_partial=1)
    assert es.single_correct_accuracy_strict == 0.25
    assert es.single_correct_accuracy_lenient == 0.5


def test_macro_average() -> None:
    macro = MacroStats()
    macro.add(_stats(targets=1, responses=1, correct_strict=1))
    macro.add(_stats(targets=9, responses=9, correct_strict=0))
    assert macro.precision_strict == 0.5
    assert macro.f_measure_strict() == 0.5
    assert macro.totals.targets == 10
    assert macro.totals.precision_strict == pytest.approx(0.1)
    assert MacroStats().recall_lenient == 0.0
