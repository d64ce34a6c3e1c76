from __future__ import annotations

from typing import Any

import pytest

from tageval.annotations import Annotation
from tageval.match.thresholds import CurveAccumulator, threshold_curve_for_document
from tageval.stats.curve import (
    DocumentCurve,
    RankCurve,
    ThresholdCurve,
    ThresholdsToUse,
    quantize,
)
from tageval.stats.evalstats import EvalStats
from tageval.utils.errors import MissingScoreFeature


def _ann(start: int, end: int, **features: Any) -> Annotation:
    return Annotation(start, end, "M", dict(features))


def test_two_targets_two_scores() -> None:
    targets = [_ann(0, 10, id="x"), _ann(60, 70, id="x")]
    responses = [_ann(0, 10, id="x", s="0.1"), _ann(60, 70, id="x", s="0.5")]
    acc = CurveAccumulator("s", ["id"])
    acc.fold(targets, responses)
    curve = acc.curve
    assert curve.keys() == [0.1, 0.5]
    assert curve.get(0.5).precision_strict == 1.0
    assert curve.get(0.5).recall_strict == 0.5
    assert curve.get(0.1).f_measure_strict(1.0) == 1.0


def test_four_scores_in_one_document() -> None:
    targets = [_ann(s, s + 10, id="x") for s in (0, 20, 40, 60)]
    responses = [
        _ann(s, s + 10, id="x", s=score)
        for s, score in zip((0, 20, 40, 60), ("0.1", "0.2", "0.3", "0.4"))
    ]
    acc = CurveAccumulator("s", ["id"])
    acc.fold(targets, responses)
    expected = {0.1: 1.0, 0.2: 0.75, 0.3: 0.5, 0.4: 0.25}
    for th, recall in expected.items():
        stats = acc.curve.get(th)
        assert stats.precision_strict == 1.0
        assert stats.recall_strict == pytest.approx(recall)


def test_scores_spread_over_two_documents() -> None:
    doc1_t = [_ann(0, 10, id="x"), _ann(40, 50, id="x")]
    doc1_r = [_ann(0, 10, id="x", s="0.1"), _ann(40, 50, id="x", s="0.3")]
    doc2_t = [_ann(20, 30, id="x"), _ann(60, 70, id="x")]
    doc2_r = [_ann(20, 30, id="x", s="0.2"), _ann(60, 70, id="x", s="0.4")]
    acc = CurveAccumulator("s", ["id"])
    acc.fold(doc1_t, doc1_r)
    acc.fold(doc2_t, doc2_r)
    assert acc.documents == 2
    expected = {0.1: 1.0, 0.2: 0.75, 0.3: 0.5, 0.4: 0.25}
    for th, recall in expected.items():
        stats = acc.curve.get(th)
        assert stats.targets == 4
        assert stats.precision_strict == 1.0
        assert stats.recall_strict == pytest.approx(recall)


def test_get_is_a_step_function() -> None:
    targets = [_ann(0, 10), _ann(20, 30)]
    responses = [_ann(0, 10, s=0.2), _ann(20, 30, s=0.6)]
    acc = CurveAccumulator("s", [])
    acc.fold(targets, responses)
    curve = acc.curve
    assert curve.get(0.4) == curve.get(0.6)
    assert curve.get(0.0) == curve.get(0.2)
    beyond = curve.get(0.9)
    assert beyond.targets == 2 and beyond.responses == 0


def test_curve_is_monotone_in_responses() -> None:
    targets = [_ann(i, i + 5) for i in range(0, 50, 10)]
    responses = [_ann(i, i + 5, s=i / 100) for i in range(0, 60, 5)]
    acc = CurveAccumulator("s", [])
    acc.fold(targets, responses)
    acc.fold(targets[:2], responses[3:7])
    keys = acc.curve.keys()
    counts = [acc.curve.get(k).responses for k in keys]
    assert counts == sorted(counts, reverse=True)


def test_document_without_responses_still_counts_targets() -> None:
    acc = CurveAccumulator("s", [])
    acc.fold([_ann(0, 10)], [_ann(0, 10, s=0.5)])
    acc.fold([_ann(0, 10), _ann(20, 30)], [])
    stats = acc.curve.get(0.5)
    assert stats.targets == 3
    assert stats.responses == 1


def test_missing_score_feature_raises() -> None:
    with pytest.raises(MissingScoreFeature):
        threshold_curve_for_document([_ann(0, 1)], [_ann(0, 1)], "s")


def test_quantize_grid() -> None:
    assert quantize(0.37, ThresholdsToUse.ALL) == 0.37
    assert quantize(0.37, ThresholdsToUse.TENTHS) == 0.3
    assert quantize(0.37, ThresholdsToUse.HUNDREDTHS) == 0.37
    assert quantize(0.3, ThresholdsToUse.TENTHS) == 0.3
    assert quantize(0.3779, ThresholdsToUse.THOUSANDTHS) == 0.377


def test_quantize_never_exceeds_score() -> None:
    assert quantize(0.2999999999, ThresholdsToUse.TENTHS) == 0.2
    assert quantize(0.57, ThresholdsToUse.HUNDREDTHS) == 0.57
    for which in (ThresholdsToUse.TENTHS, ThresholdsToUse.HUNDREDTHS, ThresholdsToUse.THOUSANDTHS):
        for score in (0.0, 0.1, 0.29, 0.3, 0.57, 0.7, 0.999999999, 1.0):
            assert quantize(score, which) <= score


def test_score_just_below_grid_point_is_counted_at_its_key() -> None:
    targets = [_ann(0, 10)]
    responses = [_ann(0, 10, s=0.2999999999)]
    doc = threshold_curve_for_document(targets, responses, "s", [], which=ThresholdsToUse.TENTHS)
    assert doc.keys() == [0.2]
    assert doc.at(0.2).responses == 1
    assert doc.at(0.2).correct_strict == 1


def test_grid_thresholds_reduce_keys() -> None:
    targets = [_ann(0, 10), _ann(20, 30)]
    responses = [_ann(0, 10, s=0.31), _ann(20, 30, s=0.39)]
    doc = threshold_curve_for_document(targets, responses, "s", [], which=ThresholdsToUse.TENTHS)
    assert doc.keys() == [0.3]
    assert doc.at(0.3).correct_strict == 2


def test_merge_equals_sequential_fold() -> None:
    docs = [
        ([_ann(0, 10), _ann(20, 30)], [_ann(0, 10, s=0.2), _ann(20, 30, s=0.7)]),
        ([_ann(0, 10)], [_ann(0, 10, s=0.5), _ann(40, 50, s=0.9)]),
        ([_ann(5, 10)], [_ann(5, 10, s=0.7)]),
    ]
    sequential = CurveAccumulator("s", [])
    for t, r in docs:
        sequential.fold(t, r)

    left = CurveAccumulator("s", [])
    right = CurveAccumulator("s", [])
    left.fold(*docs[0])
    right.fold(*docs[1])
    right.fold(*docs[2])
    merged = left.curve.merge(right.curve)

    assert merged.keys() == sequential.curve.keys()
    for key in merged.keys():
        assert merged.get(key) == sequential.curve.get(key)
    assert merged.top == sequential.curve.top


def test_rank_curve_direction() -> None:
    curve = RankCurve()
    points = {
        0: EvalStats(targets=2, responses=2, correct_strict=1),
        1: EvalStats(targets=2, responses=2, correct_strict=2),
    }
    curve.fold(curve.document(points, EvalStats(targets=2)))
    assert curve.keys() == [0, 1]
    assert curve.get(0).correct_strict == 1
    assert curve.get(5).correct_strict == 2
    assert curve.get(-1).responses == 0


def test_fold_rejects_opposite_direction() -> None:
    doc = DocumentCurve({0: EvalStats()}, EvalStats(), higher_is_stricter=False)
    with pytest.raises(ValueError):
        ThresholdCurve().fold(doc)
    with pytest.raises(TypeError):
        ThresholdCurve().merge(RankCurve())  # type: ignore[arg-type]
