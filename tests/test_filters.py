from __future__ import annotations

from tageval.annotations import Annotation
from tageval.filters import (
    ContainmentType,
    NilTreatment,
    apply_nil_treatment,
    remove_nils,
    select_by_containment,
)
from tageval.filters.nil import is_nil


def _ann(start: int, end: int, **features: object) -> Annotation:
    return Annotation(start, end, "M", dict(features))


def test_remove_nils_default_value() -> None:
    items = [_ann(0, 1, id="x"), _ann(2, 3, id=""), _ann(4, 5)]
    assert remove_nils(items, "id") == [items[0]]


def test_remove_nils_custom_value() -> None:
    items = [_ann(0, 1, id="NIL"), _ann(2, 3, id="x")]
    assert is_nil(items[0], "id", "NIL")
    assert remove_nils(items, "id", "NIL") == [items[1]]


def test_nil_treatment_needs_feature_names() -> None:
    items = [_ann(0, 1, id=""), _ann(2, 3, id="x")]
    assert apply_nil_treatment(items, NilTreatment.NIL_IS_ABSENT, ["id"]) == [items[1]]
    assert apply_nil_treatment(items, NilTreatment.NIL_IS_ABSENT, []) == items
    assert apply_nil_treatment(items, NilTreatment.NO_NILS, ["id"]) == items


def test_containment_modes() -> None:
    containers = [_ann(10, 20)]
    items = [_ann(5, 12), _ann(12, 15), _ann(10, 20), _ann(20, 25)]
    assert select_by_containment(items, containers, ContainmentType.OVERLAPPING) == items[:3]
    assert select_by_containment(items, containers, ContainmentType.CONTAINING) == items[1:3]
    assert select_by_containment(items, containers, ContainmentType.COEXTENSIVE) == [items[2]]


def test_no_containers_keeps_nothing() -> None:
    assert select_by_containment([_ann(0, 1)], []) == []
