from __future__ import annotations

import pytest

from tageval.annotations import AnnotatedItem, Annotation
from tageval.utils.errors import SpanError, SpanOutOfBoundsError


def test_annotation_properties() -> None:
    a = Annotation(2, 7, "Person", {"id": "x"}, id="a1")
    assert a.length == 5
    assert a.span == (2, 7)
    assert a.id == "a1"
    assert isinstance(a, AnnotatedItem)


def test_annotation_defaults_to_no_features() -> None:
    a = Annotation(0, 1, "M")
    assert a.features == {}
    assert a.id is None


@pytest.mark.parametrize("start,end", [(-1, 3), (5, 4)])
def test_invalid_offsets_rejected(start: int, end: int) -> None:
    with pytest.raises(SpanOutOfBoundsError):
        Annotation(start, end, "M")


def test_span_errors_are_value_errors() -> None:
    assert issubclass(SpanOutOfBoundsError, SpanError)
    assert issubclass(SpanError, ValueError)
