"""Restrict an annotation set to the regions covered by container annotations."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TypeVar

from tageval.annotations.base import AnnotatedItem
from tageval.utils.textspan import span_contains, spans_coextensive, spans_overlap

__all__ = ["ContainmentType", "select_by_containment"]

T = TypeVar("T", bound=AnnotatedItem)


class ContainmentType(Enum):
    """How an item must relate to a container to be kept."""

    OVERLAPPING = "overlapping"
    CONTAINING = "containing"
    COEXTENSIVE = "coextensive"


def _keeps(how: ContainmentType, container: tuple[int, int], item: tuple[int, int]) -> bool:
    if how is ContainmentType.OVERLAPPING:
        return spans_overlap(container, item)
    if how is ContainmentType.CONTAINING:
        return span_contains(container, item)
    return spans_coextensive(container, item)


def select_by_containment(
    items: Sequence[T],
    containers: Sequence[AnnotatedItem],
    how: ContainmentType = ContainmentType.OVERLAPPING,
) -> list[T]:
    """Keep the items related to at least one container, in input order.

    With no containers nothing is kept.
    """

    spans = [(c.start, c.end) for c in containers]
    return [
        item
        for item in items
        if any(_keeps(how, span, (item.start, item.end)) for span in spans)
    ]
