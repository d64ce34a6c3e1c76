"""Pure helpers for half-open character spans.

Spans are ``[start, end)`` intervals: ``start`` is inclusive and ``end`` is
exclusive, so two spans that merely touch at a boundary do not overlap.
"""

from __future__ import annotations


def spans_overlap(a: tuple[int, int], b: tuple[int, int]) -> bool:
    """Return ``True`` if span ``a`` overlaps span ``b``.

    Identical spans always overlap, including zero-length ones.
    """

    if a == b:
        return True
    return not (a[1] <= b[0] or b[1] <= a[0])


def spans_coextensive(a: tuple[int, int], b: tuple[int, int]) -> bool:
    """Return ``True`` if both spans have identical offsets."""

    return a[0] == b[0] and a[1] == b[1]


def span_contains(outer: tuple[int, int], inner: tuple[int, int]) -> bool:
    """Return ``True`` if ``outer`` fully contains ``inner``."""

    return outer[0] <= inner[0] and inner[1] <= outer[1]
