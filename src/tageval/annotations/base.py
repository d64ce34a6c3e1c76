"""Core annotation model and protocol definitions.

Spans follow the half-open interval convention ``[start, end)``.  The
matcher only needs offsets and a feature mapping; the ``type`` tag is
carried for callers that pre-filter annotation sets by type and is never
inspected during comparison.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from tageval.utils.errors import SpanOutOfBoundsError


@runtime_checkable
class AnnotatedItem(Protocol):
    """Anything with offsets and features can be evaluated."""

    @property
    def start(self) -> int: ...

    @property
    def end(self) -> int: ...

    @property
    def type(self) -> str: ...

    @property
    def features(self) -> Mapping[str, object]: ...


@dataclass(slots=True, frozen=True)
class Annotation:
    """A typed, feature-bearing span over a document's text.

    ``id`` is optional and only needed when other annotations refer to this
    one, e.g. list annotations naming their candidate elements.
    """

    start: int
    end: int
    type: str
    features: dict[str, object] = field(default_factory=dict)
    id: str | None = None

    def __post_init__(self) -> None:  # noqa: D401 - simple validation
        if self.start < 0 or self.end < self.start:
            raise SpanOutOfBoundsError(f"invalid span [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        """Return span length in characters."""

        return self.end - self.start

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)
