"""Handling of NIL annotations.

A NIL annotation is one whose id feature (the first configured feature
name) is missing or equals the configured NIL value.  With
``NIL_IS_ABSENT`` such annotations are dropped from the target, response
and reference sets before comparison; with ``NO_NILS`` they are compared
like any other annotation.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import TypeVar

from tageval.annotations.base import AnnotatedItem

__all__ = ["NilTreatment", "apply_nil_treatment", "is_nil", "remove_nils"]

T = TypeVar("T", bound=AnnotatedItem)


class NilTreatment(Enum):
    NO_NILS = "no_nils"
    NIL_IS_ABSENT = "nil_is_absent"


def is_nil(item: AnnotatedItem, id_feature: str, nil_value: str = "") -> bool:
    value = item.features.get(id_feature)
    text = "" if value is None else str(value)
    return text == nil_value


def remove_nils(items: Iterable[T], id_feature: str, nil_value: str = "") -> list[T]:
    """Return ``items`` without the NIL annotations, keeping their order."""

    return [item for item in items if not is_nil(item, id_feature, nil_value)]


def apply_nil_treatment(
    items: Sequence[T],
    treatment: NilTreatment,
    feature_names: Sequence[str] | None,
    nil_value: str = "",
) -> list[T]:
    """Apply ``treatment``; NILs only exist when feature names are configured."""

    if treatment is NilTreatment.NIL_IS_ABSENT and feature_names:
        return remove_nils(items, feature_names[0], nil_value)
    return list(items)
