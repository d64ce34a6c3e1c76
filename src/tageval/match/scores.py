"""Reading numeric confidence scores from item features."""

from __future__ import annotations

import math
from collections.abc import Sequence

from tageval.annotations.base import AnnotatedItem
from tageval.utils.errors import InvalidFeatureValue, MissingScoreFeature

__all__ = ["feature_score", "response_scores"]


def feature_score(item: AnnotatedItem, feature: str) -> float:
    """Return the value of ``feature`` on ``item`` as a float.

    Numbers are used as is and strings are parsed.  A missing feature raises
    :class:`MissingScoreFeature`; anything that is not a finite-or-infinite
    number raises :class:`InvalidFeatureValue`.
    """

    value = item.features.get(feature)
    if value is None:
        raise MissingScoreFeature(
            f"response [{item.start}, {item.end}) has no score feature '{feature}'"
        )
    if isinstance(value, bool):
        raise InvalidFeatureValue(f"score feature '{feature}' is a boolean: {value!r}")
    if isinstance(value, (int, float)):
        score = float(value)
    elif isinstance(value, str):
        try:
            score = float(value.strip())
        except ValueError as exc:
            raise InvalidFeatureValue(
                f"score feature '{feature}' is not numeric: {value!r}"
            ) from exc
    else:
        raise InvalidFeatureValue(f"score feature '{feature}' is not numeric: {value!r}")
    if math.isnan(score):
        raise InvalidFeatureValue(f"score feature '{feature}' is NaN")
    return score


def response_scores(responses: Sequence[AnnotatedItem], feature: str) -> list[float]:
    """Return the score of every response, failing on the first bad one."""

    return [feature_score(r, feature) for r in responses]
