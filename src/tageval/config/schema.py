"""Typed configuration schema and loader for the tageval package."""

from __future__ import annotations

import os
from collections.abc import Mapping
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, confloat, conint, field_validator

from tageval.filters.containment import ContainmentType
from tageval.filters.nil import NilTreatment
from tageval.match.compare import FeatureComparison
from tageval.stats.curve import ThresholdsToUse

EVALUATION_ID_ENV = "TAGEVAL_EVALUATION_ID"

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class SetSettings(BaseModel):
    """Names of the annotation sets taking part in the evaluation."""

    key: str
    response: str
    reference: str | None = None
    containing: str | None = None

    model_config = ConfigDict(extra="forbid")

    @property
    def containing_set_and_type(self) -> tuple[str, str | None] | None:
        """Split ``containing`` into ``(set name, type or None)``."""

        if not self.containing:
            return None
        set_name, _, ann_type = self.containing.partition(":")
        return set_name, ann_type or None


class FeatureSettings(BaseModel):
    """Which features must agree and how they are compared."""

    names: list[str] | None = None
    comparison: FeatureComparison = FeatureComparison.EQUALITY

    model_config = ConfigDict(extra="forbid")

    @field_validator("names")
    @classmethod
    def _no_duplicates(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and len(set(value)) != len(value):
            raise ValueError("duplicate feature in the feature name list")
        return value


class ScoreSettings(BaseModel):
    """Score feature used for threshold curves."""

    feature: str | None = None
    which: ThresholdsToUse = ThresholdsToUse.ALL

    model_config = ConfigDict(extra="forbid")


class ListSettings(BaseModel):
    """Candidate list evaluation."""

    enabled: bool = False
    edge_feature: str | None = None
    element_type: str | None = None

    model_config = ConfigDict(extra="forbid")


class NilSettings(BaseModel):
    treatment: NilTreatment = NilTreatment.NO_NILS
    value: str = ""

    model_config = ConfigDict(extra="forbid")


class ContainmentSettings(BaseModel):
    how: ContainmentType = ContainmentType.OVERLAPPING

    model_config = ConfigDict(extra="forbid")


class ReportSettings(BaseModel):
    """Reporting options."""

    evaluation_id: str = ""
    beta: confloat(gt=0.0) = 1.0

    model_config = ConfigDict(extra="forbid")


class ConfigModel(BaseModel):
    """Top-level configuration model."""

    schema_version: conint(ge=1)
    sets: SetSettings
    annotation_types: list[str] = Field(min_length=1)
    features: FeatureSettings
    scores: ScoreSettings
    lists: ListSettings
    nil: NilSettings
    containment: ContainmentSettings
    report: ReportSettings

    model_config = ConfigDict(extra="forbid")

    @field_validator("annotation_types")
    @classmethod
    def _unique_types(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("duplicate annotation type")
        return value


# ---------------------------------------------------------------------------
# Loader utilities
# ---------------------------------------------------------------------------


def deep_merge_dicts(a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping ``b`` onto ``a`` returning a new dict."""

    result: dict[str, Any] = dict(a)
    for key, b_val in b.items():
        if key in result and isinstance(result[key], dict) and isinstance(b_val, dict):
            result[key] = deep_merge_dicts(result[key], b_val)
        else:
            result[key] = b_val
    return result


def load_config(
    path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ConfigModel:
    """Load configuration from defaults and optional user overrides.

    Precedence of sources: package ``defaults.yml`` < user-provided YAML <
    the ``TAGEVAL_EVALUATION_ID`` environment variable.
    """

    with (
        importlib_resources.files("tageval.config")
        .joinpath("defaults.yml")
        .open("r", encoding="utf-8") as f
    ):
        defaults = yaml.safe_load(f) or {}

    if path is not None:
        with Path(path).open("r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        merged = deep_merge_dicts(defaults, overrides)
    else:
        merged = defaults

    cfg = ConfigModel.model_validate(merged)

    environ = env if env is not None else os.environ
    if EVALUATION_ID_ENV in environ:
        cfg.report.evaluation_id = environ[EVALUATION_ID_ENV]

    return cfg


__all__ = [
    "EVALUATION_ID_ENV",
    "ConfigModel",
    "SetSettings",
    "FeatureSettings",
    "ScoreSettings",
    "ListSettings",
    "NilSettings",
    "ContainmentSettings",
    "ReportSettings",
    "deep_merge_dicts",
    "load_config",
]
