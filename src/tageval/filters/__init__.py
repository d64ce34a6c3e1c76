"""Annotation set filters applied before comparison."""

from .containment import ContainmentType, select_by_containment
from .nil import NilTreatment, apply_nil_treatment, remove_nils

__all__ = [
    "ContainmentType",
    "NilTreatment",
    "apply_nil_treatment",
    "remove_nils",
    "select_by_containment",
]
