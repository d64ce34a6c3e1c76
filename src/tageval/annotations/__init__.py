"""Annotation model shared by the matcher, the filters and the corpus reader."""

from .base import AnnotatedItem, Annotation

__all__ = ["AnnotatedItem", "Annotation"]
