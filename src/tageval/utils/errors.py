"""Typed exceptions for span validation, evaluation and I/O formats."""


class SpanError(ValueError):
    """Base class for span related errors."""


class SpanOutOfBoundsError(SpanError):
    """Raised when span coordinates are invalid."""


class EvaluationError(ValueError):
    """Base class for errors raised while comparing two annotation sets."""


class MissingScoreFeature(EvaluationError):
    """Raised when a response lacks the score feature a threshold or curve needs."""


class InvalidFeatureValue(EvaluationError):
    """Raised when a feature value cannot be interpreted as required."""


class ReciprocityViolation(AssertionError):
    """Raised when a resolved matching leaves an endpoint with several pairings.

    This signals a defect in the resolver, never bad input.
    """


class IOFormatError(ValueError):
    """Base class for I/O format related errors."""


class UnsupportedFormatError(IOFormatError):
    """Raised when no reader is registered for a file format."""


class CorpusFormatError(IOFormatError):
    """Raised when a corpus file does not have the expected structure."""
