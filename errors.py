"""
Exception taxonomy for the study material pipeline.

Only StudyError subclasses ever leave the pipeline. InvalidExpression and
ProviderError are recovered inside it.
"""


class StudyError(Exception):
    """Base class for failures surfaced to the caller."""

    code = "study_error"


class InvalidInput(StudyError):
    """Empty or missing topic, or an unknown mode."""

    code = "invalid_input"


class GenerationFailed(StudyError):
    """Every provider returned unusable output for a problem that must be solved."""

    code = "generation_failed"


class UpstreamUnavailable(StudyError):
    """A problem requires an AI provider but none is configured."""

    code = "upstream_unavailable"


class InvalidExpression(ValueError):
    """An arithmetic expression that cannot be evaluated (empty, unsafe or division by zero)."""


class ProviderError(RuntimeError):
    """A single AI provider call failed."""
