from __future__ import annotations


class OriginalityError(Exception):
    """Base class for errors raised by the originality checker."""


class InvalidInputError(OriginalityError, TypeError):
    """Raised when a scorer receives non-string text or a malformed corpus entry."""


class LLMResponseError(OriginalityError):
    """Raised when an LLM reply carries no usable payload."""


class EmptySubmissionError(OriginalityError, ValueError):
    """Raised when a submission without content is sent for analysis."""
