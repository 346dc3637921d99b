"""Errors raised by the adaptive recommendation engine."""

from __future__ import annotations


class RecommendationError(Exception):
    """
    Recommendation generation failed outright.

    Raised when a History or Catalog lookup fails. The underlying
    exception is chained as ``__cause__``.
    """

    def __init__(self, message: str = "Failed to generate adaptive recommendation"):
        super().__init__(message)
