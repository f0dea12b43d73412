"""
Exceptions raised by the clustering, normalization and search code.
"""


class KMeansError(Exception):
    """Base exception for this package."""


class DataFormatError(KMeansError, ValueError):
    """Raised when an input record cannot be parsed."""


class InvalidInputError(KMeansError, ValueError):
    """Raised when a dataset is empty."""


class InvalidArgumentError(KMeansError, ValueError):
    """Raised for out-of-range arguments such as k <= 0."""


class DegenerateFeatureError(KMeansError, ValueError):
    """Raised when a feature column has zero variance and cannot be normalized."""


class SearchExhaustedError(KMeansError, RuntimeError):
    """Raised when no homogeneous clustering exists up to the search bound."""

    def __init__(self, message: str, max_k: int, runs: int):
        super().__init__(message)
        self.max_k = max_k
        self.runs = runs


class InvariantViolationError(KMeansError, RuntimeError):
    """Raised on programmer errors, e.g. mismatched dimensionality or use before execute."""
