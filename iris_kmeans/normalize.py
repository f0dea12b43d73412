"""
Z-score normalization of dataset features using population statistics.
"""

from typing import Optional

import numpy as np

from .dataset import Dataset, Sample
from .errors import DegenerateFeatureError, InvalidArgumentError, InvariantViolationError

ZERO_VARIANCE_POLICIES = ('error', 'zero')


def feature_means(data: Dataset) -> np.ndarray:
    """Per-feature mean across all samples."""
    return data.features.mean(axis=0)


def feature_stddevs(data: Dataset, means: Optional[np.ndarray] = None) -> np.ndarray:
    """Per-feature population standard deviation (ddof=0)."""
    if means is None:
        means = feature_means(data)
    return np.sqrt(np.mean((data.features - means) ** 2, axis=0))


class Normalizer:
    """
    Fits per-feature mean and standard deviation on one dataset and applies
    ``(x - mean) / stddev`` to any dataset of the same dimension.
    """

    def __init__(self, zero_variance: str = 'error'):
        """
        Args:
            zero_variance: What to do with a constant feature column.
                'error' raises DegenerateFeatureError, 'zero' maps the column to 0.0
        """
        if zero_variance not in ZERO_VARIANCE_POLICIES:
            raise InvalidArgumentError(
                f"zero_variance must be one of {ZERO_VARIANCE_POLICIES}, got {zero_variance!r}"
            )
        self.zero_variance = zero_variance
        self.mean_ = None
        self.scale_ = None

    def fit(self, data: Dataset) -> 'Normalizer':
        means = feature_means(data)
        stddevs = feature_stddevs(data, means)

        degenerate = np.flatnonzero(stddevs == 0)
        if degenerate.size and self.zero_variance == 'error':
            raise DegenerateFeatureError(
                f"Feature column(s) {degenerate.tolist()} have zero variance"
            )

        self.mean_ = means
        self.scale_ = stddevs
        return self

    def transform(self, data: Dataset) -> Dataset:
        if self.mean_ is None:
            raise InvariantViolationError("Normalizer must be fitted before transform")
        if data.n_features != len(self.mean_):
            raise InvariantViolationError(
                f"Normalizer was fitted on {len(self.mean_)} features, got {data.n_features}"
            )

        centered = data.features - self.mean_
        constant = self.scale_ == 0
        # Constant columns are only reachable under the 'zero' policy
        scaled = np.divide(centered, self.scale_, out=np.zeros_like(centered), where=~constant)

        name = f"{data.name} (normalized)" if data.name else None
        return Dataset(
            (Sample(tuple(row), sample.label) for row, sample in zip(scaled, data)),
            name=name
        )

    def fit_transform(self, data: Dataset) -> Dataset:
        return self.fit(data).transform(data)


def normalize(data: Dataset, zero_variance: str = 'error') -> Dataset:
    """
    Return a new dataset with every feature column z-score normalized.

    Labels and sample order are preserved.

    Raises:
        DegenerateFeatureError: If a column is constant and zero_variance='error'
    """
    return Normalizer(zero_variance=zero_variance).fit_transform(data)
