"""
Labeled samples and datasets, plus the loader for comma-separated input files.
"""

import math
import os
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import DataFormatError, InvalidInputError, InvariantViolationError


@dataclass(frozen=True)
class Sample:
    """A feature vector with its class label. Immutable once created."""
    features: Tuple[float, ...]
    label: str

    def __post_init__(self):
        # Accept any sequence but always store a tuple of floats
        object.__setattr__(self, 'features', tuple(float(v) for v in self.features))

    @property
    def dimension(self) -> int:
        return len(self.features)


class Dataset:
    """
    Ordered, non-empty collection of samples with a shared feature dimension.

    The feature matrix is built once and exposed read-only, so engines can
    work on it directly without copying.
    """

    def __init__(self, samples: Iterable[Sample], name: Optional[str] = None):
        """
        Args:
            samples: Samples in their original order
            name: Optional display name used in reports
        """
        self._samples: Tuple[Sample, ...] = tuple(samples)
        self.name = name

        if not self._samples:
            raise InvalidInputError("Dataset must contain at least one sample")

        dim = self._samples[0].dimension
        if dim == 0:
            raise InvariantViolationError("Samples must have at least one feature")
        for i, sample in enumerate(self._samples):
            if sample.dimension != dim:
                raise InvariantViolationError(
                    f"Sample {i} has {sample.dimension} features, expected {dim}"
                )

        self._features = np.array([s.features for s in self._samples], dtype=np.float64)
        if not np.isfinite(self._features).all():
            rows = np.flatnonzero(~np.isfinite(self._features).all(axis=1))
            raise InvariantViolationError(f"Sample(s) {rows.tolist()} have non-finite features")
        self._features.setflags(write=False)

    @classmethod
    def from_arrays(
        cls,
        features: Union[np.ndarray, Sequence[Sequence[float]]],
        labels: Sequence[str],
        name: Optional[str] = None
    ) -> 'Dataset':
        """Build a dataset from a feature matrix and a parallel label sequence."""
        features = np.asarray(features, dtype=np.float64)
        if features.ndim != 2:
            raise InvariantViolationError(
                f"features must be a 2-D array, got shape {features.shape}"
            )
        if len(features) != len(labels):
            raise InvariantViolationError(
                f"Got {len(features)} feature rows but {len(labels)} labels"
            )
        return cls((Sample(tuple(row), str(label)) for row, label in zip(features, labels)), name=name)

    @property
    def samples(self) -> Tuple[Sample, ...]:
        return self._samples

    @property
    def features(self) -> np.ndarray:
        """Read-only feature matrix of shape (n_samples, n_features)."""
        return self._features

    @property
    def labels(self) -> List[str]:
        return [s.label for s in self._samples]

    @property
    def n_features(self) -> int:
        return self._features.shape[1]

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> Sample:
        return self._samples[index]

    def __repr__(self) -> str:
        name = f"{self.name!r}, " if self.name else ""
        return f"Dataset({name}n_samples={len(self)}, n_features={self.n_features})"


def _parse_line(line: str, path: str, lineno: int, expected_fields: Optional[int]) -> Sample:
    fields = [field.strip() for field in line.split(',')]

    if len(fields) < 2:
        raise DataFormatError(
            f"{path}:{lineno}: expected at least one feature and a label, got {len(fields)} field(s)"
        )
    if expected_fields is not None and len(fields) != expected_fields:
        raise DataFormatError(
            f"{path}:{lineno}: expected {expected_fields} fields, got {len(fields)}"
        )

    label = fields[-1]
    if not label:
        raise DataFormatError(f"{path}:{lineno}: missing label")

    features = []
    for col, raw in enumerate(fields[:-1]):
        try:
            value = float(raw)
        except ValueError:
            raise DataFormatError(
                f"{path}:{lineno}: feature {col} is not numeric: {raw!r}"
            ) from None
        if not math.isfinite(value):
            raise DataFormatError(f"{path}:{lineno}: feature {col} is not finite: {raw!r}")
        features.append(value)

    return Sample(tuple(features), label)


def load_dataset(path: Union[str, os.PathLike], name: Optional[str] = None) -> Dataset:
    """
    Load a dataset from a text file of ``f1,...,fF,label`` records.

    No header line is expected. Blank lines are skipped. Every record must have
    the same number of fields as the first one.

    Args:
        path: Path to the input file
        name: Display name for the dataset (defaults to the file name)

    Returns:
        The loaded Dataset

    Raises:
        DataFormatError: On any malformed record; no partial dataset is returned
        InvalidInputError: If the file holds no records
    """
    path = os.fspath(path)
    samples = []
    expected_fields = None

    with open(path, encoding='utf-8') as f:
        try:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                sample = _parse_line(line, path, lineno, expected_fields)
                if expected_fields is None:
                    expected_fields = sample.dimension + 1
                samples.append(sample)
        except UnicodeDecodeError as e:
            raise DataFormatError(f"{path}: not valid UTF-8 ({e.reason} at byte {e.start})") from None

    if not samples:
        raise InvalidInputError(f"No records found in {path}")

    return Dataset(samples, name=name or os.path.basename(path))
