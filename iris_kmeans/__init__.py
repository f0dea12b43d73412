"""
K-means clustering of labeled data with a search for the minimal homogeneous k.
"""

from .config import SearchConfig
from .dataset import Dataset, Sample, load_dataset
from .errors import (
    DataFormatError,
    DegenerateFeatureError,
    InvalidArgumentError,
    InvalidInputError,
    InvariantViolationError,
    KMeansError,
    SearchExhaustedError,
)
from .kmeans import ClusterResult, KMeans
from .normalize import Normalizer, feature_means, feature_stddevs, normalize
from .search import ComparisonResult, SearchResult, compare_normalization, find_minimal_k
from .version import __version__

__all__ = [
    "KMeans", "ClusterResult",
    "Dataset", "Sample", "load_dataset",
    "Normalizer", "normalize", "feature_means", "feature_stddevs",
    "SearchConfig", "SearchResult", "ComparisonResult", "find_minimal_k", "compare_normalization",
    "KMeansError", "DataFormatError", "InvalidInputError", "InvalidArgumentError",
    "DegenerateFeatureError", "SearchExhaustedError", "InvariantViolationError",
]
