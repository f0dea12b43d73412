"""
K-means clustering (Lloyd's algorithm) over labeled datasets.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import numpy as np

from .dataset import Dataset, Sample
from .errors import InvalidArgumentError, InvariantViolationError

RandomState = Union[None, int, np.random.SeedSequence, np.random.Generator]


@dataclass
class ClusterResult:
    """Outcome of one K-means run."""
    clusters: List[List[Sample]]
    centroids: np.ndarray
    labels: np.ndarray
    inertia: float
    n_iter: int
    converged: bool
    inertia_history: List[float] = field(default_factory=list)

    @property
    def k(self) -> int:
        return len(self.clusters)

    def cluster_sizes(self) -> List[int]:
        return [len(c) for c in self.clusters]

    def is_homogeneous(self) -> bool:
        """True if every non-empty cluster holds a single label. Empty clusters count as homogeneous."""
        for cluster in self.clusters:
            if cluster and any(s.label != cluster[0].label for s in cluster):
                return False
        return True


class KMeans:
    """
    K-means clustering with random initialization sampled from the data.

    Features:
    - Initial centroids drawn uniformly with replacement, so k may exceed the dataset size
    - Squared Euclidean distance; ties go to the lowest centroid index
    - Empty clusters keep their previous centroid
    - Convergence when no centroid component moves more than ``tol``
    - Iteration cap as a safety valve against non-termination
    """

    def __init__(
        self,
        max_iters: Optional[int] = 300,
        tol: float = 0.0,
        random_state: RandomState = None,
        verbose: bool = False
    ):
        """
        Initialize the engine.

        Args:
            max_iters: Maximum number of assign/update passes (None for no cap)
            tol: Largest centroid component change still treated as converged.
                0.0 means centroids must repeat exactly
            random_state: Seed, SeedSequence or Generator used for initialization
            verbose: Whether to print progress information
        """
        if max_iters is not None and max_iters < 1:
            raise InvalidArgumentError(f"max_iters must be >= 1 or None, got {max_iters}")
        if not tol >= 0:
            raise InvalidArgumentError(f"tol must be non-negative, got {tol}")

        self.max_iters = max_iters
        self.tol = tol
        self.verbose = verbose
        self._rng = np.random.default_rng(random_state)

        # Results
        self.result_: Optional[ClusterResult] = None

    def _init_centroids(self, X: np.ndarray, k: int) -> np.ndarray:
        """Copy k randomly chosen samples (with replacement) as initial centroids."""
        indices = self._rng.integers(0, X.shape[0], size=k)
        return X[indices].copy()

    @staticmethod
    def _squared_distances(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        # Shape: (n_samples, n_clusters)
        diff = X[:, np.newaxis, :] - centroids[np.newaxis, :, :]
        return np.sum(diff ** 2, axis=2)

    def _assign_clusters(self, X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """Index of the nearest centroid for each point. argmin keeps the first minimum."""
        return np.argmin(self._squared_distances(X, centroids), axis=1)

    def _update_centroids(self, X: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """Mean of each cluster's members; empty clusters keep their centroid."""
        new_centroids = centroids.copy()
        for c in range(len(centroids)):
            mask = labels == c
            if np.any(mask):
                new_centroids[c] = X[mask].mean(axis=0)
        return new_centroids

    def _calculate_inertia(self, X: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> float:
        """Within-cluster sum of squared distances."""
        return float(np.sum((X - centroids[labels]) ** 2))

    def _validate(self, data: Dataset, k: int, initial_centroids: Optional[np.ndarray]) -> Optional[np.ndarray]:
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 1:
            raise InvalidArgumentError(f"k must be a positive integer, got {k!r}")
        if not isinstance(data, Dataset):
            raise InvariantViolationError(f"data must be a Dataset, got {type(data).__name__}")
        if initial_centroids is None:
            return None

        initial_centroids = np.array(initial_centroids, dtype=np.float64)
        if initial_centroids.shape != (k, data.n_features):
            raise InvariantViolationError(
                f"initial_centroids must have shape ({k}, {data.n_features}), "
                f"got {initial_centroids.shape}"
            )
        return initial_centroids

    def execute(
        self,
        data: Dataset,
        k: int,
        initial_centroids: Optional[np.ndarray] = None
    ) -> ClusterResult:
        """
        Cluster ``data`` into ``k`` groups.

        Args:
            data: Dataset to cluster
            k: Number of clusters, at least 1
            initial_centroids: Optional (k, n_features) array used instead of
                the random draw

        Returns:
            ClusterResult with the final clusters and centroids
        """
        initial_centroids = self._validate(data, k, initial_centroids)
        X = data.features

        if self.verbose:
            print(f"Running K-means with {k} clusters on {len(data)} samples...")

        centroids = initial_centroids if initial_centroids is not None else self._init_centroids(X, k)
        history = []
        converged = False
        iteration = 0

        while self.max_iters is None or iteration < self.max_iters:
            iteration += 1
            labels = self._assign_clusters(X, centroids)
            history.append(self._calculate_inertia(X, labels, centroids))

            new_centroids = self._update_centroids(X, labels, centroids)
            shift = float(np.max(np.abs(new_centroids - centroids)))
            centroids = new_centroids

            if shift <= self.tol:
                converged = True
                if self.verbose:
                    print(f"Converged after {iteration} iterations")
                break

            if self.verbose and iteration % 50 == 0:
                print(f"Iteration {iteration}, Inertia: {history[-1]:.4f}")

        if not converged and self.verbose:
            print(f"Stopped after {iteration} iterations without converging")

        clusters = [[] for _ in range(k)]
        for sample, c in zip(data, labels):
            clusters[c].append(sample)

        self.result_ = ClusterResult(
            clusters=clusters,
            centroids=centroids,
            labels=labels,
            inertia=self._calculate_inertia(X, labels, centroids),
            n_iter=iteration,
            converged=converged,
            inertia_history=history
        )
        return self.result_

    def assign(self, data: Dataset, centroids: np.ndarray) -> np.ndarray:
        """Assignment step alone: nearest-centroid index for each sample of ``data``."""
        centroids = np.asarray(centroids, dtype=np.float64)
        if centroids.ndim != 2 or centroids.shape[1] != data.n_features:
            raise InvariantViolationError(
                f"centroids must have shape (k, {data.n_features}), got {centroids.shape}"
            )
        return self._assign_clusters(data.features, centroids)

    def _require_result(self) -> ClusterResult:
        if self.result_ is None:
            raise InvariantViolationError("Model must be executed first")
        return self.result_

    def is_homogeneous(self) -> bool:
        """Whether every cluster of the latest run holds a single label."""
        return self._require_result().is_homogeneous()

    @property
    def clusters(self) -> List[List[Sample]]:
        return self._require_result().clusters

    @property
    def centroids(self) -> np.ndarray:
        return self._require_result().centroids

    def predict(self, data: Dataset) -> np.ndarray:
        """
        Assign samples of ``data`` to the centroids of the latest run.

        Args:
            data: Dataset with the same feature dimension

        Returns:
            Cluster index for each sample
        """
        return self.assign(data, self._require_result().centroids)

    def get_cluster_info(self) -> Dict:
        """Get information about the clustering results."""
        result = self._require_result()
        sizes = result.cluster_sizes()

        return {
            'n_clusters': result.k,
            'inertia': result.inertia,
            'n_iterations': result.n_iter,
            'converged': result.converged,
            'homogeneous': result.is_homogeneous(),
            'cluster_sizes': dict(enumerate(sizes)),
            'empty_clusters': sum(1 for s in sizes if s == 0),
            'min_cluster_size': min(sizes),
            'max_cluster_size': max(sizes)
        }
