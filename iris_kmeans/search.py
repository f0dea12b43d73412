"""
Linear search for the smallest k that yields homogeneous clusters, and the
raw-versus-normalized comparison built on top of it.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import SearchConfig
from .dataset import Dataset
from .errors import SearchExhaustedError
from .kmeans import ClusterResult, KMeans
from .normalize import normalize


@dataclass
class SearchResult:
    """Smallest homogeneous k found for one dataset and the run that achieved it."""
    minimal_k: int
    result: ClusterResult
    runs: int
    dataset_name: Optional[str] = None


@dataclass
class ComparisonResult:
    """Search outcomes on raw and normalized features, plus the results to report."""
    raw: SearchResult
    normalized: SearchResult
    final_k_policy: str
    final_raw: ClusterResult
    final_normalized: ClusterResult


def _make_engine(config: SearchConfig, seed: np.random.SeedSequence) -> KMeans:
    return KMeans(
        max_iters=config.max_iters,
        tol=config.tol,
        random_state=seed,
        verbose=config.verbose
    )


def find_minimal_k(
    data: Dataset,
    config: Optional[SearchConfig] = None,
    seed_sequence: Optional[np.random.SeedSequence] = None
) -> SearchResult:
    """
    Find the smallest k >= 1 whose clustering is homogeneous.

    Every attempt uses a fresh engine with its own random source spawned from
    ``seed_sequence`` (or from ``config.random_seed``), so the whole search is
    reproducible for a fixed seed.

    Args:
        data: Dataset to cluster
        config: Search configuration (defaults to SearchConfig())
        seed_sequence: Parent seed sequence for the engines' random sources

    Returns:
        SearchResult for the first homogeneous run

    Raises:
        SearchExhaustedError: If no k up to the bound gives a homogeneous clustering
    """
    config = config or SearchConfig()
    if seed_sequence is None:
        seed_sequence = np.random.SeedSequence(config.random_seed)

    max_k = len(data) if config.max_k is None else min(config.max_k, len(data))
    runs = 0

    for k in range(1, max_k + 1):
        for attempt in range(config.attempts_per_k):
            engine = _make_engine(config, seed_sequence.spawn(1)[0])
            result = engine.execute(data, k)
            runs += 1

            if result.is_homogeneous():
                if config.verbose:
                    print(f"Homogeneous clustering at k={k} (attempt {attempt + 1}, {runs} runs total)")
                return SearchResult(minimal_k=k, result=result, runs=runs, dataset_name=data.name)

        if config.verbose:
            print(f"k={k}: no homogeneous clustering in {config.attempts_per_k} attempt(s)")

    raise SearchExhaustedError(
        f"No homogeneous clustering found for k <= {max_k} after {runs} runs",
        max_k=max_k,
        runs=runs
    )


def compare_normalization(data: Dataset, config: Optional[SearchConfig] = None) -> ComparisonResult:
    """
    Run the minimal-k search on raw and on z-score normalized features.

    With ``config.final_k == 'each'`` the reported results are the homogeneous
    runs found by each search. With ``'max'`` both datasets are clustered
    again with fresh engines at the larger of the two minimal k values.

    The raw search runs before normalization, so a DegenerateFeatureError is
    only raised once the raw search has completed.
    """
    config = config or SearchConfig()
    raw_seed, normalized_seed, final_seed = np.random.SeedSequence(config.random_seed).spawn(3)

    raw = find_minimal_k(data, config, seed_sequence=raw_seed)

    normalized_data = normalize(data, zero_variance=config.zero_variance)
    normalized = find_minimal_k(normalized_data, config, seed_sequence=normalized_seed)

    if config.final_k == 'max':
        final_k = max(raw.minimal_k, normalized.minimal_k)
        raw_engine_seed, normalized_engine_seed = final_seed.spawn(2)
        final_raw = _make_engine(config, raw_engine_seed).execute(data, final_k)
        final_normalized = _make_engine(config, normalized_engine_seed).execute(normalized_data, final_k)
    else:
        final_raw = raw.result
        final_normalized = normalized.result

    return ComparisonResult(
        raw=raw,
        normalized=normalized,
        final_k_policy=config.final_k,
        final_raw=final_raw,
        final_normalized=final_normalized
    )
