"""
Human-readable reporting of search and clustering results.
"""

import sys
from typing import List, Optional, TextIO

from .kmeans import ClusterResult
from .search import ComparisonResult, SearchResult


def _vector(values) -> str:
    return str([float(v) for v in values])


def format_minimal_k(search: SearchResult, normalized: bool) -> str:
    mode = "with" if normalized else "without"
    return f"Minimum clusters {mode} normalization: {search.minimal_k}"


def format_centroids(result: ClusterResult) -> List[str]:
    return [f"Centroid {i}: {_vector(c)}" for i, c in enumerate(result.centroids)]


def format_assignments(result: ClusterResult) -> List[str]:
    """One line per sample, grouped by cluster index."""
    lines = []
    for i, cluster in enumerate(result.clusters):
        for sample in cluster:
            lines.append(f"Sample {_vector(sample.features)} ({sample.label}) -> Cluster {i}")
    return lines


def print_result(
    result: ClusterResult,
    normalized: bool,
    show_assignments: bool = True,
    stream: Optional[TextIO] = None
):
    stream = stream or sys.stdout
    mode = "with" if normalized else "without"

    print(f"Final centroids {mode} normalization (k={result.k}):", file=stream)
    for line in format_centroids(result):
        print(line, file=stream)

    if show_assignments:
        print("\nSample data and their cluster assignments:", file=stream)
        for line in format_assignments(result):
            print(line, file=stream)


def print_comparison(
    comparison: ComparisonResult,
    show_assignments: bool = True,
    stream: Optional[TextIO] = None
):
    """Print both minimal k values, then the final centroids and assignments of each branch."""
    stream = stream or sys.stdout

    print(format_minimal_k(comparison.raw, normalized=False), file=stream)
    print(format_minimal_k(comparison.normalized, normalized=True), file=stream)
    print(file=stream)

    print_result(comparison.final_raw, normalized=False, show_assignments=show_assignments, stream=stream)
    print(file=stream)
    print_result(comparison.final_normalized, normalized=True, show_assignments=show_assignments, stream=stream)
