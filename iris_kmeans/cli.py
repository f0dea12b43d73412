#!/usr/bin/env python3
"""
Minimal homogeneous k search on raw and normalized features.

Usage:
    iris-kmeans iris.txt --seed 42
    iris-kmeans iris.txt --tol 1e-9 --final-k max --no-assignments
"""

import argparse
import sys
from typing import List, Optional

from .config import FINAL_K_POLICIES, SearchConfig
from .dataset import load_dataset
from .errors import KMeansError
from .normalize import ZERO_VARIANCE_POLICIES
from .report import print_comparison
from .search import compare_normalization


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Find the minimum number of K-means clusters that keeps every cluster to one label'
    )
    parser.add_argument('data_file',
                        help='Comma-separated file of feature values followed by a label')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducible initialization')
    parser.add_argument('--tol', type=float, default=0.0,
                        help='Convergence tolerance on centroid movement (0 = exact equality)')
    parser.add_argument('--max-iters', type=int, default=300,
                        help='Maximum assign/update passes per run')
    parser.add_argument('--max-k', type=int, default=None,
                        help='Upper bound for k (default: dataset size)')
    parser.add_argument('--attempts-per-k', type=int, default=1,
                        help='Random initializations tried at each k')
    parser.add_argument('--final-k', choices=FINAL_K_POLICIES, default='each',
                        help="'each': report each search's own result; 'max': re-run both at the larger k")
    parser.add_argument('--zero-variance', choices=ZERO_VARIANCE_POLICIES, default='error',
                        help='Handling of constant feature columns during normalization')
    parser.add_argument('--no-assignments', action='store_true',
                        help='Do not print per-sample cluster assignments')
    parser.add_argument('--verbose', action='store_true',
                        help='Print progress information')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = SearchConfig(
            max_iters=args.max_iters,
            tol=args.tol,
            random_seed=args.seed,
            attempts_per_k=args.attempts_per_k,
            max_k=args.max_k,
            zero_variance=args.zero_variance,
            final_k=args.final_k,
            verbose=args.verbose
        )
        data = load_dataset(args.data_file)
        if args.verbose:
            print(f"Loaded {len(data)} samples with {data.n_features} features from {args.data_file}")
        comparison = compare_normalization(data, config)
    except (KMeansError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print_comparison(comparison, show_assignments=not args.no_assignments)
    return 0


if __name__ == "__main__":
    sys.exit(main())
