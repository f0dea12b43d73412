"""
Configuration for the minimal-k search.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import InvalidArgumentError
from .normalize import ZERO_VARIANCE_POLICIES

FINAL_K_POLICIES = ('each', 'max')


@dataclass
class SearchConfig:
    """Configuration for the homogeneity search and the engines it runs."""
    # Engine parameters
    max_iters: Optional[int] = 300
    tol: float = 0.0

    # Search parameters
    random_seed: Optional[int] = None
    attempts_per_k: int = 1
    max_k: Optional[int] = None  # None: bounded by the dataset size

    # Comparison parameters
    zero_variance: str = 'error'
    final_k: str = 'each'

    verbose: bool = False

    def __post_init__(self):
        """Reject values the engine or search cannot use."""
        if self.max_iters is not None and self.max_iters < 1:
            raise InvalidArgumentError(f"max_iters must be >= 1, got {self.max_iters}")
        if not self.tol >= 0:
            raise InvalidArgumentError(f"tol must be non-negative, got {self.tol}")
        if self.attempts_per_k < 1:
            raise InvalidArgumentError(f"attempts_per_k must be >= 1, got {self.attempts_per_k}")
        if self.max_k is not None and self.max_k < 1:
            raise InvalidArgumentError(f"max_k must be >= 1, got {self.max_k}")
        if self.zero_variance not in ZERO_VARIANCE_POLICIES:
            raise InvalidArgumentError(
                f"zero_variance must be one of {ZERO_VARIANCE_POLICIES}, got {self.zero_variance!r}"
            )
        if self.final_k not in FINAL_K_POLICIES:
            raise InvalidArgumentError(
                f"final_k must be one of {FINAL_K_POLICIES}, got {self.final_k!r}"
            )
