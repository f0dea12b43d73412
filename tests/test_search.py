import numpy as np
import pytest

from iris_kmeans import (
    DegenerateFeatureError,
    Dataset,
    InvalidArgumentError,
    SearchConfig,
    SearchExhaustedError,
    compare_normalization,
    find_minimal_k,
)


def build_three_classes(n_per_class=15, seed=42):
    rng = np.random.default_rng(seed)
    centers = np.array([[0.0, 0.0], [10.0, 10.0], [20.0, 0.0]])
    X = np.vstack([rng.normal(loc=c, scale=0.3, size=(n_per_class, 2)) for c in centers])
    labels = ['a'] * n_per_class + ['b'] * n_per_class + ['c'] * n_per_class
    return Dataset.from_arrays(X, labels, name='three')


def test_three_separated_classes_need_three_clusters():
    data = build_three_classes()
    config = SearchConfig(random_seed=42, attempts_per_k=50)

    search = find_minimal_k(data, config)

    assert search.minimal_k == 3
    assert search.result.is_homogeneous()
    assert search.result.k == 3
    # k=1 and k=2 can never separate three classes
    assert search.runs > 2 * config.attempts_per_k
    assert search.dataset_name == 'three'


def test_some_seed_finds_k_at_most_three():
    data = build_three_classes()
    found = [find_minimal_k(data, SearchConfig(random_seed=seed)).minimal_k for seed in range(60)]
    assert min(found) <= 3
    assert all(k >= 3 for k in found)


def test_single_label_dataset_is_homogeneous_at_k_one():
    data = Dataset.from_arrays(np.arange(12.0).reshape(6, 2), ['only'] * 6)
    search = find_minimal_k(data, SearchConfig(random_seed=0))
    assert search.minimal_k == 1
    assert search.runs == 1


def test_search_is_reproducible_with_fixed_seed():
    data = build_three_classes()
    a = find_minimal_k(data, SearchConfig(random_seed=123))
    b = find_minimal_k(data, SearchConfig(random_seed=123))
    assert a.minimal_k == b.minimal_k
    assert a.runs == b.runs
    assert np.array_equal(a.result.centroids, b.result.centroids)


def test_inseparable_labels_exhaust_the_search():
    # Identical features with different labels can never be split
    data = Dataset.from_arrays([[1.0, 2.0], [1.0, 2.0]], ['a', 'b'])
    with pytest.raises(SearchExhaustedError) as excinfo:
        find_minimal_k(data, SearchConfig(random_seed=0, attempts_per_k=3))

    assert excinfo.value.max_k == 2
    assert excinfo.value.runs == 6


def test_max_k_bounds_the_search():
    data = build_three_classes()
    with pytest.raises(SearchExhaustedError) as excinfo:
        find_minimal_k(data, SearchConfig(random_seed=0, max_k=2, attempts_per_k=5))
    assert excinfo.value.max_k == 2
    assert excinfo.value.runs == 10


def test_max_k_is_capped_at_dataset_size():
    data = Dataset.from_arrays([[1.0], [1.0], [1.0]], ['a', 'b', 'c'])
    with pytest.raises(SearchExhaustedError) as excinfo:
        find_minimal_k(data, SearchConfig(random_seed=0, max_k=100))
    assert excinfo.value.max_k == 3


def test_compare_reports_each_search_result_by_default():
    data = build_three_classes()
    comparison = compare_normalization(data, SearchConfig(random_seed=7, attempts_per_k=50))

    assert comparison.final_k_policy == 'each'
    assert comparison.raw.minimal_k == 3
    assert comparison.normalized.minimal_k == 3
    assert comparison.final_raw is comparison.raw.result
    assert comparison.final_normalized is comparison.normalized.result
    assert comparison.normalized.dataset_name == 'three (normalized)'


def test_compare_max_policy_reruns_both_at_larger_k():
    data = build_three_classes()
    comparison = compare_normalization(data, SearchConfig(random_seed=7, final_k='max'))

    final_k = max(comparison.raw.minimal_k, comparison.normalized.minimal_k)
    assert comparison.final_raw.k == final_k
    assert comparison.final_normalized.k == final_k
    assert comparison.final_raw is not comparison.raw.result
    # Normalized run clusters z-scored features
    assert np.all(np.abs(comparison.final_normalized.centroids) < 5)


def test_compare_is_reproducible_with_fixed_seed():
    data = build_three_classes()
    a = compare_normalization(data, SearchConfig(random_seed=5))
    b = compare_normalization(data, SearchConfig(random_seed=5))
    assert (a.raw.minimal_k, a.normalized.minimal_k) == (b.raw.minimal_k, b.normalized.minimal_k)


def test_compare_propagates_zero_variance_error_after_raw_search(capsys):
    data = Dataset.from_arrays([[1.0, 0.0], [1.0, 5.0], [1.0, 10.0]], ['a', 'b', 'c'])
    with pytest.raises(DegenerateFeatureError):
        compare_normalization(data, SearchConfig(random_seed=0, attempts_per_k=50, verbose=True))

    # The raw search completes before normalization fails
    assert "Homogeneous clustering at k=3" in capsys.readouterr().out


def test_compare_rejects_inseparable_raw_data_before_normalizing():
    # Raw search fails first even though normalization would also fail
    data = Dataset.from_arrays([[1.0, 2.0], [1.0, 2.0]], ['a', 'b'])
    with pytest.raises(SearchExhaustedError):
        compare_normalization(data, SearchConfig(random_seed=0))


def test_compare_with_zero_variance_fallback():
    data = Dataset.from_arrays([[1.0, 0.0], [1.0, 0.1], [1.0, 10.0]], ['a', 'a', 'b'])
    comparison = compare_normalization(data, SearchConfig(random_seed=0, zero_variance='zero', attempts_per_k=20))
    assert comparison.raw.minimal_k == 2
    assert comparison.normalized.minimal_k == 2
    assert np.all(np.isfinite(comparison.final_normalized.centroids))


@pytest.mark.parametrize('kwargs', [
    {'attempts_per_k': 0},
    {'max_k': 0},
    {'tol': -0.1},
    {'tol': float('nan')},
    {'max_iters': 0},
    {'final_k': 'min'},
    {'zero_variance': 'nan'},
])
def test_search_config_validation(kwargs):
    with pytest.raises(InvalidArgumentError):
        SearchConfig(**kwargs)
