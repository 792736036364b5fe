import math

import pytest

from annbench.recall import DistanceMismatch, GroundTruth


@pytest.fixture
def knn_truth():
    return GroundTruth(ids=[0, 1, 2, 5, 6, 7], k=3)


@pytest.fixture
def range_truth():
    return GroundTruth(ids=[4, 7, 1], distances=[0.5, 1.5, 2.0], lims=[0, 2, 3])


def test_perfect_recall(knn_truth):
    assert knn_truth.calc_recall([0, 1, 2, 5, 6, 7], 2, 3) == 1.0


def test_recall_ignores_order(knn_truth):
    assert knn_truth.calc_recall([2, 0, 1, 7, 5, 6], 2, 3) == 1.0


def test_recall_no_hits(knn_truth):
    assert knn_truth.calc_recall([10, 11, 12, 13, 14, 15], 2, 3) == 0.0


def test_recall_half(knn_truth):
    assert knn_truth.calc_recall([0, 1, 2, 8, 9, 10], 2, 3) == 0.5


def test_recall_smaller_k_uses_prefix(knn_truth):
    assert knn_truth.calc_recall([0, 1, 5, 6], 2, 2) == 1.0
    assert knn_truth.calc_recall([2, 1, 7, 6], 2, 2) < 1.0


def test_recall_larger_k_than_truth(knn_truth):
    assert knn_truth.calc_recall([0, 1, 2, 99, 5, 6, 7, 99], 2, 4) == 1.0


def test_recall_slice_uses_offset_rows(knn_truth):
    assert knn_truth.calc_recall_slice([5, 6, 7], 1, 1, 3) == 1.0
    assert knn_truth.calc_recall_slice([0, 1, 2], 1, 1, 3) == 0.0


def test_recall_slice_limit(knn_truth):
    with pytest.raises(ValueError):
        knn_truth.calc_recall_slice([], 9999, 2, 3)


def test_recall_negative_k(knn_truth):
    with pytest.raises(ValueError):
        knn_truth.calc_recall([0], 1, -1)


def test_range_hits(range_truth):
    assert range_truth.calc_hits([4, 9, 1], [0, 2, 3], 2) == 2


def test_hits_from_matches_full(range_truth):
    ids, lims = [4, 7, 3, 1], [0, 3, 4]
    assert range_truth.calc_hits_from(ids, lims, 0, 2) == range_truth.calc_hits(ids, lims, 2)
    assert range_truth.calc_hits_from([1], [0, 1], 1, 1) == range_truth.calc_hits_from(
        [3, 1], [0, 1, 2], 0, 2
    ) - range_truth.calc_hits([3], [0, 1], 1)


def test_range_recall_and_accuracy(range_truth):
    ids, lims = [4, 7, 8, 1, 9], [0, 3, 5]
    assert range_truth.calc_range_recall(ids, lims, 2) == 1.0
    accuracy = range_truth.calc_accuracy(ids, lims, 2)
    assert accuracy < 1.0
    assert accuracy * lims[2] == pytest.approx(range_truth.calc_hits(ids, lims, 2))


def test_range_recall_exact_results_is_perfect(range_truth):
    ids, lims = [4, 7, 1], [0, 2, 3]
    assert range_truth.calc_range_recall(ids, lims, 2) == 1.0
    assert range_truth.calc_accuracy(ids, lims, 2) == 1.0


def test_accuracy_without_results_is_nan(range_truth):
    accuracy = range_truth.calc_accuracy([], [0, 0, 0], 2)
    assert [math.isnan(accuracy)] == [True]
    assert range_truth.calc_range_recall([], [0, 0, 0], 2) == 0.0


def test_range_without_lims_raises(knn_truth):
    with pytest.raises(ValueError):
        knn_truth.calc_hits([0], [0, 1], 1)


def test_check_distance_counts_matches(range_truth):
    checked = range_truth.check_distance([4, 7, 1], [0.5, 1.5, 2.0], [0, 2, 3], 2)
    assert checked == 3


def test_check_distance_skips_unknown_ids(range_truth):
    assert range_truth.check_distance([42, 43], [9.0, 9.0], [0, 1, 2], 2) == 0


def test_check_distance_mismatch(range_truth):
    with pytest.raises(DistanceMismatch) as info:
        range_truth.check_distance([4, 1], [0.5, 2.5], [0, 1, 2], 2)
    assert info.value.query == 1
    assert info.value.neighbour == 1