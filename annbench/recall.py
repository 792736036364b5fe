"""Recall, hit and accuracy measures against ground-truth neighbours."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

FLOAT_DIFF = 0.00001
_MAX_QUERIES = 10000


class DistanceMismatch(ValueError):
    """Raised when a result distance differs from the ground truth."""

    def __init__(self, query: int, neighbour: int, distance: float, expected: float) -> None:
        super().__init__(
            f"query {query}: distance {distance} for id {neighbour} "
            f"differs from ground truth {expected}"
        )
        self.query = query
        self.neighbour = neighbour
        self.distance = distance
        self.expected = expected


def _ratio(hits: int, total: int) -> float:
    return hits / total if total else math.nan


@dataclass
class GroundTruth:
    """Ground-truth neighbours of a query set.

    For top-k searches ``ids`` holds ``k`` neighbours per query, row after
    row.  For range searches ``lims`` holds the offsets of each query's
    neighbours in ``ids`` and ``distances``.
    """

    ids: Sequence[int]
    k: int = 0
    distances: Sequence[float] = ()
    lims: Sequence[int] | None = None

    def _lims(self) -> Sequence[int]:
        if self.lims is None:
            raise ValueError("ground truth has no range limits")
        return self.lims

    def _knn_hits(self, ids: Sequence[int], gt_rows: Iterable[int], k: int) -> tuple[int, int]:
        min_k = min(self.k, k)
        if min_k < 0:
            raise ValueError(f"k must not be negative, got {k}")
        hits = 0
        for row, gt_row in enumerate(gt_rows):
            start = gt_row * self.k
            ground = set(self.ids[start : start + min_k])
            hits += sum(1 for found in ids[row * k : row * k + min_k] if found in ground)
        return hits, min_k

    def calc_recall(self, ids: Sequence[int], nq: int, k: int) -> float:
        """Recall of top-``k`` results for the first ``nq`` queries."""
        hits, min_k = self._knn_hits(ids, range(nq), k)
        return _ratio(hits, nq * min_k)

    def calc_recall_slice(self, ids: Sequence[int], nq_start: int, step: int, k: int) -> float:
        """Recall of top-``k`` results for queries ``nq_start`` .. ``nq_start + step``."""
        if nq_start + step > _MAX_QUERIES:
            raise ValueError(f"query slice ends past {_MAX_QUERIES}")
        hits, min_k = self._knn_hits(ids, range(nq_start, nq_start + step), k)
        return _ratio(hits, step * min_k)

    def _range_hits(self, ids: Sequence[int], lims: Sequence[int], gt_queries: Iterable[int]) -> int:
        gt_lims = self._lims()
        hits = 0
        for row, query in enumerate(gt_queries):
            truth = set(self.ids[gt_lims[query] : gt_lims[query + 1]])
            hits += sum(1 for found in ids[lims[row] : lims[row + 1]] if found in truth)
        return hits

    def calc_hits(self, ids: Sequence[int], lims: Sequence[int], nq: int) -> int:
        """Range-search results of the first ``nq`` queries found in the ground truth."""
        return self._range_hits(ids, lims, range(nq))

    def calc_hits_from(self, ids: Sequence[int], lims: Sequence[int], start: int, num: int) -> int:
        """Range-search hits for ``num`` queries whose ground truth starts at ``start``."""
        return self._range_hits(ids, lims, range(start, start + num))

    def calc_range_recall(self, ids: Sequence[int], lims: Sequence[int], nq: int) -> float:
        """Share of the ground-truth neighbours that the results found."""
        return _ratio(self.calc_hits(ids, lims, nq), self._lims()[nq])

    def calc_accuracy(self, ids: Sequence[int], lims: Sequence[int], nq: int) -> float:
        """Share of the results that are ground-truth neighbours."""
        return _ratio(self.calc_hits(ids, lims, nq), lims[nq])

    def check_distance(
        self,
        ids: Sequence[int],
        distances: Sequence[float],
        lims: Sequence[int],
        nq: int,
    ) -> int:
        """Check result distances of known neighbours; return how many were compared.

        Raises DistanceMismatch on the first distance that differs from the
        ground truth by ``FLOAT_DIFF`` or more.
        """
        gt_lims = self._lims()
        checked = 0
        for query in range(nq):
            low, high = gt_lims[query], gt_lims[query + 1]
            truth = dict(zip(self.ids[low:high], self.distances[low:high]))
            start, end = lims[query], lims[query + 1]
            for found, distance in zip(ids[start:end], distances[start:end]):
                if found not in truth:
                    continue
                expected = truth[found]
                if not abs(distance - expected) < FLOAT_DIFF:
                    raise DistanceMismatch(query, found, distance, expected)
                checked += 1
        return checked