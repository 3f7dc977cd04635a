"""
Factorized Shannon entropy of categorical data.

I treat the dimensions as independent and add up their marginal entropies:

    H = sum over dimensions of  -sum_v p(v) * log2(p(v)),   p(v) = count(v) / n_active

This is an approximation of the joint entropy of the rows, chosen on purpose:
it only needs the per-dimension occurrence counts, which can be updated in
O(d) when a row is removed.
"""

from typing import List

import numpy as np

from src.preprocessing.occurrence_table import OccurrenceTable
from src.preprocessing.outlier_errors import ParameterError


def _dimension_entropy(counts, n_active: int) -> float:
    # sorting makes the result depend only on the multiset of counts,
    # so tables that differ by relabelling produce bit-identical entropies
    values = np.sort(np.fromiter(counts, dtype=np.float64))
    if values.size == 0:
        return 0.0
    p = values / n_active
    # adding 0.0 turns a single-value dimension's -0.0 into 0.0
    return float(-np.sum(p * np.log2(p))) + 0.0


def dimension_entropies(table: OccurrenceTable, n_active: int) -> List[float]:
    """Entropy contribution of each dimension, in dimension order."""
    if n_active <= 0:
        raise ParameterError(
            f"Entropy is undefined for {n_active} active rows"
        )
    return [_dimension_entropy(counts, n_active) for counts in table.iter_counts()]


def entropy(table: OccurrenceTable, n_active: int) -> float:
    """Total factorized entropy (bits) of the active rows described by `table`."""
    total = 0.0
    for value in dimension_entropies(table, n_active):
        total += value
    return total
