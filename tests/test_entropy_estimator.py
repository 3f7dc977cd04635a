"""
Unit tests for the factorized entropy estimator.
"""

import sys
from pathlib import Path
import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.preprocessing.entropy_estimator import dimension_entropies, entropy
from src.preprocessing.occurrence_table import OccurrenceTable
from src.preprocessing.outlier_errors import ParameterError


@pytest.fixture
def sample_table():
    return OccurrenceTable.build([("1", "2", "a"), ("0", "1", "b"), ("0", "2", "c")])


def binary_entropy(p):
    return -(p * np.log2(p) + (1 - p) * np.log2(1 - p))


class TestEntropy:

    def test_baseline_value(self, sample_table):
        expected = 2 * binary_entropy(1 / 3) + np.log2(3)
        assert np.isclose(entropy(sample_table, 3), expected)
        assert entropy(sample_table, 3) == pytest.approx(3.4215, abs=1e-4)

    def test_per_dimension_terms(self, sample_table):
        terms = dimension_entropies(sample_table, 3)
        assert len(terms) == 3
        assert np.isclose(terms[0], binary_entropy(1 / 3))
        assert np.isclose(terms[1], binary_entropy(1 / 3))
        assert np.isclose(terms[2], np.log2(3))

    def test_single_value_dimension_is_zero(self):
        table = OccurrenceTable.build([("a", "x"), ("a", "y")])
        terms = dimension_entropies(table, 2)
        assert terms[0] == 0.0
        assert terms[1] == 1.0

    def test_identical_rows_have_zero_entropy(self):
        table = OccurrenceTable.build([("a", "b")] * 4)
        assert entropy(table, 4) == 0.0

    def test_uniform_dimension_is_log2_of_cardinality(self):
        table = OccurrenceTable.build([(str(i),) for i in range(8)])
        assert entropy(table, 8) == pytest.approx(3.0)

    def test_non_negative(self):
        rng = np.random.default_rng(7)
        rows = [tuple(rng.choice(["a", "b", "c", "d"], size=5)) for _ in range(40)]
        table = OccurrenceTable.build(rows)
        assert entropy(table, 40) >= 0.0
        assert all(term >= 0.0 for term in dimension_entropies(table, 40))

    def test_same_count_multiset_gives_identical_value(self):
        # counts {2, 1} in different value orders must compare equal exactly
        left = OccurrenceTable.build([("a",), ("a",), ("b",)])
        right = OccurrenceTable.build([("b",), ("a",), ("a",)])
        assert entropy(left, 3) == entropy(right, 3)

    def test_empty_table(self):
        table = OccurrenceTable.build([("a",)])
        table.commit_removal(("a",))
        assert dimension_entropies(table, 1) == [0.0]


class TestEntropyGuards:

    def test_zero_active_rows_rejected(self, sample_table):
        with pytest.raises(ParameterError):
            entropy(sample_table, 0)

    def test_negative_active_rows_rejected(self, sample_table):
        with pytest.raises(ParameterError):
            dimension_entropies(sample_table, -1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
