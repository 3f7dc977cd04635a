"""
Unit tests for the per-dimension occurrence table.
"""

import sys
from pathlib import Path
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.preprocessing.occurrence_table import OccurrenceTable
from src.preprocessing.outlier_errors import ParameterError


@pytest.fixture
def sample_rows():
    return [("1", "2", "a"), ("0", "1", "b"), ("0", "2", "c")]


class TestBuild:

    def test_counts_per_dimension(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        assert table.n_dimensions == 3
        assert table.counts(0) == {"1": 1, "0": 2}
        assert table.counts(1) == {"2": 2, "1": 1}
        assert table.counts(2) == {"a": 1, "b": 1, "c": 1}

    def test_every_dimension_sums_to_active_rows(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        assert table.n_active == 3
        for counts in table.iter_counts():
            assert sum(counts) == 3

    def test_values_kept_verbatim(self):
        table = OccurrenceTable.build([(" a", ""), ("a", "")])
        assert table.counts(0) == {" a": 1, "a": 1}
        assert table.counts(1) == {"": 2}

    def test_counts_returns_copy(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        table.counts(0)["1"] = 100
        assert table.counts(0)["1"] == 1


class TestSimulateRemoval:

    def test_does_not_mutate_source(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        before = table.copy()
        candidate = table.simulate_removal(sample_rows[0])

        assert table == before
        assert candidate != table
        assert candidate.n_active == 2

    def test_zero_counts_are_deleted(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        candidate = table.simulate_removal(sample_rows[0])

        assert "1" not in candidate.counts(0)
        assert candidate.counts(0) == {"0": 2}
        assert candidate.counts(2) == {"b": 1, "c": 1}

    def test_candidates_are_independent(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        first = table.simulate_removal(sample_rows[1])
        second = table.simulate_removal(sample_rows[2])

        assert first.counts(2) == {"a": 1, "c": 1}
        assert second.counts(2) == {"a": 1, "b": 1}


class TestCommitRemoval:

    def test_matches_rebuild_over_remaining_rows(self):
        rows = [
            ("a", "x"),
            ("b", "y"),
            ("a", "x"),
            ("a", "y"),
            ("c", "z"),
            ("a", "x"),
        ]
        table = OccurrenceTable.build(rows)
        removed = {1, 4, 5}
        for index in sorted(removed):
            table.commit_removal(rows[index])

        remaining = [row for i, row in enumerate(rows) if i not in removed]
        assert table == OccurrenceTable.build(remaining)
        assert table.n_active == 3

    def test_removing_all_rows_empties_table(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        for row in sample_rows:
            table.commit_removal(row)

        assert table.n_active == 0
        assert all(len(list(counts)) == 0 for counts in table.iter_counts())

    def test_inactive_value_rejected(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        table.commit_removal(sample_rows[0])
        with pytest.raises(ParameterError):
            table.commit_removal(sample_rows[0])

    def test_failed_removal_leaves_table_intact(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        before = table.copy()
        with pytest.raises(ParameterError):
            table.commit_removal(("0", "2", "zzz"))
        assert table == before

    def test_wrong_width_rejected(self, sample_rows):
        table = OccurrenceTable.build(sample_rows)
        with pytest.raises(ParameterError):
            table.commit_removal(("0", "2"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
