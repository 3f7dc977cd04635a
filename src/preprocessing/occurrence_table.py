"""
Per-dimension occurrence counts for categorical rows.

The table maps, for each dimension, every categorical value to the number of
active (non-outlier) rows holding it. Only strictly positive counts are
stored: a value whose count drops to zero is deleted, so every stored value
has a non-zero probability when the entropy is computed.
"""

from typing import Dict, Iterable, List, Sequence

import pandas as pd

from src.preprocessing.outlier_errors import ParameterError

Row = Sequence[str]


class OccurrenceTable:
    """Occurrence counts of active rows, one mapping per dimension."""

    def __init__(self, dimensions: List[Dict[str, int]]):
        self._dimensions = dimensions

    @classmethod
    def build(cls, rows: Iterable[Row]) -> "OccurrenceTable":
        """
        Count value occurrences in every dimension with a single pass.

        All rows must share the same width; the dataset loader validates
        this before calling.
        """
        frame = pd.DataFrame([tuple(row) for row in rows], dtype=str)
        dimensions = [
            {value: int(count) for value, count in frame[col].value_counts(sort=False).items()}
            for col in frame.columns
        ]
        return cls(dimensions)

    @property
    def n_dimensions(self) -> int:
        return len(self._dimensions)

    @property
    def n_active(self) -> int:
        """Number of active rows; every dimension sums to the same value."""
        if not self._dimensions:
            return 0
        return sum(self._dimensions[0].values())

    def counts(self, dimension: int) -> Dict[str, int]:
        """Read-only view of one dimension's counts (returned as a copy)."""
        return dict(self._dimensions[dimension])

    def iter_counts(self) -> Iterable[Iterable[int]]:
        for counts in self._dimensions:
            yield counts.values()

    def copy(self) -> "OccurrenceTable":
        return OccurrenceTable([dict(counts) for counts in self._dimensions])

    def simulate_removal(self, row: Row) -> "OccurrenceTable":
        """Return the table that deactivating `row` would produce, leaving self untouched."""
        candidate = self.copy()
        candidate.commit_removal(row)
        return candidate

    def commit_removal(self, row: Row) -> None:
        """Deactivate `row` in place, dropping values whose count reaches zero."""
        if len(row) != self.n_dimensions:
            raise ParameterError(
                f"Row has {len(row)} dimensions, table has {self.n_dimensions}"
            )
        # validate before touching anything so a bad row leaves the table intact
        for i, value in enumerate(row):
            if value not in self._dimensions[i]:
                raise ParameterError(
                    f"Value {value!r} is not active in dimension {i}"
                )

        for i, value in enumerate(row):
            counts = self._dimensions[i]
            remaining = counts[value] - 1
            if remaining == 0:
                del counts[value]
            else:
                counts[value] = remaining

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OccurrenceTable):
            return NotImplemented
        return self._dimensions == other._dimensions

    def __repr__(self) -> str:
        return (
            f"OccurrenceTable(n_dimensions={self.n_dimensions}, "
            f"n_active={self.n_active})"
        )
