"""
Categorical dataset model, flat-file loader and non-outlier writer.

File format (input and output):
    - one row per line
    - fields separated by commas, taken verbatim (no quoting, no escaping,
      no whitespace trimming; only the line terminator is removed)
    - a trailing comma is a trailing empty field, so "c,d," has three fields;
      such rows must still match the width of every other row

Example:
    1,2,a
    0,1,b
    0,2,c
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Collection, Iterable, Iterator, List, Sequence, Tuple, TypeVar, Union

import pandas as pd

from src.preprocessing.occurrence_table import OccurrenceTable
from src.preprocessing.outlier_errors import InputFormatError

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ","

PathLike = Union[str, Path]
RowT = TypeVar("RowT")


@dataclass
class CategoricalDataset:
    rows: List[Tuple[str, ...]]
    occurrences: OccurrenceTable = field(repr=False)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]]) -> "CategoricalDataset":
        """Validate uniform width and build the initial occurrence table."""
        rows = [tuple(row) for row in rows]
        if not rows:
            raise InputFormatError("Dataset is empty, number of dimensions is undefined")

        n_dimensions = len(rows[0])
        if n_dimensions == 0:
            raise InputFormatError("Data points have no dimensions")

        for index, row in enumerate(rows):
            if len(row) != n_dimensions:
                raise InputFormatError(
                    f"Data points have uneven dimensions: row {index} has "
                    f"{len(row)} fields, expected {n_dimensions}"
                )

        return cls(rows=rows, occurrences=OccurrenceTable.build(rows))

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "CategoricalDataset":
        """Every cell is converted to its string form; the index is ignored."""
        return cls.from_rows(df.astype(str).itertuples(index=False, name=None))

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_dimensions(self) -> int:
        return len(self.rows[0])

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, dtype=str)

    def inliers(self, outliers: Collection[int]) -> List[Tuple[str, ...]]:
        """Rows whose index is not an outlier, in original order."""
        return list(inlier_rows(self.rows, outliers))


def inlier_rows(rows: Iterable[RowT], outliers: Collection[int]) -> Iterator[RowT]:
    for index, row in enumerate(rows):
        if index not in outliers:
            yield row


def parse_lines(lines: Iterable[str]) -> CategoricalDataset:
    return CategoricalDataset.from_rows(line.split(FIELD_SEPARATOR) for line in lines)


def load_dataset(file_path: PathLike) -> CategoricalDataset:
    """
    Read a comma-separated categorical data file.

    Raises InputFormatError when the file cannot be read, is empty, or its
    rows do not all have the same number of fields.
    """
    path = Path(file_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputFormatError(f"Could not read data file {path}: {e}") from e

    lines = content.split("\n")
    # a final newline terminates the last row, it does not start a new one
    if lines[-1] == "":
        lines.pop()

    dataset = parse_lines(lines)
    logger.info(
        f"Loaded {dataset.n_rows} rows with {dataset.n_dimensions} dimensions from {path}"
    )
    return dataset


def format_row(row: Sequence[str]) -> str:
    return FIELD_SEPARATOR.join(row)


def write_inliers(
    out_file_path: PathLike,
    outliers: Collection[int],
    rows: Sequence[Sequence[str]],
) -> int:
    """
    Write every non-outlier row to `out_file_path` in the input format.

    OSError from opening or writing the file propagates to the caller.
    Returns the number of rows written.
    """
    path = Path(out_file_path)
    written = 0
    with open(path, "w", encoding="utf-8", newline="") as f:
        for row in inlier_rows(rows, outliers):
            f.write(format_row(row) + "\n")
            written += 1

    logger.info(f"Wrote {written} non-outlier rows to {path}")
    return written
