"""
Greedy entropy-based outlier detection for categorical data.

As proposed in

    He Z., Deng S., Xu X., Huang J.Z. (2006)
    A Fast Greedy Algorithm for Outlier Mining.
    PAKDD 2006, Lecture Notes in Computer Science, vol 3918. Springer.

Architecture:
    - select_outliers: the greedy search over a CategoricalDataset
    - GreedyOutlierResult: outlier set, final entropy and per-round history
    - GreedyEntropyOutlierDetector: scikit-learn style wrapper (fit/transform)

Each round tries to deactivate every remaining row, keeps the one whose
removal gives the lowest entropy, and commits it. Exactly k rounds run, or
the search fails as soon as a round cannot strictly lower the entropy.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from src.preprocessing.categorical_dataset import CategoricalDataset, inlier_rows
from src.preprocessing.entropy_estimator import entropy
from src.preprocessing.outlier_errors import ParameterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlierRound:
    round: int
    row_index: int
    entropy: float


@dataclass
class GreedyOutlierResult:
    outliers: FrozenSet[int]
    entropy: float
    baseline_entropy: float
    n_rows: int
    history: List[OutlierRound] = field(default_factory=list)

    @property
    def sorted_outliers(self) -> List[int]:
        return sorted(self.outliers)

    @property
    def selection_order(self) -> List[int]:
        return [r.row_index for r in self.history]

    def summary(self, precision: int = 4) -> str:
        lines = [
            f"Rows: {self.n_rows:,}",
            f"Outliers: {len(self.outliers)}",
            f"Baseline entropy: {self.baseline_entropy:.{precision}f}",
            f"Final entropy:    {self.entropy:.{precision}f}",
            f"Entropy reduction: {self.baseline_entropy - self.entropy:.{precision}f}",
        ]
        return "\n".join(lines)


def select_outliers(dataset: CategoricalDataset, k: int) -> GreedyOutlierResult:
    """
    Mark exactly k rows as outliers by greedy entropy minimization.

    The dataset itself is not modified; the search works on its own copy of
    the occurrence table.

    Raises:
        ParameterError: k is negative or exceeds the number of rows, or some
            round finds no candidate that strictly lowers the entropy.
    """
    n = dataset.n_rows
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise ParameterError(f"k must be an integer, got {k!r}")
    k = int(k)
    if k < 0:
        raise ParameterError(f"k must be non-negative, got {k}")
    if k > n:
        raise ParameterError(f"k exceeds dataset size: k={k}, rows={n}")

    active = dataset.occurrences.copy()
    baseline = entropy(active, n)
    best_entropy = baseline
    logger.info(f"Baseline entropy over {n} rows: {baseline:.6f}")

    outliers = set()
    history: List[OutlierRound] = []

    while len(outliers) < k:
        n_remaining = n - len(outliers) - 1
        best_index: Optional[int] = None

        # removing the last active row leaves nothing to measure; a single
        # row already has zero entropy, so that round cannot improve
        if n_remaining > 0:
            for index in range(n):
                if index in outliers:
                    continue
                candidate = active.simulate_removal(dataset.rows[index])
                candidate_entropy = entropy(candidate, n_remaining)
                # strict: the first row reaching the minimum keeps it
                if candidate_entropy < best_entropy:
                    best_entropy = candidate_entropy
                    best_index = index

        if best_index is None:
            logger.warning(
                f"Round {len(outliers) + 1}: no removal lowers entropy "
                f"{best_entropy:.6f}, aborting after {len(outliers)} of {k} outliers"
            )
            raise ParameterError(
                "k is set too high, no further improvement possible by marking "
                f"outliers (found {len(outliers)} of {k})",
                selected=[r.row_index for r in history],
            )

        outliers.add(best_index)
        active.commit_removal(dataset.rows[best_index])
        history.append(OutlierRound(len(outliers), best_index, best_entropy))
        logger.info(
            f"Round {len(outliers)}/{k}: marked row {best_index}, entropy {best_entropy:.6f}"
        )

    return GreedyOutlierResult(
        outliers=frozenset(outliers),
        entropy=best_entropy,
        baseline_entropy=baseline,
        n_rows=n,
        history=history,
    )


class GreedyEntropyOutlierDetector(BaseEstimator, TransformerMixin):
    """
    scikit-learn style interface to the greedy search.

    fit() accepts a DataFrame or any sequence of equal-length rows; values
    are compared by their string form. transform() drops the fitted outliers
    and keeps the original row order.
    """

    def __init__(self, n_outliers: int = 1):
        self.n_outliers = n_outliers

    def fit(self, X, y=None) -> "GreedyEntropyOutlierDetector":
        dataset = _as_dataset(X)
        result = select_outliers(dataset, self.n_outliers)

        self.result_ = result
        self.outliers_ = np.asarray(result.sorted_outliers, dtype=int)
        self.entropy_ = result.entropy
        self.baseline_entropy_ = result.baseline_entropy
        self.history_ = list(result.history)
        self.n_rows_ = dataset.n_rows
        return self

    def get_support(self) -> np.ndarray:
        """Boolean mask over the fitted rows, True for inliers."""
        self._check_fitted()
        mask = np.ones(self.n_rows_, dtype=bool)
        mask[self.outliers_] = False
        return mask

    def transform(self, X):
        self._check_fitted()
        if isinstance(X, pd.DataFrame):
            if len(X) != self.n_rows_:
                raise ValueError(
                    f"X has {len(X)} rows, detector was fitted on {self.n_rows_}"
                )
            return X.iloc[self.get_support()]

        rows = X.rows if isinstance(X, CategoricalDataset) else [tuple(row) for row in X]
        if len(rows) != self.n_rows_:
            raise ValueError(
                f"X has {len(rows)} rows, detector was fitted on {self.n_rows_}"
            )
        return list(inlier_rows(rows, set(self.outliers_.tolist())))

    def _check_fitted(self) -> None:
        if not hasattr(self, "result_"):
            raise RuntimeError(
                "GreedyEntropyOutlierDetector is not fitted yet. Call fit() first."
            )


def _as_dataset(X) -> CategoricalDataset:
    if isinstance(X, CategoricalDataset):
        return X
    if isinstance(X, pd.DataFrame):
        return CategoricalDataset.from_frame(X)
    return CategoricalDataset.from_rows([str(v) for v in row] for row in X)


def create_outlier_detector(n_outliers: int = 1) -> GreedyEntropyOutlierDetector:
    """Factory function to create a configured detector."""
    return GreedyEntropyOutlierDetector(n_outliers=n_outliers)
