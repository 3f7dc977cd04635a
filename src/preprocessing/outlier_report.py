"""
Round-by-round reporting for greedy outlier runs.

I turn a GreedyOutlierResult into a tidy table (one row per committed
round, preceded by the baseline) and an entropy trajectory chart so a run
can be inspected after the fact.
"""

from pathlib import Path
from typing import Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from src.preprocessing.greedy_outlier_detector import GreedyOutlierResult

REPORT_COLUMNS = ["round", "row_index", "entropy", "entropy_reduction"]


def build_round_report(result: GreedyOutlierResult) -> pd.DataFrame:
    """
    Round 0 is the baseline and has no row index. entropy_reduction is the
    drop relative to the previous round, so it is positive for every
    committed round.
    """
    records = [
        {"round": 0, "row_index": pd.NA, "entropy": result.baseline_entropy}
    ]
    for r in result.history:
        records.append(
            {"round": r.round, "row_index": r.row_index, "entropy": r.entropy}
        )

    report = pd.DataFrame(records)
    report["row_index"] = report["row_index"].astype("Int64")
    report["entropy_reduction"] = (-report["entropy"].diff()).fillna(0.0)
    return report[REPORT_COLUMNS]


def save_round_report(
    result: GreedyOutlierResult, save_path: Union[str, Path], precision: int = 6
) -> pd.DataFrame:
    report = build_round_report(result)
    report.to_csv(save_path, index=False, float_format=f"%.{precision}f")
    return report


def plot_entropy_trajectory(result: GreedyOutlierResult, save_path: Union[str, Path]) -> None:
    """Line chart of the active rows' entropy after each round."""
    report = build_round_report(result)

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(
        report["round"],
        report["entropy"],
        color="darkblue",
        lw=2,
        marker="o",
        label="Entropy of non-outlier rows",
    )
    ax.axhline(
        result.baseline_entropy,
        color="gray",
        linestyle="--",
        lw=1,
        label=f"Baseline = {result.baseline_entropy:.3f}",
    )

    # annotate each committed round with the row it removed
    for _, row in report.iloc[1:].iterrows():
        ax.annotate(
            str(row["row_index"]),
            (row["round"], row["entropy"]),
            textcoords="offset points",
            xytext=(0, 8),
            ha="center",
            fontsize=8,
        )

    ax.set_xlabel("Round", fontsize=11)
    ax.set_ylabel("Entropy (bits)", fontsize=11)
    ax.set_title(
        f"Greedy Entropy Outlier Selection ({len(result.outliers)} of {result.n_rows} rows)",
        fontsize=12,
        fontweight="bold",
    )
    ax.legend(loc="upper right")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(save_path, dpi=300, bbox_inches="tight")
    plt.close(fig)
