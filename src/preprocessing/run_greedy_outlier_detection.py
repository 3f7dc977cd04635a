"""
Command-line interface for greedy entropy outlier detection.

Usage:
    python -m src.preprocessing.run_greedy_outlier_detection -k 2 -d data.csv
    python -m src.preprocessing.run_greedy_outlier_detection -k 2 -d data.csv -o cleaned.csv
    python -m src.preprocessing.run_greedy_outlier_detection -k 5 -d data.csv --report rounds.csv --plot rounds.png
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config.outlier_settings import load_settings, setup_logging
from src.preprocessing.categorical_dataset import load_dataset, write_inliers
from src.preprocessing.entropy_estimator import entropy
from src.preprocessing.greedy_outlier_detector import select_outliers
from src.preprocessing.outlier_errors import OutlierDetectionError
from src.preprocessing.outlier_report import plot_entropy_trajectory, save_round_report


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid non-negative integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"invalid non-negative integer: {value!r}")
    return number


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Mark the k rows of a categorical data file whose removal "
        "most reduces its Shannon entropy"
    )
    parser.add_argument(
        "-k",
        "--outliers",
        type=non_negative_int,
        required=True,
        help="Number of outliers",
    )
    parser.add_argument(
        "-d", "--data", type=str, required=True, help="Path to input data file"
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="OPTIONAL: Path to output file which contains non-outlier data",
    )
    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="OPTIONAL: Path to save the per-round entropy report CSV",
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="OPTIONAL: Path to save the entropy trajectory chart (PNG)",
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )
    return parser.parse_args(argv)


def staging_path(target: Path) -> Path:
    """Hidden sibling of `target` that keeps its suffix (matplotlib picks the format from it)."""
    return target.with_name(f".{target.stem}.partial{target.suffix}")


def write_outputs(outputs: List[Tuple[str, Path, Callable[[Path], object]]]) -> None:
    """
    Write every output or none of them.

    Each writer targets a staging file beside its destination; only after all
    of them succeed are the staging files moved into place with os.replace.
    On any failure the staging files are removed and the error propagates.
    """
    staged = []
    try:
        for _, target, write in outputs:
            staging = staging_path(target)
            staged.append(staging)
            write(staging)
    except Exception:
        for staging in staged:
            staging.unlink(missing_ok=True)
        raise

    for (label, target, _), staging in zip(outputs, staged):
        os.replace(staging, target)
        print(f"{label} saved to: {target}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings()
        setup_logging(
            level="WARNING" if args.quiet else settings.log_level,
            log_file=settings.log_file,
        )
        precision = settings.report_float_precision

        dataset = load_dataset(args.data)
        print(
            f"Loaded {dataset.n_rows} datapoints, each with "
            f"{dataset.n_dimensions} dimensions."
        )
        baseline = entropy(dataset.occurrences, dataset.n_rows)
        print(f"Entropy of original data: {baseline:.{precision}f}")

        result = select_outliers(dataset, args.outliers)
        print(f"Entropy of data without outliers: {result.entropy:.{precision}f}")
        print("Outliers: " + ", ".join(str(i) for i in result.sorted_outliers))

        outputs = []
        if args.output:
            outputs.append(
                (
                    "Non-outlier data",
                    Path(args.output),
                    lambda path: write_inliers(path, result.outliers, dataset.rows),
                )
            )
        if args.report:
            outputs.append(
                (
                    "Round report",
                    Path(args.report),
                    lambda path: save_round_report(result, path, precision=precision),
                )
            )
        if args.plot:
            outputs.append(
                (
                    "Entropy chart",
                    Path(args.plot),
                    lambda path: plot_entropy_trajectory(result, path),
                )
            )

        write_outputs(outputs)

    except (OutlierDetectionError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
