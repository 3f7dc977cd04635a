# Runtime configuration for greedy entropy outlier detection
# Defaults live here; deployments override them through config/.env or the environment

import logging
import os
from pathlib import Path
from typing import NamedTuple, Optional, Union

from dotenv import load_dotenv

from src.preprocessing.outlier_errors import ParameterError

CONFIG_DIR = Path(__file__).parent
DEFAULT_ENV_FILE = CONFIG_DIR / ".env"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class DetectorSettings(NamedTuple):
    """
    I keep every tunable that is not an algorithm input in one place
    so the CLI and library callers share the same defaults
    """

    log_level: str
    log_file: Optional[str]
    report_float_precision: int


DEFAULT_SETTINGS = {
    "log_level": "INFO",
    "log_file": None,  # console only unless a file is configured
    "report_float_precision": 4,  # decimals printed for entropy values
}

ENV_PREFIX = "GREEDY_OUTLIERS_"


def load_settings(env_file: Optional[Union[str, Path]] = None) -> DetectorSettings:
    """
    Build settings from defaults, then config/.env, then the process environment.

    Variables already present in the environment win over the .env file,
    matching python-dotenv's default (override=False).
    """
    env_path = Path(env_file) if env_file is not None else DEFAULT_ENV_FILE
    if env_path.exists():
        load_dotenv(env_path)

    log_level = os.getenv(ENV_PREFIX + "LOG_LEVEL", DEFAULT_SETTINGS["log_level"]).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ParameterError(f"Unknown log level: {log_level}")

    log_file = os.getenv(ENV_PREFIX + "LOG_FILE") or DEFAULT_SETTINGS["log_file"]

    raw_precision = os.getenv(ENV_PREFIX + "FLOAT_PRECISION")
    if raw_precision is None:
        precision = DEFAULT_SETTINGS["report_float_precision"]
    else:
        try:
            precision = int(raw_precision)
        except ValueError:
            raise ParameterError(
                f"{ENV_PREFIX}FLOAT_PRECISION must be an integer, got {raw_precision!r}"
            ) from None
        if precision < 0:
            raise ParameterError(
                f"{ENV_PREFIX}FLOAT_PRECISION must be non-negative, got {precision}"
            )

    return DetectorSettings(
        log_level=log_level,
        log_file=log_file,
        report_float_precision=precision,
    )


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure root logging the same way for every entry point.
    A file handler is added only when a log file is configured.
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
