"""
Error taxonomy for greedy entropy outlier detection.

Every failure is fatal to a run: I let these propagate up to the command-line
boundary, where they are reported as a single human-readable message.
Output file problems are left as the built-in OSError.
"""

from typing import List, Optional


class OutlierDetectionError(Exception):
    """Base class for all outlier detection failures."""


class InputFormatError(OutlierDetectionError, ValueError):
    """Input data is unreadable, empty, or has rows of uneven dimension."""


class ParameterError(OutlierDetectionError, ValueError):
    """
    A run parameter cannot be satisfied.

    Raised when k exceeds the number of rows, or when a selection round finds
    no candidate that strictly lowers the entropy. In the latter case
    `selected` holds the rows committed in earlier rounds (in selection
    order); it is diagnostic only, the run still produces no result.
    """

    def __init__(self, message: str, selected: Optional[List[int]] = None):
        super().__init__(message)
        self.selected = list(selected) if selected else []
