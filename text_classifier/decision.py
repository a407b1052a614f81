"""
Decision rule turning class scores into a prediction.
"""

from typing import Sequence

import numpy as np

from .errors import EmptyInputError


def decide(scores: Sequence[float]) -> int:
    """
    Return the index of the highest score.

    Ties resolve to the lowest index.

    Raises:
        EmptyInputError: If ``scores`` is empty
    """
    values = np.asarray(scores, dtype=np.float64).ravel()
    if values.size == 0:
        raise EmptyInputError("Cannot decide over an empty score vector")
    # np.argmax returns the first occurrence of the maximum
    return int(np.argmax(values))
